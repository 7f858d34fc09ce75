"""
API endpoints для работы с коллекциями.

Иерархия коллекций, выборка списком или деревом, привязка
товаров и избранные бренды.
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from catalog.core.errors import ValidationError
from catalog.db.database import get_db
from catalog.schemas.collection import (
    CollectionCreate,
    CollectionNode,
    CollectionOut,
    CollectionQueryOptions,
    CollectionUpdate,
    FeaturedToggle,
    ProductBatch,
    ProductLink,
)
from catalog.schemas.product import ProductOut
from catalog.services import collection_service

router = APIRouter()


def _parse_parent_id(value: str) -> Optional[int]:
    if value.lower() == "null":
        return None
    try:
        return int(value)
    except ValueError:
        raise ValidationError("parent_id must be an integer or 'null'")


@router.get("")
def list_collections(
    db: Session = Depends(get_db),
    parent_id: Optional[str] = Query(
        None, description="ID родителя или 'null' для корневых коллекций"
    ),
    collection_type: Optional[str] = Query(None, description="Тип коллекции"),
    include_inactive: bool = Query(False, description="Включить неактивные"),
    flat: bool = Query(True, description="Плоский список вместо дерева"),
    search: Optional[str] = Query(None, description="Поиск по названию"),
):
    """
    Получить коллекции.

    Args:
        db: Сессия базы данных
        parent_id: Фильтр по родителю (число или 'null')
        collection_type: Фильтр по типу (custom, brand, ...)
        include_inactive: Включить неактивные коллекции
        flat: Плоский список (по умолчанию) или дерево
        search: Поиск по названию (регистронезависимый)

    Returns:
        Список коллекций или корневых узлов дерева
    """
    options: Dict[str, Any] = {
        "collection_type": collection_type,
        "include_inactive": include_inactive,
        "flat": flat,
        "search": search,
    }
    if parent_id is not None:
        options["parent_id"] = _parse_parent_id(parent_id)
    return collection_service.list_collections(db, CollectionQueryOptions(**options))


@router.get("/tree", response_model=List[CollectionNode])
def get_tree(
    db: Session = Depends(get_db),
    collection_type: Optional[str] = Query(None),
    include_inactive: bool = Query(False),
):
    """Дерево коллекций от корня."""
    return collection_service.get_collection_tree(db, collection_type, include_inactive)


@router.get("/featured-brands", response_model=List[CollectionOut])
def get_featured_brands(db: Session = Depends(get_db)):
    return collection_service.list_featured_brands(db)


@router.get("/by-slug/{slug}", response_model=CollectionOut)
def get_by_slug(slug: str, db: Session = Depends(get_db)):
    collection, products = collection_service.get_by_slug_with_products(db, slug)
    item = CollectionOut.model_validate(collection)
    item.products_count = len(products)
    return item


@router.get("/{slug}")
def get_collection_with_products(slug: str, db: Session = Depends(get_db)):
    """
    Получить коллекцию по slug вместе с товарами.

    Returns:
        dict: collection, products, products_count

    Raises:
        NotFoundError: Если коллекция не найдена
    """
    collection, products = collection_service.get_by_slug_with_products(db, slug)
    item = CollectionOut.model_validate(collection)
    item.products_count = len(products)
    return {
        "collection": item,
        "products": [ProductOut.model_validate(p) for p in products],
        "products_count": len(products),
    }


@router.post("", response_model=CollectionOut, status_code=201)
def create_collection(payload: CollectionCreate, db: Session = Depends(get_db)):
    return collection_service.create_collection(db, payload)


@router.put("/{collection_id}", response_model=CollectionOut)
def update_collection(
    collection_id: int, payload: CollectionUpdate, db: Session = Depends(get_db)
):
    return collection_service.update_collection(db, collection_id, payload)


@router.delete("/{collection_id}")
def delete_collection(collection_id: int, db: Session = Depends(get_db)):
    """Удалить коллекцию вместе со всеми дочерними."""
    deleted = collection_service.delete_collection(db, collection_id)
    return {"deleted": deleted}


@router.patch("/{collection_id}/toggle-featured", response_model=CollectionOut)
def toggle_featured(
    collection_id: int, payload: FeaturedToggle, db: Session = Depends(get_db)
):
    """Отметить бренд как избранный (или снять отметку)."""
    return collection_service.set_brand_featured(db, collection_id, payload.is_featured)


@router.post("/{collection_id}/products", status_code=201)
def add_product(collection_id: int, payload: ProductLink, db: Session = Depends(get_db)):
    created = collection_service.add_product(db, collection_id, payload.product_id)
    return {"collection_id": collection_id, "product_id": payload.product_id, "created": created}


@router.post("/{collection_id}/products/batch")
def add_products(
    collection_id: int,
    payload: ProductBatch,
    db: Session = Depends(get_db),
    full_update: bool = Query(
        False, alias="fullUpdate", description="Убрать товары, не указанные в запросе"
    ),
):
    """
    Добавить несколько товаров в коллекцию и во все ее родительские.

    Returns:
        dict: ID товаров коллекции после обновления
    """
    product_ids = collection_service.add_products(
        db, collection_id, payload.product_ids, full_update=full_update
    )
    return {"collection_id": collection_id, "product_ids": product_ids}


@router.delete("/{collection_id}/products/{product_id}")
def remove_product(
    collection_id: int,
    product_id: int,
    db: Session = Depends(get_db),
    remove_from_parents: bool = Query(False, alias="removeFromParents"),
):
    removed_from = collection_service.remove_product(
        db, collection_id, product_id, remove_from_parents=remove_from_parents
    )
    return {"product_id": product_id, "removed_from": removed_from}
