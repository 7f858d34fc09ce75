"""
API endpoints для работы с товарами.

Содержит CRUD операции для товаров с поддержкой фильтрации,
сортировки, пагинации и привязки к коллекциям.
"""

from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from catalog.core.config import settings
from catalog.db.database import get_db
from catalog.schemas.pagination import OffsetPagination
from catalog.schemas.product import (
    FeaturedUpdate,
    ProductCollectionsUpdate,
    ProductCreate,
    ProductFilters,
    ProductOut,
    ProductPage,
    ProductUpdate,
    SortField,
    VariantIn,
    VariantOut,
)
from catalog.services import product_service

router = APIRouter()


@router.get("", response_model=ProductPage, response_model_by_alias=True)
def list_products(
    db: Session = Depends(get_db),
    type: Optional[str] = Query(None, description="Тип или категория товара, 'all' - все"),
    price_min: Optional[float] = Query(None, alias="priceMin", ge=0),
    price_max: Optional[float] = Query(None, alias="priceMax", ge=0),
    brand: List[str] = Query([], description="Бренды (параметр повторяется)"),
    color: List[str] = Query([], description="Цвета вариантов (параметр повторяется)"),
    is_new: Optional[bool] = Query(None, alias="isNew"),
    is_sale: Optional[bool] = Query(None, alias="isSale"),
    is_featured: Optional[bool] = Query(None, alias="isFeatured"),
    collection: Optional[str] = Query(None, description="Slug коллекции"),
    search: Optional[str] = Query(None, description="Поиск по названию и описанию"),
    sort: SortField = Query("id", description="Поле для сортировки"),
    direction: Literal["asc", "desc"] = Query("asc"),
    index_from: int = Query(0, alias="indexFrom", ge=0, description="Смещение"),
    limit: Optional[int] = Query(None, ge=1, le=100, description="Размер страницы"),
):
    """
    Получить список товаров с фильтрацией, сортировкой и пагинацией.

    Returns:
        ProductPage: products, total, totalPages, hasMore, currentPage
    """
    filters = ProductFilters(
        type=type,
        price_min=price_min,
        price_max=price_max,
        brand=brand,
        color=color,
        is_new=is_new,
        is_sale=is_sale,
        is_featured=is_featured,
        collection=collection,
        search=search,
        sort=sort,
        direction=direction,
    )
    pagination = OffsetPagination(
        index_from=index_from, limit=limit or settings.DEFAULT_PAGE_LIMIT
    )
    return product_service.list_products(db, filters, pagination)


@router.get("/categories", response_model=List[str])
def get_categories(db: Session = Depends(get_db)):
    """Получить список уникальных категорий."""
    return product_service.list_categories(db)


@router.get("/brands", response_model=List[str])
def get_brands(db: Session = Depends(get_db)):
    """Получить список уникальных брендов."""
    return product_service.list_brands(db)


@router.get("/colors", response_model=List[str])
def get_colors(
    db: Session = Depends(get_db),
    type: Optional[str] = Query(None, description="Фильтр по типу товара"),
):
    """Получить список цветов из вариантов товаров."""
    return product_service.list_colors(db, type)


@router.patch("/featured")
def set_featured(payload: FeaturedUpdate, db: Session = Depends(get_db)):
    """Массово отметить товары как избранные (или снять отметку)."""
    updated = product_service.set_featured(db, payload.ids, payload.value)
    return {"updated": updated}


@router.get("/{product_id}", response_model=ProductOut)
def get_product(product_id: int, db: Session = Depends(get_db)):
    """
    Получить товар по ID.

    Raises:
        NotFoundError: Если товар не найден
    """
    return product_service.get_product(db, product_id)


@router.post("", response_model=ProductOut, status_code=201)
def create_product(payload: ProductCreate, db: Session = Depends(get_db)):
    product = product_service.create_product(db, payload)
    return product_service.get_product(db, product.id)


@router.put("/{product_id}", response_model=ProductOut)
def update_product(product_id: int, payload: ProductUpdate, db: Session = Depends(get_db)):
    product_service.update_product(db, product_id, payload)
    return product_service.get_product(db, product_id)


@router.delete("/{product_id}", status_code=204)
def delete_product(product_id: int, db: Session = Depends(get_db)):
    product_service.delete_product(db, product_id)
    return Response(status_code=204)


@router.post("/{product_id}/variants", response_model=List[VariantOut], status_code=201)
def add_variants(product_id: int, payload: List[VariantIn], db: Session = Depends(get_db)):
    """Добавить варианты (размер/цвет) к товару."""
    return product_service.add_variants(db, product_id, payload)


@router.put("/{product_id}/collections", response_model=ProductOut)
def set_collections(
    product_id: int, payload: ProductCollectionsUpdate, db: Session = Depends(get_db)
):
    """Заменить набор коллекций товара."""
    product_service.set_product_collections(db, product_id, payload.collections)
    return product_service.get_product(db, product_id)
