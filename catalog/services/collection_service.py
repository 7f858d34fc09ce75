"""
Репозиторий коллекций.

CRUD и иерархические выборки по коллекциям, а также управление
связями товар-коллекция. Все многошаговые операции записи выполняются
в одной транзакции.
"""

import logging
from collections import defaultdict
from typing import Dict, Iterable, List, Optional, Tuple, Union

from sqlalchemy import delete, func, select, update
from sqlalchemy.orm import Session, selectinload

from catalog.core.errors import ConflictError, NotFoundError, ValidationError
from catalog.db.database import transaction
from catalog.db.models import (
    Collection,
    MegaMenuCollection,
    Product,
    ProductCollection,
)
from catalog.schemas.collection import (
    CollectionCreate,
    CollectionNode,
    CollectionOut,
    CollectionQueryOptions,
    CollectionUpdate,
)
from catalog.services.slug import slugify

logger = logging.getLogger(__name__)

_SLUG_MAX_LENGTH = Collection.__table__.c.slug.type.length

# Поля, которые нельзя обнулить частичным обновлением
_NON_NULLABLE_FIELDS = {"name", "slug", "collection_type", "is_active"}


# ==================== ВЫБОРКИ ====================


def _product_counts(db: Session) -> Dict[int, int]:
    """Количество товаров, напрямую связанных с каждой коллекцией."""
    rows = db.execute(
        select(ProductCollection.collection_id, func.count(ProductCollection.product_id))
        .group_by(ProductCollection.collection_id)
    ).all()
    return {collection_id: count for collection_id, count in rows}


def build_tree(
    nodes: List[CollectionNode], root_id: Optional[int] = None
) -> List[CollectionNode]:
    """
    Собирает дерево из плоского списка узлов.

    Узлы группируются по parent_id, затем дети рекурсивно
    прикрепляются начиная с root_id. Узлы, чей родитель отсутствует
    в списке, в дерево не попадают. Порядок братьев сохраняется.

    Args:
        nodes: Плоский список узлов
        root_id: ID корня (None - корневые коллекции)

    Returns:
        List[CollectionNode]: Узлы верхнего уровня с заполненными children
    """
    by_parent: Dict[Optional[int], List[CollectionNode]] = defaultdict(list)
    for node in nodes:
        by_parent[node.parent_id].append(node)

    def attach(parent_id: Optional[int], path: frozenset) -> List[CollectionNode]:
        children = []
        for child in by_parent.get(parent_id, []):
            if child.id in path:
                continue
            child.children = attach(child.id, path | {child.id})
            child.total_products_count = child.products_count + sum(
                c.total_products_count for c in child.children
            )
            children.append(child)
        return children

    start = frozenset() if root_id is None else frozenset({root_id})
    return attach(root_id, start)


def list_collections(
    db: Session, options: Optional[CollectionQueryOptions] = None
) -> Union[List[CollectionOut], List[CollectionNode]]:
    """
    Получить коллекции списком или деревом.

    Args:
        db: Сессия базы данных
        options: Параметры выборки (тип, активность, поиск, parent_id, flat)

    Returns:
        Плоский список CollectionOut (flat=True) или список корневых
        CollectionNode с вложенными children
    """
    options = options or CollectionQueryOptions()

    stmt = select(Collection)
    if options.collection_type:
        stmt = stmt.where(Collection.collection_type == options.collection_type)
    if not options.include_inactive:
        stmt = stmt.where(Collection.is_active.is_(True))
    if options.search:
        stmt = stmt.where(Collection.name.icontains(options.search, autoescape=True))

    if options.flat and options.filters_parent:
        if options.parent_id is None:
            stmt = stmt.where(Collection.parent_id.is_(None))
        else:
            stmt = stmt.where(Collection.parent_id == options.parent_id)

    rows = db.scalars(stmt.order_by(Collection.id)).all()
    counts = _product_counts(db)

    if options.flat:
        result = []
        for row in rows:
            item = CollectionOut.model_validate(row)
            item.products_count = counts.get(row.id, 0)
            result.append(item)
        return result

    nodes = []
    for row in rows:
        node = CollectionNode.model_validate(row)
        node.products_count = counts.get(row.id, 0)
        nodes.append(node)
    root_id = options.parent_id if options.filters_parent else None
    return build_tree(nodes, root_id)


def get_collection_tree(
    db: Session, collection_type: Optional[str] = None, include_inactive: bool = False
) -> List[CollectionNode]:
    """Дерево коллекций начиная с корневых."""
    options = CollectionQueryOptions(
        collection_type=collection_type, include_inactive=include_inactive, flat=False
    )
    return list_collections(db, options)


def get_collection(db: Session, collection_id: int) -> Collection:
    collection = db.get(Collection, collection_id)
    if collection is None:
        raise NotFoundError("Collection not found")
    return collection


def get_by_slug_with_products(db: Session, slug: str) -> Tuple[Collection, List[Product]]:
    """
    Получить коллекцию по slug вместе с ее товарами.

    Raises:
        NotFoundError: Если коллекция не найдена
    """
    collection = db.scalar(select(Collection).where(Collection.slug == slug))
    if collection is None:
        raise NotFoundError("Collection not found")

    products = db.scalars(
        select(Product)
        .join(ProductCollection, ProductCollection.product_id == Product.id)
        .where(ProductCollection.collection_id == collection.id)
        .options(selectinload(Product.collections))
        .order_by(Product.id)
    ).all()
    return collection, list(products)


def list_featured_brands(db: Session) -> List[Collection]:
    stmt = (
        select(Collection)
        .where(
            Collection.collection_type == "brand",
            Collection.is_featured.is_(True),
            Collection.is_active.is_(True),
        )
        .order_by(Collection.name)
    )
    return list(db.scalars(stmt).all())


# ==================== ОБХОД ИЕРАРХИИ ====================


def descendant_ids(db: Session, collection_id: int) -> List[int]:
    """ID всех потомков коллекции (обход в ширину)."""
    found: List[int] = []
    seen = {collection_id}
    frontier = [collection_id]
    while frontier:
        children = db.scalars(
            select(Collection.id).where(Collection.parent_id.in_(frontier))
        ).all()
        frontier = [cid for cid in children if cid not in seen]
        seen.update(frontier)
        found.extend(frontier)
    return found


def ancestor_ids(db: Session, collection: Collection) -> List[int]:
    """ID всех предков коллекции, от ближайшего к корню."""
    found: List[int] = []
    parent_id = collection.parent_id
    while parent_id is not None and parent_id not in found:
        found.append(parent_id)
        parent_id = db.scalar(select(Collection.parent_id).where(Collection.id == parent_id))
    return found


def _relevel_descendants(db: Session, collection: Collection) -> None:
    frontier = [collection]
    while frontier:
        levels = {c.id: c.level for c in frontier}
        children = db.scalars(
            select(Collection).where(Collection.parent_id.in_(list(levels)))
        ).all()
        for child in children:
            child.level = levels[child.parent_id] + 1
        frontier = list(children)


# ==================== ЗАПИСЬ ====================


def _slug_taken(db: Session, slug: str, exclude_id: Optional[int] = None) -> bool:
    stmt = select(Collection.id).where(Collection.slug == slug)
    if exclude_id is not None:
        stmt = stmt.where(Collection.id != exclude_id)
    return db.scalar(stmt) is not None


def _require_parent(db: Session, parent_id: int) -> Collection:
    parent = db.get(Collection, parent_id)
    if parent is None:
        raise ValidationError("Parent collection not found")
    return parent


def _require_product(db: Session, product_id: int) -> Product:
    product = db.get(Product, product_id)
    if product is None:
        raise NotFoundError("Product not found")
    return product


def create_collection(db: Session, data: CollectionCreate) -> Collection:
    """
    Создать коллекцию.

    Slug берется из запроса или строится из названия. Уровень
    вычисляется по родителю.

    Raises:
        ValidationError: Нет названия/slug или родитель не найден
        ConflictError: Коллекция с таким slug уже существует
    """
    name = (data.name or "").strip()
    if not name:
        raise ValidationError("Collection name is required")
    slug = (data.slug or "").strip() or slugify(name, max_length=_SLUG_MAX_LENGTH)
    if not slug:
        raise ValidationError("Collection slug is required")

    with transaction(db):
        if _slug_taken(db, slug):
            raise ConflictError(f"Collection with slug '{slug}' already exists")

        level = 0
        if data.parent_id is not None:
            level = _require_parent(db, data.parent_id).level + 1

        collection = Collection(
            name=name,
            slug=slug,
            description=data.description,
            parent_id=data.parent_id,
            collection_type=data.collection_type or "custom",
            is_active=data.is_active,
            image_url=data.image_url,
            level=level,
        )
        db.add(collection)
        db.flush()

    logger.info("Collection %s created (slug=%s, parent=%s)", collection.id, slug, data.parent_id)
    return collection


def update_collection(db: Session, collection_id: int, data: CollectionUpdate) -> Collection:
    """
    Частично обновить коллекцию.

    При смене родителя проверяется отсутствие циклов и пересчитываются
    уровни коллекции и всех ее потомков.

    Raises:
        NotFoundError: Коллекция не найдена
        ValidationError: Пустое название, цикл в иерархии, нет родителя
        ConflictError: Новый slug уже занят
    """
    changes = data.model_dump(exclude_unset=True)

    with transaction(db):
        collection = get_collection(db, collection_id)

        if "name" in changes:
            changes["name"] = (changes["name"] or "").strip()
            if not changes["name"]:
                raise ValidationError("Collection name cannot be empty")

        if "slug" in changes:
            changes["slug"] = (changes["slug"] or "").strip()
            if not changes["slug"]:
                raise ValidationError("Collection slug cannot be empty")
            if changes["slug"] != collection.slug and _slug_taken(
                db, changes["slug"], exclude_id=collection.id
            ):
                raise ConflictError(f"Collection with slug '{changes['slug']}' already exists")

        reparent = "parent_id" in changes and changes["parent_id"] != collection.parent_id
        if reparent:
            new_parent_id = changes["parent_id"]
            if new_parent_id is None:
                collection.level = 0
            else:
                if new_parent_id == collection.id:
                    raise ValidationError("Collection cannot be its own parent")
                parent = _require_parent(db, new_parent_id)
                if new_parent_id in descendant_ids(db, collection.id):
                    raise ValidationError("Circular reference detected in collection hierarchy")
                collection.level = parent.level + 1

        for field, value in changes.items():
            if value is None and field in _NON_NULLABLE_FIELDS:
                continue
            setattr(collection, field, value)

        if reparent:
            _relevel_descendants(db, collection)
        db.flush()

    logger.info("Collection %s updated: %s", collection_id, sorted(changes))
    return collection


def delete_collection(db: Session, collection_id: int) -> List[int]:
    """
    Удалить коллекцию вместе со всеми потомками.

    Удаляются также связи с товарами и пункты мега-меню.

    Returns:
        List[int]: ID удаленных коллекций
    """
    with transaction(db):
        collection = get_collection(db, collection_id)
        ids = [collection.id] + descendant_ids(db, collection.id)

        db.execute(delete(ProductCollection).where(ProductCollection.collection_id.in_(ids)))
        db.execute(delete(MegaMenuCollection).where(MegaMenuCollection.collection_id.in_(ids)))
        db.execute(delete(Collection).where(Collection.id.in_(ids)))

    logger.info("Collection %s deleted with %d descendant(s)", collection_id, len(ids) - 1)
    return ids


def add_product(db: Session, collection_id: int, product_id: int) -> bool:
    """
    Добавить товар в коллекцию.

    Returns:
        bool: True, если связь создана; False, если уже существовала
    """
    with transaction(db):
        get_collection(db, collection_id)
        _require_product(db, product_id)
        if db.get(ProductCollection, (product_id, collection_id)) is not None:
            return False
        db.add(ProductCollection(product_id=product_id, collection_id=collection_id))
    return True


def add_products(
    db: Session,
    collection_id: int,
    product_ids: Iterable[int],
    full_update: bool = False,
) -> List[int]:
    """
    Добавить несколько товаров в коллекцию.

    Несуществующие ID пропускаются. Новые товары добавляются также во
    все родительские коллекции. При full_update товары коллекции, не
    перечисленные в запросе, удаляются из нее.

    Returns:
        List[int]: ID всех товаров коллекции после обновления
    """
    requested = list(dict.fromkeys(product_ids))

    with transaction(db):
        collection = get_collection(db, collection_id)

        valid = set(db.scalars(select(Product.id).where(Product.id.in_(requested))).all())
        missing = [pid for pid in requested if pid not in valid]
        if missing:
            logger.warning(
                "Skipping unknown product id(s) %s for collection %s", missing, collection_id
            )
        wanted = [pid for pid in requested if pid in valid]

        existing = set(
            db.scalars(
                select(ProductCollection.product_id).where(
                    ProductCollection.collection_id == collection.id
                )
            ).all()
        )
        to_add = [pid for pid in wanted if pid not in existing]
        db.add_all(
            ProductCollection(product_id=pid, collection_id=collection.id) for pid in to_add
        )

        if full_update:
            to_remove = existing - set(wanted)
            if to_remove:
                db.execute(
                    delete(ProductCollection).where(
                        ProductCollection.collection_id == collection.id,
                        ProductCollection.product_id.in_(to_remove),
                    )
                )

        if to_add:
            for parent_id in ancestor_ids(db, collection):
                in_parent = set(
                    db.scalars(
                        select(ProductCollection.product_id).where(
                            ProductCollection.collection_id == parent_id,
                            ProductCollection.product_id.in_(to_add),
                        )
                    ).all()
                )
                db.add_all(
                    ProductCollection(product_id=pid, collection_id=parent_id)
                    for pid in to_add
                    if pid not in in_parent
                )
        db.flush()

        current = db.scalars(
            select(ProductCollection.product_id)
            .where(ProductCollection.collection_id == collection.id)
            .order_by(ProductCollection.product_id)
        ).all()

    logger.info("Collection %s: added %d product(s)", collection_id, len(to_add))
    return list(current)


def remove_product(
    db: Session, collection_id: int, product_id: int, remove_from_parents: bool = False
) -> List[int]:
    """
    Убрать товар из коллекции (и при необходимости из всех ее предков).

    Returns:
        List[int]: ID коллекций, из которых убран товар

    Raises:
        NotFoundError: Нет коллекции, товара или связи между ними
    """
    with transaction(db):
        collection = get_collection(db, collection_id)
        _require_product(db, product_id)
        if db.get(ProductCollection, (product_id, collection_id)) is None:
            raise NotFoundError("Product is not in this collection")

        ids = [collection.id]
        if remove_from_parents:
            ids.extend(ancestor_ids(db, collection))
        db.execute(
            delete(ProductCollection).where(
                ProductCollection.product_id == product_id,
                ProductCollection.collection_id.in_(ids),
            )
        )
    logger.info("Product %s removed from collection(s) %s", product_id, ids)
    return ids


def set_brand_featured(db: Session, collection_id: int, value: bool) -> Collection:
    """
    Отметить бренд как избранный (и его пункт мега-меню).

    Raises:
        NotFoundError: Коллекция не найдена или не является брендом
    """
    with transaction(db):
        collection = db.scalar(
            select(Collection).where(
                Collection.id == collection_id, Collection.collection_type == "brand"
            )
        )
        if collection is None:
            raise NotFoundError("Brand not found")

        collection.is_featured = value
        db.execute(
            update(MegaMenuCollection)
            .where(MegaMenuCollection.collection_id == collection_id)
            .values(is_featured=value)
        )
    logger.info("Brand %s is_featured=%s", collection_id, value)
    return collection
