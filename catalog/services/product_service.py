"""
Репозиторий товаров.

Фильтрация и постраничная выдача, CRUD, генерация slug,
массовое переключение is_featured и справочники (категории,
бренды, цвета).
"""

import logging
from typing import Iterable, List, Optional

from sqlalchemy import and_, asc, delete, desc, func, or_, select, update
from sqlalchemy.orm import Session, selectinload

from catalog.core.errors import ConflictError, NotFoundError, ValidationError
from catalog.db.database import transaction
from catalog.db.models import (
    Collection,
    Product,
    ProductCollection,
    ProductImage,
    ProductVariant,
)
from catalog.schemas.pagination import OffsetPagination
from catalog.schemas.product import (
    ImageIn,
    ProductCreate,
    ProductFilters,
    ProductOut,
    ProductPage,
    ProductUpdate,
    VariantIn,
)
from catalog.services.slug import slugify

logger = logging.getLogger(__name__)

_SLUG_MAX_LENGTH = Product.__table__.c.slug.type.length

# Поля, которые нельзя обнулить частичным обновлением
_NON_NULLABLE_FIELDS = {
    "title",
    "price",
    "is_new",
    "is_sale",
    "is_featured",
    "discount",
    "stock",
}


def _filter_conditions(filters: ProductFilters) -> list:
    """Формирование условий WHERE по фильтрам витрины."""
    conditions = []

    if filters.type and filters.type.lower() != "all":
        wanted = filters.type.upper()
        conditions.append(
            or_(func.upper(Product.type) == wanted, func.upper(Product.category) == wanted)
        )
    if filters.price_min is not None:
        conditions.append(Product.price >= filters.price_min)
    if filters.price_max is not None:
        conditions.append(Product.price <= filters.price_max)
    if filters.brand:
        conditions.append(Product.brand.in_(filters.brand))
    if filters.color:
        # Цвет хранится у вариантов: товар подходит, если есть хотя бы один вариант
        conditions.append(
            select(ProductVariant.id)
            .where(
                ProductVariant.product_id == Product.id,
                ProductVariant.color.in_(filters.color),
            )
            .exists()
        )
    if filters.is_new is not None:
        conditions.append(Product.is_new == filters.is_new)
    if filters.is_sale is not None:
        conditions.append(Product.is_sale == filters.is_sale)
    if filters.is_featured is not None:
        conditions.append(Product.is_featured == filters.is_featured)
    if filters.collection:
        conditions.append(
            select(ProductCollection.product_id)
            .join(Collection, Collection.id == ProductCollection.collection_id)
            .where(
                ProductCollection.product_id == Product.id,
                Collection.slug == filters.collection,
            )
            .exists()
        )
    if filters.search:
        # % и _ в запросе ищутся буквально
        conditions.append(
            or_(
                Product.title.icontains(filters.search, autoescape=True),
                Product.description.icontains(filters.search, autoescape=True),
            )
        )

    return conditions


def list_products(
    db: Session,
    filters: Optional[ProductFilters] = None,
    pagination: Optional[OffsetPagination] = None,
) -> ProductPage:
    """
    Получить страницу товаров с фильтрацией.

    Args:
        db: Сессия базы данных
        filters: Фильтры (тип, цена, бренды, цвета, флаги, коллекция, поиск)
        pagination: Смещение и размер страницы

    Returns:
        ProductPage: Товары и метаданные (total, totalPages, hasMore, currentPage)
    """
    filters = filters or ProductFilters()
    pagination = pagination or OffsetPagination()

    conditions = _filter_conditions(filters)
    where_clause = and_(*conditions) if conditions else None

    # Подсчет общего количества (отдельно, без ORDER/LIMIT)
    count_stmt = select(func.count()).select_from(Product)
    if where_clause is not None:
        count_stmt = count_stmt.where(where_clause)
    total = db.scalar(count_stmt) or 0

    sort_column = getattr(Product, filters.sort)
    main_order = asc(sort_column) if filters.direction == "asc" else desc(sort_column)

    stmt = select(Product).options(selectinload(Product.collections))
    if where_clause is not None:
        stmt = stmt.where(where_clause)
    stmt = (
        stmt.order_by(main_order, asc(Product.id))
        .offset(pagination.index_from)
        .limit(pagination.limit)
    )
    rows = db.scalars(stmt).all()

    total_pages = pagination.total_pages(total)
    current_page = pagination.current_page
    return ProductPage(
        products=[ProductOut.model_validate(row) for row in rows],
        total=total,
        total_pages=total_pages,
        has_more=current_page < total_pages,
        current_page=current_page,
    )


def get_product(db: Session, product_id: int) -> Product:
    """
    Получить товар по ID вместе с изображениями, вариантами и коллекциями.

    Raises:
        NotFoundError: Если товар не найден
    """
    product = db.scalar(
        select(Product)
        .where(Product.id == product_id)
        .options(selectinload(Product.collections))
    )
    if product is None:
        raise NotFoundError("Product not found")
    return product


def _validate_amounts(price: Optional[float], stock: Optional[int]) -> None:
    if price is not None and price < 0:
        raise ValidationError("Price must be greater than or equal to 0")
    if stock is not None and stock < 0:
        raise ValidationError("Stock must be greater than or equal to 0")


def _slug_taken(db: Session, slug: str, exclude_id: Optional[int] = None) -> bool:
    stmt = select(Product.id).where(Product.slug == slug)
    if exclude_id is not None:
        stmt = stmt.where(Product.id != exclude_id)
    return db.scalar(stmt) is not None


def _build_images(images: Iterable[ImageIn], title: str) -> List[ProductImage]:
    """Новые изображения; записи без src и blob: ссылки пропускаются."""
    return [
        ProductImage(
            image_id=image.image_id,
            alt=image.alt or f"Image for {title}",
            src=image.src,
            is_primary=image.is_primary,
        )
        for image in images
        if image.src and not image.src.startswith("blob:")
    ]


def _build_variants(variants: Iterable[VariantIn]) -> List[ProductVariant]:
    return [ProductVariant(**variant.model_dump()) for variant in variants]


def _replace_collections(db: Session, product_id: int, collection_ids: Iterable[int]) -> None:
    """Заменить набор коллекций товара; несуществующие ID игнорируются."""
    db.execute(delete(ProductCollection).where(ProductCollection.product_id == product_id))
    requested = list(dict.fromkeys(collection_ids))
    if not requested:
        return
    valid = db.scalars(
        select(Collection.id).where(Collection.id.in_(requested)).order_by(Collection.id)
    ).all()
    db.add_all(ProductCollection(product_id=product_id, collection_id=cid) for cid in valid)


def create_product(db: Session, data: ProductCreate) -> Product:
    """
    Создать товар.

    Без явного slug товар сначала сохраняется, а затем получает slug
    вида "<title>-<id>" в той же транзакции.

    Raises:
        ValidationError: Пустое название, отрицательная цена или остаток
        ConflictError: Slug уже занят
    """
    title = (data.title or "").strip()
    if not title:
        raise ValidationError("Product title is required")
    _validate_amounts(data.price, data.stock)
    explicit_slug = (data.slug or "").strip() or None

    with transaction(db):
        if explicit_slug and _slug_taken(db, explicit_slug):
            raise ConflictError(f"Product with slug '{explicit_slug}' already exists")

        product = Product(
            title=title,
            description=data.description,
            type=data.type,
            brand=data.brand,
            category=data.category,
            price=data.price,
            is_new=data.is_new,
            is_sale=data.is_sale,
            is_featured=data.is_featured,
            discount=data.discount,
            stock=data.stock,
            slug=explicit_slug,
            meta_title=data.meta_title or title,
            meta_description=data.meta_description,
            meta_image=data.meta_image,
            meta_keywords=data.meta_keywords,
        )
        product.images = _build_images(data.images, title)
        product.variants = _build_variants(data.variants)
        db.add(product)
        db.flush()

        if explicit_slug is None:
            generated = slugify(title, product.id, _SLUG_MAX_LENGTH)
            if _slug_taken(db, generated, exclude_id=product.id):
                raise ConflictError(f"Product with slug '{generated}' already exists")
            product.slug = generated

        _replace_collections(db, product.id, data.collections)
        db.flush()

    logger.info("Product %s created (slug=%s)", product.id, product.slug)
    return product


def update_product(db: Session, product_id: int, data: ProductUpdate) -> Product:
    """
    Частично обновить товар.

    Новое название без явного slug пересоздает slug. Переданные
    collections/variants заменяют текущие наборы; из images
    сохраняются записи с id, записи без id добавляются.

    Raises:
        NotFoundError: Товар не найден
        ValidationError: Некорректные значения полей
        ConflictError: Slug уже занят
    """
    changes = data.model_dump(
        exclude_unset=True, exclude={"images", "variants", "collections"}
    )

    with transaction(db):
        product = get_product(db, product_id)

        if "title" in changes:
            changes["title"] = (changes["title"] or "").strip()
            if not changes["title"]:
                raise ValidationError("Product title cannot be empty")
        _validate_amounts(changes.get("price"), changes.get("stock"))

        slug = (changes.pop("slug", None) or "").strip()
        if not slug and "title" in changes:
            slug = slugify(changes["title"], product.id, _SLUG_MAX_LENGTH)
        if slug:
            if slug != product.slug and _slug_taken(db, slug, exclude_id=product.id):
                raise ConflictError(f"Product with slug '{slug}' already exists")
            product.slug = slug

        for field, value in changes.items():
            if value is None and field in _NON_NULLABLE_FIELDS:
                continue
            setattr(product, field, value)

        if data.collections is not None:
            _replace_collections(db, product.id, data.collections)
        if data.variants is not None:
            product.variants = _build_variants(data.variants)
        if data.images is not None:
            keep_ids = {image.id for image in data.images if image.id}
            product.images = [img for img in product.images if img.id in keep_ids] + (
                _build_images([image for image in data.images if not image.id], product.title)
            )
        db.flush()

    logger.info("Product %s updated: %s", product_id, sorted(data.model_fields_set))
    return product


def delete_product(db: Session, product_id: int) -> None:
    with transaction(db):
        product = get_product(db, product_id)
        db.delete(product)
    logger.info("Product %s deleted", product_id)


def set_featured(db: Session, ids: Iterable[int], value: bool) -> int:
    """
    Массово переключить флаг is_featured.

    Returns:
        int: Количество обновленных товаров
    """
    ids = list(ids)
    with transaction(db):
        result = db.execute(
            update(Product).where(Product.id.in_(ids)).values(is_featured=value)
        )
    logger.info("is_featured=%s set for %d product(s)", value, result.rowcount)
    return result.rowcount


def set_product_collections(db: Session, product_id: int, collection_ids: Iterable[int]) -> Product:
    with transaction(db):
        product = get_product(db, product_id)
        _replace_collections(db, product.id, collection_ids)
    db.expire(product, ["collections"])
    return product


def add_variants(db: Session, product_id: int, variants: Iterable[VariantIn]) -> List[ProductVariant]:
    """Добавить варианты к существующему товару."""
    with transaction(db):
        product = get_product(db, product_id)
        created = _build_variants(variants)
        product.variants.extend(created)
        db.flush()
    return created


# ==================== СПРАВОЧНИКИ ====================


def list_categories(db: Session) -> List[str]:
    stmt = (
        select(Product.category)
        .distinct()
        .where(Product.category.isnot(None))
        .order_by(Product.category)
    )
    return list(db.scalars(stmt).all())


def list_brands(db: Session) -> List[str]:
    stmt = (
        select(Product.brand)
        .distinct()
        .where(Product.brand.isnot(None))
        .order_by(Product.brand)
    )
    return list(db.scalars(stmt).all())


def list_colors(db: Session, product_type: Optional[str] = None) -> List[str]:
    """Цвета вариантов, опционально только для товаров указанного типа."""
    stmt = (
        select(ProductVariant.color)
        .distinct()
        .join(Product, Product.id == ProductVariant.product_id)
        .where(ProductVariant.color.isnot(None))
    )
    if product_type and product_type.lower() != "all":
        stmt = stmt.where(Product.type == product_type)
    return list(db.scalars(stmt.order_by(ProductVariant.color)).all())
