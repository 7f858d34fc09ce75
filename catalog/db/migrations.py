"""
Версионные миграции базы данных.

Каждая миграция применяется один раз и записывается в таблицу
schema_migrations. Повторный запуск ничего не меняет.
"""

import logging
from typing import Callable, List, NamedTuple

from passlib.context import CryptContext
from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from catalog.core.config import settings
from catalog.db.database import transaction
from catalog.db.models import (
    Base,
    Collection,
    Currency,
    Product,
    SchemaMigration,
    User,
)
from catalog.services.currency_service import DEFAULT_CURRENCIES
from catalog.services.slug import slugify

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


class Migration(NamedTuple):
    """
    Шаг миграции.

    apply возвращает False, если шаг пропущен и должен быть
    повторен при следующем запуске.
    """

    version: str
    description: str
    apply: Callable[[Session], bool]


def _create_schema(db: Session) -> bool:
    Base.metadata.create_all(bind=db.connection(), checkfirst=True)
    return True


def _backfill_product_slugs(db: Session) -> bool:
    products = db.scalars(
        select(Product).where(or_(Product.slug.is_(None), Product.slug == ""))
    ).all()
    for product in products:
        product.slug = slugify(product.title, product.id, Product.__table__.c.slug.type.length)
    logger.info("Slug backfill: %d product(s) updated", len(products))
    return True


def _backfill_collection_levels(db: Session) -> bool:
    collections = db.scalars(select(Collection).order_by(Collection.id)).all()
    by_parent = {}
    for collection in collections:
        by_parent.setdefault(collection.parent_id, []).append(collection)

    updated = 0
    frontier = [(c, 0) for c in by_parent.get(None, [])]
    while frontier:
        collection, level = frontier.pop()
        if collection.level != level:
            collection.level = level
            updated += 1
        frontier.extend((child, level + 1) for child in by_parent.get(collection.id, []))

    logger.info("Level backfill: %d collection(s) updated", updated)
    return True


def _seed_currencies(db: Session) -> bool:
    existing = set(db.scalars(select(Currency.currency)).all())
    for code, symbol, value in DEFAULT_CURRENCIES:
        if code not in existing:
            db.add(Currency(currency=code, symbol=symbol, value=value))
    return True


def _bootstrap_admin(db: Session) -> bool:
    if not settings.ADMIN_PASSWORD:
        logger.warning("ADMIN_PASSWORD is not set, admin bootstrap skipped")
        return False

    exists = db.scalar(
        select(User.id).where(
            or_(User.username == settings.ADMIN_USERNAME, User.email == settings.ADMIN_EMAIL)
        )
    )
    if exists is None:
        db.add(
            User(
                username=settings.ADMIN_USERNAME,
                email=settings.ADMIN_EMAIL,
                hashed_password=pwd_context.hash(settings.ADMIN_PASSWORD),
                role="admin",
                is_active=True,
            )
        )
        logger.info("Admin user '%s' created", settings.ADMIN_USERNAME)
    return True


MIGRATIONS: List[Migration] = [
    Migration("0001", "create schema", _create_schema),
    Migration("0002", "backfill product slugs", _backfill_product_slugs),
    Migration("0003", "backfill collection levels", _backfill_collection_levels),
    Migration("0004", "seed default currencies", _seed_currencies),
    Migration("0005", "bootstrap admin user", _bootstrap_admin),
]


def applied_versions(db: Session) -> set:
    return set(db.scalars(select(SchemaMigration.version)).all())


def run_migrations(db: Session) -> List[str]:
    """
    Применить все еще не примененные миграции по порядку.

    Args:
        db: Сессия базы данных

    Returns:
        List[str]: Версии, примененные в этом запуске
    """
    SchemaMigration.__table__.create(bind=db.connection(), checkfirst=True)
    done = applied_versions(db)

    applied = []
    for migration in MIGRATIONS:
        if migration.version in done:
            continue
        with transaction(db):
            if not migration.apply(db):
                continue
            db.add(SchemaMigration(version=migration.version, description=migration.description))
        applied.append(migration.version)
        logger.info("Migration %s applied: %s", migration.version, migration.description)

    return applied
