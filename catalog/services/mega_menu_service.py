"""
Мега-меню: какие коллекции показываются в навигации и в каком порядке.
"""

import logging
from typing import Iterable, List

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from catalog.core.errors import NotFoundError
from catalog.db.database import transaction
from catalog.db.models import Collection, MegaMenuCollection
from catalog.schemas.collection import CollectionRef
from catalog.schemas.mega_menu import MegaMenuEntryOut, MegaMenuUpdate, ReorderItem

logger = logging.getLogger(__name__)


def _to_out(entry: MegaMenuCollection, children: Iterable[Collection] = ()) -> MegaMenuEntryOut:
    collection = entry.collection
    return MegaMenuEntryOut(
        id=entry.id,
        collection_id=entry.collection_id,
        position=entry.position,
        is_active=entry.is_active,
        display_subcollections=entry.display_subcollections,
        is_featured=entry.is_featured,
        name=collection.name,
        slug=collection.slug,
        collection_type=collection.collection_type,
        image_url=collection.image_url,
        children=[CollectionRef.model_validate(child) for child in children],
    )


def _get_entry(db: Session, entry_id: int) -> MegaMenuCollection:
    entry = db.get(MegaMenuCollection, entry_id)
    if entry is None:
        raise NotFoundError("Mega menu entry not found")
    return entry


def upsert_entry(
    db: Session,
    collection_id: int,
    position: int = None,
    is_active: bool = True,
    display_subcollections: bool = None,
) -> MegaMenuEntryOut:
    """
    Добавить коллекцию в мега-меню или обновить существующий пункт.

    Args:
        db: Сессия базы данных
        collection_id: ID коллекции
        position: Позиция; без нее новый пункт встает в конец
        is_active: Видимость пункта
        display_subcollections: Показывать дочерние коллекции

    Returns:
        MegaMenuEntryOut: Пункт меню

    Raises:
        NotFoundError: Коллекция не найдена
    """
    with transaction(db):
        if db.get(Collection, collection_id) is None:
            raise NotFoundError("Collection not found")

        entry = db.scalar(
            select(MegaMenuCollection).where(MegaMenuCollection.collection_id == collection_id)
        )
        if entry is None:
            if position is None:
                last = db.scalar(select(func.max(MegaMenuCollection.position)))
                position = 0 if last is None else last + 1
            entry = MegaMenuCollection(
                collection_id=collection_id,
                position=position,
                is_active=is_active,
                display_subcollections=bool(display_subcollections),
            )
            db.add(entry)
            action = "added"
        else:
            if position is not None:
                entry.position = position
            entry.is_active = is_active
            if display_subcollections is not None:
                entry.display_subcollections = display_subcollections
            action = "updated"
        db.flush()

    logger.info("Mega menu entry for collection %s %s", collection_id, action)
    return _to_out(entry)


def list_active(db: Session) -> List[MegaMenuEntryOut]:
    """
    Публичное мега-меню.

    Только активные пункты активных коллекций, по позиции и id.
    Пункты с display_subcollections получают активные дочерние
    коллекции.
    """
    entries = db.scalars(
        select(MegaMenuCollection)
        .join(Collection, Collection.id == MegaMenuCollection.collection_id)
        .where(MegaMenuCollection.is_active.is_(True), Collection.is_active.is_(True))
        .order_by(MegaMenuCollection.position, MegaMenuCollection.id)
    ).all()

    parent_ids = [e.collection_id for e in entries if e.display_subcollections]
    children = {}
    if parent_ids:
        rows = db.scalars(
            select(Collection)
            .where(Collection.parent_id.in_(parent_ids), Collection.is_active.is_(True))
            .order_by(Collection.id)
        ).all()
        for row in rows:
            children.setdefault(row.parent_id, []).append(row)

    return [
        _to_out(e, children.get(e.collection_id, []) if e.display_subcollections else [])
        for e in entries
    ]


def list_entries(db: Session, include_inactive: bool = False) -> List[MegaMenuEntryOut]:
    stmt = select(MegaMenuCollection).order_by(MegaMenuCollection.position, MegaMenuCollection.id)
    if not include_inactive:
        stmt = stmt.where(MegaMenuCollection.is_active.is_(True))
    return [_to_out(entry) for entry in db.scalars(stmt).all()]


def update_entry(db: Session, entry_id: int, data: MegaMenuUpdate) -> MegaMenuEntryOut:
    changes = {k: v for k, v in data.model_dump(exclude_unset=True).items() if v is not None}
    with transaction(db):
        entry = _get_entry(db, entry_id)
        for field, value in changes.items():
            setattr(entry, field, value)
        db.flush()
    logger.info("Mega menu entry %s updated: %s", entry_id, sorted(changes))
    return _to_out(entry)


def remove_entry(db: Session, entry_id: int) -> None:
    with transaction(db):
        db.delete(_get_entry(db, entry_id))
    logger.info("Mega menu entry %s removed", entry_id)


def reorder(db: Session, items: Iterable[ReorderItem]) -> List[MegaMenuEntryOut]:
    """
    Массово обновить позиции пунктов.

    Raises:
        NotFoundError: Хотя бы один ID не найден (ничего не меняется)
    """
    items = list(items)
    with transaction(db):
        ids = [item.id for item in items]
        entries = {
            e.id: e
            for e in db.scalars(
                select(MegaMenuCollection).where(MegaMenuCollection.id.in_(ids))
            ).all()
        }
        missing = sorted(set(ids) - set(entries))
        if missing:
            raise NotFoundError(f"Mega menu entries not found: {missing}")
        for item in items:
            entries[item.id].position = item.position
        db.flush()

    logger.info("Mega menu reordered (%d entries)", len(items))
    return list_entries(db, include_inactive=True)
