import pytest
from sqlalchemy import func, select

from catalog.core.errors import NotFoundError
from catalog.db.models import MegaMenuCollection
from catalog.schemas.mega_menu import MegaMenuUpdate, ReorderItem
from catalog.services import mega_menu_service


def test_upsert_is_unique_per_collection(db, make_collection):
    men = make_collection("Men")

    first = mega_menu_service.upsert_entry(db, men.id)
    second = mega_menu_service.upsert_entry(db, men.id, position=5, is_active=False)

    assert first.id == second.id
    assert second.position == 5
    assert second.is_active is False
    assert db.scalar(select(func.count()).select_from(MegaMenuCollection)) == 1


def test_upsert_appends_after_last_position(db, make_collection):
    a = make_collection("A")
    b = make_collection("B")

    mega_menu_service.upsert_entry(db, a.id, position=3)
    entry = mega_menu_service.upsert_entry(db, b.id)

    assert entry.position == 4


def test_upsert_unknown_collection(db):
    with pytest.raises(NotFoundError):
        mega_menu_service.upsert_entry(db, 123)


def test_list_active_orders_and_filters(db, make_collection):
    men = make_collection("Men")
    women = make_collection("Women")
    hidden = make_collection("Hidden", is_active=False)
    shirts = make_collection("Shirts", parent=men)
    make_collection("Old shirts", parent=men, is_active=False)

    mega_menu_service.upsert_entry(db, women.id, position=2)
    mega_menu_service.upsert_entry(db, men.id, position=1, display_subcollections=True)
    mega_menu_service.upsert_entry(db, hidden.id, position=0)

    entries = mega_menu_service.list_active(db)

    assert [e.name for e in entries] == ["Men", "Women"]
    assert [c.id for c in entries[0].children] == [shirts.id]
    assert entries[1].children == []


def test_update_and_remove_entry(db, make_collection):
    men = make_collection("Men")
    entry = mega_menu_service.upsert_entry(db, men.id)

    updated = mega_menu_service.update_entry(
        db, entry.id, MegaMenuUpdate(display_subcollections=True)
    )
    assert updated.display_subcollections is True

    mega_menu_service.remove_entry(db, entry.id)
    assert mega_menu_service.list_entries(db, include_inactive=True) == []
    with pytest.raises(NotFoundError):
        mega_menu_service.remove_entry(db, entry.id)


def test_reorder_is_all_or_nothing(db, make_collection):
    a = mega_menu_service.upsert_entry(db, make_collection("A").id)
    b = mega_menu_service.upsert_entry(db, make_collection("B").id)

    with pytest.raises(NotFoundError):
        mega_menu_service.reorder(db, [ReorderItem(id=a.id, position=9), ReorderItem(id=999, position=0)])
    assert [e.id for e in mega_menu_service.list_entries(db)] == [a.id, b.id]

    reordered = mega_menu_service.reorder(
        db, [ReorderItem(id=a.id, position=1), ReorderItem(id=b.id, position=0)]
    )
    assert [e.id for e in reordered] == [b.id, a.id]
