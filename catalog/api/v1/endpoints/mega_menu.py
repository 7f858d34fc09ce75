"""
API endpoints мега-меню.
"""

from typing import List

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from catalog.db.database import get_db
from catalog.schemas.mega_menu import (
    MegaMenuEntryOut,
    MegaMenuUpdate,
    MegaMenuUpsert,
    ReorderRequest,
)
from catalog.services import mega_menu_service

router = APIRouter()


@router.get("", response_model=List[MegaMenuEntryOut])
def get_mega_menu(db: Session = Depends(get_db)):
    """
    Публичное мега-меню.

    Returns:
        List[MegaMenuEntryOut]: Активные пункты по позиции
    """
    return mega_menu_service.list_active(db)


@router.get("/entries", response_model=List[MegaMenuEntryOut])
def list_entries(
    db: Session = Depends(get_db),
    include_inactive: bool = Query(True, description="Включить скрытые пункты"),
):
    return mega_menu_service.list_entries(db, include_inactive=include_inactive)


@router.post("", response_model=MegaMenuEntryOut)
def upsert_entry(payload: MegaMenuUpsert, db: Session = Depends(get_db)):
    """Добавить коллекцию в мега-меню или обновить ее пункт."""
    return mega_menu_service.upsert_entry(
        db,
        payload.collection_id,
        position=payload.position,
        is_active=payload.is_active,
        display_subcollections=payload.display_subcollections,
    )


@router.post("/reorder", response_model=List[MegaMenuEntryOut])
def reorder(payload: ReorderRequest, db: Session = Depends(get_db)):
    return mega_menu_service.reorder(db, payload.items)


@router.put("/{entry_id}", response_model=MegaMenuEntryOut)
def update_entry(entry_id: int, payload: MegaMenuUpdate, db: Session = Depends(get_db)):
    return mega_menu_service.update_entry(db, entry_id, payload)


@router.delete("/{entry_id}", status_code=204)
def remove_entry(entry_id: int, db: Session = Depends(get_db)):
    mega_menu_service.remove_entry(db, entry_id)
    return Response(status_code=204)
