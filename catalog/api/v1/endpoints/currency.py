"""
API endpoints валют.
"""

from typing import List

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from catalog.db.database import get_db
from catalog.schemas.currency import CurrencyIn, CurrencyOut, CurrencyUpdate
from catalog.services import currency_service

router = APIRouter()


@router.get("", response_model=List[CurrencyOut])
def list_currencies(db: Session = Depends(get_db)):
    """Валюты витрины (набор по умолчанию, если ничего не сохранено)."""
    return currency_service.list_currencies(db)


@router.post("", response_model=CurrencyOut, status_code=201)
def create_currency(payload: CurrencyIn, db: Session = Depends(get_db)):
    return currency_service.create_currency(db, payload)


@router.put("/{currency_id}", response_model=CurrencyOut)
def update_currency(currency_id: int, payload: CurrencyUpdate, db: Session = Depends(get_db)):
    return currency_service.update_currency(db, currency_id, payload)


@router.delete("/{currency_id}", status_code=204)
def delete_currency(currency_id: int, db: Session = Depends(get_db)):
    currency_service.delete_currency(db, currency_id)
    return Response(status_code=204)
