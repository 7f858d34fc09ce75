"""
API endpoints платежных записей.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from catalog.db.database import get_db
from catalog.schemas.order import PaymentOut, PaymentUpdate
from catalog.services import payment_service

router = APIRouter()


@router.get("", response_model=List[PaymentOut])
def list_payments(
    db: Session = Depends(get_db),
    order_id: Optional[int] = Query(None, description="Фильтр по заказу"),
):
    return payment_service.list_payments(db, order_id)


@router.patch("/{payment_id}", response_model=PaymentOut)
def update_payment(payment_id: int, payload: PaymentUpdate, db: Session = Depends(get_db)):
    """
    Обновить статус платежа.

    captured переводит заказ в paid, failed - в failed.
    """
    return payment_service.update_payment_status(db, payment_id, payload)
