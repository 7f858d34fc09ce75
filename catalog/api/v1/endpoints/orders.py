"""
API endpoints для работы с заказами.

Содержит операции для заказов с поддержкой создания,
просмотра, управления статусами и записи платежей.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from catalog.db.database import get_db
from catalog.schemas.order import (
    OrderCreate,
    OrderOut,
    OrderPage,
    OrderUpdate,
    PaymentCreate,
    PaymentOut,
)
from catalog.services import order_service, payment_service

router = APIRouter()


@router.get("", response_model=OrderPage)
def list_orders(
    db: Session = Depends(get_db),
    page: int = Query(1, ge=1, description="Номер страницы"),
    page_size: int = Query(20, ge=1, le=100, description="Размер страницы"),
    status: Optional[str] = Query(
        None, description="Фильтр по статусу: pending/processing/shipped/delivered/cancelled"
    ),
):
    """
    Получить список заказов с пагинацией и фильтрацией.

    Args:
        db: Сессия базы данных
        page: Номер страницы (начиная с 1)
        page_size: Размер страницы (1-100)
        status: Фильтр по статусу заказа

    Returns:
        OrderPage: Заказы с метаданными пагинации
    """
    return order_service.list_orders(db, status=status, page=page, page_size=page_size)


@router.post("", response_model=OrderOut, status_code=201)
def create_order(payload: OrderCreate, db: Session = Depends(get_db)):
    """
    Создать новый заказ.

    Цены и названия позиций фиксируются на момент создания,
    итог включает стоимость доставки.

    Raises:
        ValidationError: Нет позиций, неверное количество или товар не найден
    """
    return order_service.create_order(db, payload)


@router.get("/{order_id}", response_model=OrderOut)
def get_order(order_id: int, db: Session = Depends(get_db)):
    return order_service.get_order(db, order_id)


@router.patch("/{order_id}", response_model=OrderOut)
def update_order(order_id: int, payload: OrderUpdate, db: Session = Depends(get_db)):
    """Обновить статус, статус оплаты, трек-номер или адреса."""
    return order_service.update_order(db, order_id, payload)


@router.post("/{order_id}/payments", response_model=PaymentOut, status_code=201)
def record_payment(order_id: int, payload: PaymentCreate, db: Session = Depends(get_db)):
    """
    Записать платеж по заказу.

    Raises:
        NotFoundError: Заказ не найден
        ValidationError: Сумма не совпадает с суммой заказа
    """
    return payment_service.record_payment(db, order_id, payload)
