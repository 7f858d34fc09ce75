"""
Платежные записи.

Данные шлюза сохраняются как есть; обращений к шлюзу здесь нет.
"""

import logging
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from catalog.core.errors import NotFoundError, ValidationError
from catalog.db.database import transaction
from catalog.db.models import Payment
from catalog.db.models.payment import PAYMENT_RECORD_STATUSES
from catalog.schemas.order import PaymentCreate, PaymentUpdate
from catalog.services.order_service import get_order

logger = logging.getLogger(__name__)

# Статус платежа -> статус оплаты заказа
_ORDER_PAYMENT_STATUS = {
    "captured": "paid",
    "failed": "failed",
    "refunded": "refunded",
}


def _check_status(status: str) -> None:
    if status not in PAYMENT_RECORD_STATUSES:
        raise ValidationError(f"Unknown payment status '{status}'")


def record_payment(db: Session, order_id: int, data: PaymentCreate) -> Payment:
    """
    Сохранить платеж по заказу.

    Args:
        db: Сессия базы данных
        order_id: ID заказа
        data: Идентификаторы шлюза, сумма и сырой ответ

    Returns:
        Payment: Созданная запись

    Raises:
        NotFoundError: Заказ не найден
        ValidationError: Сумма не совпадает с суммой заказа или неизвестный статус
    """
    _check_status(data.status)

    with transaction(db):
        order = get_order(db, order_id)
        if round(data.amount, 2) != round(order.total, 2):
            raise ValidationError(
                f"Payment amount {data.amount} does not match order total {order.total}"
            )

        payment = Payment(order_id=order.id, **data.model_dump())
        db.add(payment)

        order.gateway_order_id = data.gateway_order_id
        if data.gateway_payment_id:
            order.gateway_payment_id = data.gateway_payment_id
        if data.status in _ORDER_PAYMENT_STATUS:
            order.payment_status = _ORDER_PAYMENT_STATUS[data.status]
        db.flush()

    logger.info("Payment %s recorded for order %s (%s)", payment.id, order_id, payment.status)
    return payment


def update_payment_status(db: Session, payment_id: int, data: PaymentUpdate) -> Payment:
    """
    Перевести платеж в новый статус.

    captured помечает заказ оплаченным, failed - неуспешным.

    Raises:
        NotFoundError: Платеж не найден
        ValidationError: Неизвестный статус
    """
    _check_status(data.status)

    with transaction(db):
        payment = db.get(Payment, payment_id)
        if payment is None:
            raise NotFoundError("Payment not found")

        for field, value in data.model_dump(exclude_none=True).items():
            setattr(payment, field, value)

        order = payment.order
        if data.gateway_payment_id:
            order.gateway_payment_id = data.gateway_payment_id
        if data.status in _ORDER_PAYMENT_STATUS:
            order.payment_status = _ORDER_PAYMENT_STATUS[data.status]
            if data.status == "captured":
                order.payment_details = data.payment_data or payment.payment_data
        db.flush()

    logger.info("Payment %s -> %s", payment_id, data.status)
    return payment


def list_payments(db: Session, order_id: Optional[int] = None) -> List[Payment]:
    stmt = select(Payment).order_by(Payment.id)
    if order_id is not None:
        stmt = stmt.where(Payment.order_id == order_id)
    return list(db.scalars(stmt).all())
