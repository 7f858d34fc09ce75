"""
Модель платежа.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from .base import Base, JSONType
from .order import Order

PAYMENT_RECORD_STATUSES = ("created", "authorized", "captured", "failed", "refunded")


class Payment(Base):
    """
    Платеж через внешний шлюз.

    Attributes:
        id: Уникальный идентификатор платежа
        order_id: ID заказа
        gateway_order_id: ID заказа в шлюзе
        gateway_payment_id: ID платежа в шлюзе
        gateway_signature: Подпись шлюза
        amount: Сумма (равна сумме заказа при создании)
        currency: Валюта
        status: Статус (created/authorized/captured/failed/refunded)
        payment_method: Способ оплаты
        payment_data: Сырой ответ шлюза (JSON)
        error_code: Код ошибки шлюза
        error_description: Описание ошибки шлюза
    """

    __tablename__ = "payments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    order_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("orders.id", ondelete="CASCADE"), index=True
    )
    gateway_order_id: Mapped[str] = mapped_column(String(255), index=True)
    gateway_payment_id: Mapped[Optional[str]] = mapped_column(
        String(255), nullable=True, index=True
    )
    gateway_signature: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    amount: Mapped[float] = mapped_column(Numeric(10, 2, asdecimal=False))
    currency: Mapped[str] = mapped_column(String(10), default="INR")
    status: Mapped[str] = mapped_column(String(50), default="created", index=True)
    payment_method: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    payment_data: Mapped[Optional[dict]] = mapped_column(JSONType, nullable=True)
    error_code: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    error_description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    order: Mapped[Order] = relationship(back_populates="payments")
