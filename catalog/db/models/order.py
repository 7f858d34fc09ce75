"""
Модели заказа и позиций заказа.
"""

from datetime import datetime
from typing import List, Optional

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from .base import Base, JSONType

ORDER_STATUSES = ("pending", "processing", "shipped", "delivered", "cancelled")
PAYMENT_STATUSES = ("pending", "paid", "failed", "refunded")


class Order(Base):
    """
    Модель заказа.
    
    Attributes:
        id: Уникальный идентификатор заказа
        user_id: ID покупателя
        status: Статус заказа (pending/processing/shipped/delivered/cancelled)
        total: Итоговая сумма с доставкой
        shipping_method: Способ доставки
        shipping_cost: Стоимость доставки
        payment_method: Способ оплаты
        payment_status: Статус оплаты (pending/paid/failed/refunded)
        tracking_number: Трек-номер отправления
        shipping_address: Адрес доставки (JSON)
        billing_address: Платежный адрес (JSON)
        gateway_order_id: ID заказа в платежном шлюзе
        gateway_payment_id: ID платежа в платежном шлюзе
        payment_details: Дополнительные данные оплаты (JSON)
        items: Позиции заказа
        payments: Платежи по заказу
    """
    
    __tablename__ = "orders"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True
    )
    status: Mapped[str] = mapped_column(
        String(20),
        server_default=text("'pending'")
    )
    total: Mapped[float] = mapped_column(Numeric(10, 2, asdecimal=False))
    shipping_method: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    shipping_cost: Mapped[float] = mapped_column(
        Numeric(10, 2, asdecimal=False), default=0
    )
    payment_method: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    payment_status: Mapped[str] = mapped_column(
        String(20),
        server_default=text("'pending'")
    )
    tracking_number: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    # Адреса
    shipping_address: Mapped[Optional[dict]] = mapped_column(JSONType, nullable=True)
    billing_address: Mapped[Optional[dict]] = mapped_column(JSONType, nullable=True)

    # Данные платежного шлюза
    gateway_order_id: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    gateway_payment_id: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    payment_details: Mapped[Optional[dict]] = mapped_column(JSONType, nullable=True)

    # Временные метки
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    # Связь с позициями заказа
    items: Mapped[List["OrderItem"]] = relationship(
        back_populates="order",
        cascade="all,delete-orphan",
        passive_deletes=True,
        lazy="selectin",
        order_by="OrderItem.id",
    )
    payments: Mapped[List["Payment"]] = relationship(
        back_populates="order",
        cascade="all,delete-orphan",
        passive_deletes=True,
        order_by="Payment.id",
    )

    __table_args__ = (
        CheckConstraint(
            "status in ('pending','processing','shipped','delivered','cancelled')",
            name="ck_orders_status"
        ),
        CheckConstraint(
            "payment_status in ('pending','paid','failed','refunded')",
            name="ck_orders_payment_status"
        ),
    )


class OrderItem(Base):
    """
    Модель позиции заказа.
    
    Attributes:
        id: Уникальный идентификатор позиции
        order_id: ID заказа
        product_id: ID товара
        variant_id: ID варианта товара
        quantity: Количество (больше нуля)
        price: Цена за единицу (снимок)
        title: Название товара (снимок)
        order: Связь с заказом
    """
    
    __tablename__ = "order_items"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    order_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("orders.id", ondelete="CASCADE"),
        index=True
    )
    product_id: Mapped[Optional[int]] = mapped_column(
        Integer,
        ForeignKey("products.id", ondelete="SET NULL"),
        nullable=True,
    )
    variant_id: Mapped[Optional[int]] = mapped_column(
        Integer,
        ForeignKey("product_variants.id", ondelete="SET NULL"),
        nullable=True,
    )

    quantity: Mapped[int] = mapped_column(Integer)
    price: Mapped[float] = mapped_column(Numeric(10, 2, asdecimal=False))
    title: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    # Связь с заказом
    order: Mapped[Order] = relationship(back_populates="items")

    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_order_items_quantity"),
    )
