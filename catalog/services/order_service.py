"""
Сервис заказов.

Создание заказа со снимком цен и названий, выборка с пагинацией
и обновление статусов.
"""

import logging
from typing import Optional

from sqlalchemy import desc, func, select
from sqlalchemy.orm import Session

from catalog.core.errors import NotFoundError, ValidationError
from catalog.db.database import transaction
from catalog.db.models import Order, OrderItem, Product, ProductVariant, User
from catalog.db.models.order import ORDER_STATUSES, PAYMENT_STATUSES
from catalog.schemas.order import OrderCreate, OrderOut, OrderPage, OrderUpdate
from catalog.schemas.pagination import PageMeta

logger = logging.getLogger(__name__)


def create_order(db: Session, data: OrderCreate) -> Order:
    """
    Создать заказ.

    Цена и название позиций берутся из варианта (если указан и у него
    есть цена) или из товара. Итог = сумма позиций + доставка.

    Args:
        db: Сессия базы данных
        data: Позиции, адреса, доставка и способ оплаты

    Returns:
        Order: Созданный заказ

    Raises:
        ValidationError: Нет позиций, количество <= 0, товар или пользователь не найден
    """
    if not data.items:
        raise ValidationError("Order must contain at least one item")
    bad_quantity = [item.product_id for item in data.items if item.quantity <= 0]
    if bad_quantity:
        raise ValidationError(f"Quantity must be greater than 0 (products {bad_quantity})")
    if data.shipping_cost < 0:
        raise ValidationError("Shipping cost must be greater than or equal to 0")

    with transaction(db):
        if data.user_id is not None and db.get(User, data.user_id) is None:
            raise ValidationError(f"User {data.user_id} not found")

        product_ids = {item.product_id for item in data.items}
        products = {
            p.id: p for p in db.scalars(select(Product).where(Product.id.in_(product_ids))).all()
        }
        missing = sorted(product_ids - set(products))
        if missing:
            raise ValidationError(f"Products not found: {missing}")

        order_items = []
        subtotal = 0.0
        for item in data.items:
            product = products[item.product_id]
            price = product.price
            title = product.title
            if item.variant_id is not None:
                variant = db.get(ProductVariant, item.variant_id)
                if variant is None or variant.product_id != product.id:
                    raise ValidationError(
                        f"Variant {item.variant_id} does not belong to product {product.id}"
                    )
                if variant.price is not None:
                    price = variant.price
                details = ", ".join(v for v in (variant.size, variant.color) if v)
                if details:
                    title = f"{title} ({details})"
            subtotal += price * item.quantity
            order_items.append(
                OrderItem(
                    product_id=product.id,
                    variant_id=item.variant_id,
                    quantity=item.quantity,
                    price=price,
                    title=title,
                )
            )

        shipping = data.shipping_address.model_dump()
        billing = data.billing_address.model_dump() if data.billing_address else shipping
        order = Order(
            user_id=data.user_id,
            status="pending",
            payment_status="pending",
            total=round(subtotal + data.shipping_cost, 2),
            shipping_method=data.shipping_method,
            shipping_cost=data.shipping_cost,
            payment_method=data.payment_method,
            shipping_address=shipping,
            billing_address=billing,
        )
        order.items = order_items
        db.add(order)
        db.flush()

    logger.info("Order %s created: %d item(s), total=%s", order.id, len(order_items), order.total)
    return order


def list_orders(
    db: Session,
    status: Optional[str] = None,
    page: int = 1,
    page_size: int = 20,
) -> OrderPage:
    """Заказы по убыванию даты создания, опционально по статусу."""
    count_stmt = select(func.count()).select_from(Order)
    stmt = select(Order)
    if status:
        count_stmt = count_stmt.where(Order.status == status)
        stmt = stmt.where(Order.status == status)
    total = db.scalar(count_stmt) or 0

    rows = db.scalars(
        stmt.order_by(desc(Order.created_at), desc(Order.id))
        .offset((page - 1) * page_size)
        .limit(page_size)
    ).all()

    return OrderPage(
        items=[OrderOut.model_validate(row) for row in rows],
        meta=PageMeta.create(page=page, page_size=page_size, total=total),
    )


def get_order(db: Session, order_id: int) -> Order:
    order = db.get(Order, order_id)
    if order is None:
        raise NotFoundError("Order not found")
    return order


def update_order(db: Session, order_id: int, data: OrderUpdate) -> Order:
    """
    Обновить статус, статус оплаты, трек-номер или адреса заказа.

    Raises:
        NotFoundError: Заказ не найден
        ValidationError: Неизвестный статус
    """
    if data.status is not None and data.status not in ORDER_STATUSES:
        raise ValidationError(f"Unknown order status '{data.status}'")
    if data.payment_status is not None and data.payment_status not in PAYMENT_STATUSES:
        raise ValidationError(f"Unknown payment status '{data.payment_status}'")

    changes = data.model_dump(exclude_unset=True, exclude_none=True)
    with transaction(db):
        order = get_order(db, order_id)
        for field, value in changes.items():
            setattr(order, field, value)
        db.flush()

    logger.info("Order %s updated: %s", order_id, sorted(changes))
    return order
