from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from catalog.schemas.pagination import PageMeta


class Address(BaseModel):
    street: str
    apartment: Optional[str] = None
    city: str
    state: str
    zip_code: str
    country: str


class OrderItemIn(BaseModel):
    product_id: int
    variant_id: Optional[int] = None
    quantity: int


class OrderCreate(BaseModel):
    """Создание заказа. Количество и наличие товаров проверяет сервис."""

    user_id: Optional[int] = None
    items: List[OrderItemIn]
    shipping_address: Address
    billing_address: Optional[Address] = None
    shipping_method: Optional[str] = None
    shipping_cost: float = 0
    payment_method: str


class OrderUpdate(BaseModel):
    status: Optional[str] = None
    payment_status: Optional[str] = None
    tracking_number: Optional[str] = None
    shipping_address: Optional[Address] = None
    billing_address: Optional[Address] = None


class OrderItemOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    product_id: Optional[int]
    variant_id: Optional[int]
    quantity: int
    price: float
    title: Optional[str]


class OrderOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: Optional[int]
    status: str
    total: float
    shipping_method: Optional[str]
    shipping_cost: float
    payment_method: Optional[str]
    payment_status: str
    tracking_number: Optional[str]
    shipping_address: Optional[Address]
    billing_address: Optional[Address]
    gateway_order_id: Optional[str]
    gateway_payment_id: Optional[str]
    created_at: Optional[datetime] = None
    items: List[OrderItemOut]


class PaymentCreate(BaseModel):
    gateway_order_id: str
    gateway_payment_id: Optional[str] = None
    gateway_signature: Optional[str] = None
    amount: float
    currency: str = "INR"
    status: str = "created"
    payment_method: Optional[str] = None
    payment_data: Optional[Dict[str, Any]] = None


class PaymentUpdate(BaseModel):
    status: str
    gateway_payment_id: Optional[str] = None
    gateway_signature: Optional[str] = None
    payment_data: Optional[Dict[str, Any]] = None
    error_code: Optional[str] = None
    error_description: Optional[str] = None


class PaymentOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    order_id: int
    gateway_order_id: str
    gateway_payment_id: Optional[str]
    amount: float
    currency: str
    status: str
    payment_method: Optional[str]
    error_code: Optional[str] = None
    error_description: Optional[str] = None
    created_at: Optional[datetime] = None


class OrderPage(BaseModel):
    items: List[OrderOut] = Field(default_factory=list)
    meta: PageMeta
