"""
Модель товара.
"""

from datetime import datetime
from typing import List, Optional

from sqlalchemy import Boolean, DateTime, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from .base import Base


class Product(Base):
    """
    Модель товара.

    Attributes:
        id: Уникальный идентификатор товара
        title: Название товара
        description: Описание товара
        type: Тип товара (используется фильтром витрины)
        brand: Бренд
        category: Категория
        price: Цена
        is_new: Флаг новинки
        is_sale: Флаг распродажи
        is_featured: Флаг избранного товара
        discount: Скидка в процентах
        stock: Остаток на складе
        slug: URL-friendly идентификатор (уникальный)
        meta_title: SEO заголовок
        meta_description: SEO описание
        meta_image: SEO изображение
        meta_keywords: SEO ключевые слова
        images: Изображения товара
        variants: Варианты (размер/цвет) товара
        collections: Коллекции товара (только чтение)
    """

    __tablename__ = "products"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    title: Mapped[str] = mapped_column(String(255))
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    type: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    brand: Mapped[Optional[str]] = mapped_column(String(100), nullable=True, index=True)
    category: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    price: Mapped[float] = mapped_column(Numeric(10, 2, asdecimal=False))
    is_new: Mapped[bool] = mapped_column(Boolean, default=False)
    is_sale: Mapped[bool] = mapped_column(Boolean, default=False)
    is_featured: Mapped[bool] = mapped_column(Boolean, default=False)
    discount: Mapped[int] = mapped_column(Integer, default=0)
    stock: Mapped[int] = mapped_column(Integer, default=0)

    # SEO
    slug: Mapped[Optional[str]] = mapped_column(
        String(255), unique=True, nullable=True, index=True
    )
    meta_title: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    meta_description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    meta_image: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    meta_keywords: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    # Связи с другими моделями
    images: Mapped[List["ProductImage"]] = relationship(
        back_populates="product",
        cascade="all,delete-orphan",
        passive_deletes=True,
        lazy="selectin",
        order_by="ProductImage.id",
    )
    variants: Mapped[List["ProductVariant"]] = relationship(
        back_populates="product",
        cascade="all,delete-orphan",
        passive_deletes=True,
        lazy="selectin",
        order_by="ProductVariant.id",
    )
    collections: Mapped[List["Collection"]] = relationship(
        secondary="product_collections",
        viewonly=True,
        order_by="Collection.id",
    )

    def __repr__(self) -> str:
        return f"<Product(id={self.id}, title='{self.title}')>"
