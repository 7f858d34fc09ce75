"""
Модель изображения товара.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from .base import Base


class ProductImage(Base):
    """
    Модель изображения товара.

    Attributes:
        id: Уникальный идентификатор изображения
        product_id: ID товара
        image_id: Внешний идентификатор изображения (используется вариантами)
        alt: Альтернативный текст
        src: Путь или URL изображения
        is_primary: Флаг главного изображения
        product: Связь с товаром
    """

    __tablename__ = "product_images"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    product_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("products.id", ondelete="CASCADE"), index=True
    )
    image_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    alt: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    src: Mapped[str] = mapped_column(String(255))
    is_primary: Mapped[bool] = mapped_column(Boolean, default=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    # Связь с товаром
    product: Mapped["Product"] = relationship(back_populates="images")
