"""
Модель коллекции товаров.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from .base import Base


class Collection(Base):
    """
    Модель коллекции (категория, бренд или подборка).

    Коллекции образуют лес: у корневых parent_id = NULL, дочерние
    ссылаются на родителя. Удаление родителя каскадно удаляет потомков.

    Attributes:
        id: Уникальный идентификатор коллекции
        name: Название
        slug: URL-friendly идентификатор (уникальный)
        description: Описание
        parent_id: ID родительской коллекции
        collection_type: Тип коллекции (custom/category/brand)
        level: Глубина в иерархии (0 для корневых)
        is_active: Видимость коллекции
        is_featured: Избранный бренд для мега-меню
        image_url: URL изображения
    """

    __tablename__ = "collections"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(100))
    slug: Mapped[str] = mapped_column(String(150), unique=True, index=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    parent_id: Mapped[Optional[int]] = mapped_column(
        Integer,
        ForeignKey("collections.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )
    collection_type: Mapped[str] = mapped_column(String(50), default="custom")
    level: Mapped[int] = mapped_column(Integer, default=0)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    is_featured: Mapped[bool] = mapped_column(Boolean, default=False)
    image_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    def __repr__(self) -> str:
        return f"<Collection(id={self.id}, slug='{self.slug}')>"
