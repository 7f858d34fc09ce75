"""
Модель пункта мега-меню.
"""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from .base import Base
from .collection import Collection


class MegaMenuCollection(Base):
    """
    Коллекция, выводимая в навигационном мега-меню.

    Не более одной записи на коллекцию.

    Attributes:
        id: Уникальный идентификатор пункта
        collection_id: ID коллекции (уникальный)
        position: Порядок сортировки
        is_active: Видимость пункта
        display_subcollections: Показывать дочерние коллекции
        is_featured: Избранный бренд
        collection: Связь с коллекцией
    """

    __tablename__ = "mega_menu_collections"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    collection_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("collections.id", ondelete="CASCADE"),
        unique=True,
        index=True,
    )
    position: Mapped[int] = mapped_column(Integer, default=0)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    display_subcollections: Mapped[bool] = mapped_column(Boolean, default=False)
    is_featured: Mapped[bool] = mapped_column(Boolean, default=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    collection: Mapped[Collection] = relationship(lazy="joined")
