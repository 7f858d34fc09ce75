"""
Связь товаров и коллекций (многие ко многим).
"""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from .base import Base


class ProductCollection(Base):
    """
    Строка связи товар-коллекция.

    Attributes:
        product_id: ID товара
        collection_id: ID коллекции
        created_at: Дата добавления товара в коллекцию
    """

    __tablename__ = "product_collections"

    product_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("products.id", ondelete="CASCADE"), primary_key=True
    )
    collection_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("collections.id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
