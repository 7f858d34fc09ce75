"""
Модель валюты.
"""

from sqlalchemy import Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


class Currency(Base):
    """
    Валюта витрины и ее курс относительно базовой.

    Attributes:
        id: Уникальный идентификатор
        currency: Трехбуквенный код (уникальный)
        symbol: Символ валюты
        value: Курс
    """

    __tablename__ = "currencies"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    currency: Mapped[str] = mapped_column(String(3), unique=True)
    symbol: Mapped[str] = mapped_column(String(10))
    value: Mapped[float] = mapped_column(Numeric(10, 4, asdecimal=False))
