"""
Валюты витрины.
"""

import logging
from typing import List

from sqlalchemy import select
from sqlalchemy.orm import Session

from catalog.core.errors import ConflictError, NotFoundError
from catalog.db.database import transaction
from catalog.db.models import Currency
from catalog.schemas.currency import CurrencyIn, CurrencyOut, CurrencyUpdate

logger = logging.getLogger(__name__)

DEFAULT_CURRENCIES = (
    ("USD", "$", 1.0),
    ("EUR", "€", 0.92),
    ("GBP", "£", 0.81),
)


def list_currencies(db: Session) -> List[CurrencyOut]:
    """Сохраненные валюты или набор по умолчанию, если таблица пуста."""
    rows = db.scalars(select(Currency).order_by(Currency.id)).all()
    if not rows:
        return [
            CurrencyOut(currency=code, symbol=symbol, value=value)
            for code, symbol, value in DEFAULT_CURRENCIES
        ]
    return [CurrencyOut.model_validate(row) for row in rows]


def _get(db: Session, currency_id: int) -> Currency:
    currency = db.get(Currency, currency_id)
    if currency is None:
        raise NotFoundError("Currency not found")
    return currency


def create_currency(db: Session, data: CurrencyIn) -> Currency:
    """
    Добавить валюту.

    Raises:
        ConflictError: Код валюты уже существует
    """
    code = data.currency.upper()
    with transaction(db):
        if db.scalar(select(Currency.id).where(Currency.currency == code)) is not None:
            raise ConflictError(f"Currency '{code}' already exists")
        currency = Currency(currency=code, symbol=data.symbol, value=data.value)
        db.add(currency)
        db.flush()
    logger.info("Currency %s created", code)
    return currency


def update_currency(db: Session, currency_id: int, data: CurrencyUpdate) -> Currency:
    with transaction(db):
        currency = _get(db, currency_id)
        for field, value in data.model_dump(exclude_none=True).items():
            setattr(currency, field, value)
    logger.info("Currency %s updated", currency_id)
    return currency


def delete_currency(db: Session, currency_id: int) -> None:
    with transaction(db):
        db.delete(_get(db, currency_id))
    logger.info("Currency %s deleted", currency_id)
