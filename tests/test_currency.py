import pytest

from catalog.core.errors import ConflictError, NotFoundError
from catalog.schemas.currency import CurrencyIn, CurrencyUpdate
from catalog.services import currency_service


def test_defaults_when_table_empty(db):
    currencies = currency_service.list_currencies(db)

    assert [(c.currency, c.symbol, c.value) for c in currencies] == [
        ("USD", "$", 1.0),
        ("EUR", "€", 0.92),
        ("GBP", "£", 0.81),
    ]


def test_create_update_delete(db):
    inr = currency_service.create_currency(db, CurrencyIn(currency="inr", symbol="₹", value=83.1))
    assert inr.currency == "INR"
    assert [c.currency for c in currency_service.list_currencies(db)] == ["INR"]

    with pytest.raises(ConflictError):
        currency_service.create_currency(db, CurrencyIn(currency="INR", symbol="₹", value=80))

    updated = currency_service.update_currency(db, inr.id, CurrencyUpdate(value=84))
    assert updated.value == 84

    currency_service.delete_currency(db, inr.id)
    with pytest.raises(NotFoundError):
        currency_service.delete_currency(db, inr.id)
