import pytest
from sqlalchemy import select

from catalog.core.errors import ConflictError, ValidationError
from catalog.db.database import transaction
from catalog.db.models import Collection, ProductCollection


def test_transaction_commits(db):
    with transaction(db):
        db.add(Collection(name="Shoes", slug="shoes"))

    assert db.scalars(select(Collection.slug)).all() == ["shoes"]


def test_unique_violation_is_conflict(db, make_collection):
    make_collection("Shoes")

    with pytest.raises(ConflictError):
        with transaction(db):
            db.add(Collection(name="Other shoes", slug="shoes"))
    assert db.scalars(select(Collection.name)).all() == ["Shoes"]


def test_missing_reference_is_validation_error(db):
    with pytest.raises(ValidationError):
        with transaction(db):
            db.add(ProductCollection(product_id=999, collection_id=999))
    assert db.scalars(select(ProductCollection)).all() == []


def test_other_errors_roll_back(db):
    with pytest.raises(RuntimeError):
        with transaction(db):
            db.add(Collection(name="Shoes", slug="shoes"))
            raise RuntimeError("boom")

    assert db.scalars(select(Collection)).all() == []
