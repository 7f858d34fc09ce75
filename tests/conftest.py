import os

# До импорта пакета: движок приложения не должен указывать на PostgreSQL
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from catalog.db.database import get_db
from catalog.db.models import Base, Collection, Product, ProductVariant
from catalog.main import app


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record):
        # SQLite не проверяет внешние ключи (и ON DELETE CASCADE) без PRAGMA
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    yield engine
    engine.dispose()


@pytest.fixture
def db(engine):
    Base.metadata.create_all(bind=engine)
    TestingSession = sessionmaker(bind=engine, autoflush=False, autocommit=False)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def make_product(db):
    def _make(title="Product", price=10.0, **fields):
        colors = fields.pop("colors", [])
        product = Product(title=title, price=price, **fields)
        product.variants = [ProductVariant(color=color) for color in colors]
        db.add(product)
        db.commit()
        return product

    return _make


@pytest.fixture
def make_collection(db):
    def _make(name, parent=None, **fields):
        collection = Collection(
            name=name,
            slug=fields.pop("slug", name.lower().replace(" ", "-")),
            parent_id=parent.id if parent else None,
            level=parent.level + 1 if parent else 0,
            **fields,
        )
        db.add(collection)
        db.commit()
        return collection

    return _make
