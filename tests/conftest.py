import os
from datetime import datetime, timedelta, timezone
from decimal import Decimal

# Before any storefront import: the module level app must not build a Postgres engine
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret")

import jwt
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from storefront.config import Settings
from storefront.db.database import ConnectionProvider
from storefront.db.schema import metadata
from storefront.main import create_app
from storefront.schemas import Category, Product
from storefront.stores import CategoryStore, ProductStore

SECRET = "test-secret"


@pytest.fixture
def settings():
    return Settings(database_url="sqlite://", jwt_secret_key=SECRET)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def provider(engine):
    return ConnectionProvider(engine)


@pytest.fixture
def category_store(provider):
    return CategoryStore(provider)


@pytest.fixture
def product_store(provider):
    return ProductStore(provider)


@pytest.fixture
def client(settings, provider):
    return TestClient(create_app(settings=settings, provider=provider))


def make_token(sub="alice", roles=None, expires_in=timedelta(hours=1), secret=SECRET):
    payload = {
        "sub": sub,
        "roles": roles if roles is not None else [],
        "exp": datetime.now(timezone.utc) + expires_in,
    }
    return jwt.encode(payload, secret, algorithm="HS256")


@pytest.fixture
def admin_headers():
    return {"Authorization": f"Bearer {make_token('admin', ['ROLE_ADMIN'])}"}


@pytest.fixture
def user_headers():
    return {"Authorization": f"Bearer {make_token('user', ['ROLE_USER'])}"}


@pytest.fixture
def catalog(category_store, product_store):
    """Two categories and five products covering every search dimension"""
    electronics = category_store.create(Category(name="Electronics", description="Gadgets"))
    fashion = category_store.create(Category(name="Fashion", description="Clothes"))

    products = {
        "phone": Product(name="Smartphone", price=Decimal("499.99"), category_id=electronics.category_id,
                         color="Black", stock=50),
        "laptop": Product(name="Gaming Laptop", price=Decimal("899.99"), category_id=electronics.category_id,
                          color="Gray", stock=30, featured=True),
        "cable": Product(name="USB Cable", price=Decimal("9.99"), category_id=electronics.category_id,
                         color=None, stock=200),
        "shirt": Product(name="Men's T-Shirt", price=Decimal("29.99"), category_id=fashion.category_id,
                         color="Red", stock=100),
        "dress": Product(name="Women's Dress", price=Decimal("59.99"), category_id=fashion.category_id,
                         color="red", stock=40, featured=True),
    }
    created = {key: product_store.create(p) for key, p in products.items()}
    return {"electronics": electronics, "fashion": fashion, **created}
