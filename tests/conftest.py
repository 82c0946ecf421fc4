"""Shared fixtures: an in-memory database, an API client bound to it, and model factories."""

from datetime import datetime
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import models  # noqa: F401
from database.base import Base
from database.connection import get_db
from main import app
from models.color import ProductColor, StandardColor
from models.order import Order
from models.product import Product, ProductStatus
from models.seller import Seller
from services.auth import get_password_hash, issue_session_token
from services.options import seed_lookup_vocabularies
from services.product import build_slug

TEST_PASSWORD = "password123"


@pytest.fixture
def engine():
    """Fresh in-memory SQLite database per test, shared across connections."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db_session(engine):
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    yield session
    session.close()


@pytest.fixture
def client(db_session):
    """API client whose requests run against the test session."""

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_seller(db_session):
    counter = {"n": 0}

    def _make_seller(email=None, is_active=True, full_name="Test Seller"):
        counter["n"] += 1
        seller = Seller(
            email=email or f"seller{counter['n']}@example.com",
            password_hash=get_password_hash(TEST_PASSWORD),
            full_name=full_name,
            is_active=is_active,
        )
        db_session.add(seller)
        db_session.commit()
        db_session.refresh(seller)
        return seller

    return _make_seller


@pytest.fixture
def seller(make_seller):
    return make_seller(email="owner@example.com")


@pytest.fixture
def other_seller(make_seller):
    return make_seller(email="other@example.com")


def bearer_headers(seller):
    return {"Authorization": f"Bearer {issue_session_token(seller)}"}


@pytest.fixture
def headers_for():
    return bearer_headers


@pytest.fixture
def auth_headers(seller):
    return bearer_headers(seller)


@pytest.fixture
def other_auth_headers(other_seller):
    return bearer_headers(other_seller)


@pytest.fixture
def make_product(db_session, seller):
    def _make_product(owner=None, title="Linen Shirt", **overrides):
        owner = owner or seller
        fields = {
            "description": "A breathable linen shirt",
            "price": Decimal("10.00"),
            "status": ProductStatus.ACTIVE,
            "quantity": 20,
            "min_order_quantity": 1,
            "max_order_quantity": None,
        }
        fields.update(overrides)
        product = Product(seller_id=owner.id, title=title, slug=build_slug(title), **fields)
        db_session.add(product)
        db_session.commit()
        db_session.refresh(product)
        return product

    return _make_product


@pytest.fixture
def product(make_product):
    return make_product()


@pytest.fixture
def make_order(db_session):
    def _make_order(product, quantity=1, created_at=None, **overrides):
        fields = {
            "full_name": "Jane Customer",
            "email": "jane@example.com",
            "phone": "5551234567",
            "shipping_address": "12 Harbour Street, Springfield",
            "quantity": quantity,
            "total_amount": product.price * quantity,
            "currency": product.currency,
        }
        fields.update(overrides)
        order = Order(product_id=product.id, created_at=created_at or datetime.utcnow(), **fields)
        db_session.add(order)
        db_session.commit()
        db_session.refresh(order)
        return order

    return _make_order


@pytest.fixture
def standard_colors(db_session):
    """Seeded standard colors keyed by name."""
    seed_lookup_vocabularies(db_session)
    return {color.name: color for color in db_session.query(StandardColor).all()}


@pytest.fixture
def add_color_row(db_session):
    def _add_color_row(product_id, color_id=None, custom_hex_code=None, position=0):
        row = ProductColor(
            product_id=product_id,
            color_id=color_id,
            custom_hex_code=custom_hex_code,
            position=position,
        )
        db_session.add(row)
        db_session.commit()
        db_session.refresh(row)
        return row

    return _add_color_row
