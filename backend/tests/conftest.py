"""
Pytest configuration and fixtures for backend tests.
"""

import os

# Must be set before the app (and its engine) is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ENVIRONMENT"] = "development"
os.environ["STRIPE_WEBHOOK_SECRET"] = ""

from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from rest_api.main import app
from rest_api.models import Base, MenuItem, Shop, User
from rest_api.services.payments import get_payment_gateway
from shared.config.constants import Roles
from shared.infrastructure.db import SessionLocal, engine, get_db
from shared.security.auth import sign_user_token
from shared.security.password import hash_password
from shared.security.rate_limit import limiter


TEST_PASSWORD = "testpass123"
# bcrypt is deliberately slow; hash once for all seeded users
TEST_PASSWORD_HASH = hash_password(TEST_PASSWORD)

DELIVERY_ADDRESS = {
    "street": "1 Main St",
    "city": "Springfield",
    "state": "IL",
    "zipCode": "62701",
}
CONTACT_INFO = {"phone": "+15551234567", "email": "buyer@test.com"}


@pytest.fixture(scope="function")
def db_session():
    """
    Fresh database for each test.
    Uses SQLite in-memory for isolation.
    """
    Base.metadata.create_all(bind=engine)

    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


class FakeGateway:
    """Stands in for StripeGateway; intents live in a dict."""

    def __init__(self):
        self.intents: dict[str, dict[str, Any]] = {}
        self.created: list[dict[str, Any]] = []

    async def create_payment_intent(self, amount_cents: int, currency: str, metadata: dict[str, str]):
        intent_id = f"pi_test_{len(self.intents) + 1}"
        intent = {
            "id": intent_id,
            "client_secret": f"{intent_id}_secret",
            "amount": amount_cents,
            "currency": currency,
            "metadata": metadata,
            "status": "requires_payment_method",
        }
        self.intents[intent_id] = intent
        self.created.append(intent)
        return intent

    async def retrieve_payment_intent(self, payment_intent_id: str):
        return self.intents[payment_intent_id]

    def succeed(self, payment_intent_id: str) -> None:
        self.intents[payment_intent_id]["status"] = "succeeded"


@pytest.fixture
def fake_gateway():
    return FakeGateway()


@pytest.fixture
def published_events(monkeypatch):
    """
    Replace Redis publishing. Each scheduled order event is recorded as the
    kwargs it was published with.
    """
    publish = AsyncMock(return_value=1)
    monkeypatch.setattr("rest_api.services.events.publisher.publish_order_event", publish)
    monkeypatch.setattr(
        "rest_api.services.events.publisher.get_redis_pool",
        AsyncMock(return_value=MagicMock()),
    )
    return publish


@pytest.fixture(scope="function")
def client(db_session, fake_gateway, published_events):
    """
    Test client with database session, payment gateway and Redis overridden.
    """
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_payment_gateway] = lambda: fake_gateway
    limiter.enabled = False

    with TestClient(app) as test_client:
        yield test_client

    limiter.enabled = True
    app.dependency_overrides.clear()


# =============================================================================
# Users
# =============================================================================


def make_user(db_session, email: str, role: str, name: str = "Test User", is_active: bool = True) -> User:
    user = User(
        name=name,
        email=email,
        password=TEST_PASSWORD_HASH,
        role=role,
        is_active=is_active,
    )
    db_session.add(user)
    db_session.commit()
    return user


def auth_headers_for(user: User) -> dict[str, str]:
    token = sign_user_token(user.id, user.role, user.email, user.token_version or 0)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def seed_customer(db_session):
    return make_user(db_session, "customer@test.com", Roles.CUSTOMER, name="Carla Customer")


@pytest.fixture
def seed_other_customer(db_session):
    return make_user(db_session, "other@test.com", Roles.CUSTOMER, name="Oscar Other")


@pytest.fixture
def seed_owner(db_session):
    return make_user(db_session, "owner@test.com", Roles.SHOP_OWNER, name="Olivia Owner")


@pytest.fixture
def seed_other_owner(db_session):
    return make_user(db_session, "owner2@test.com", Roles.SHOP_OWNER, name="Omar Owner")


@pytest.fixture
def seed_admin(db_session):
    return make_user(db_session, "admin@test.com", Roles.ADMIN, name="Ada Admin")


@pytest.fixture
def customer_headers(seed_customer):
    return auth_headers_for(seed_customer)


@pytest.fixture
def other_customer_headers(seed_other_customer):
    return auth_headers_for(seed_other_customer)


@pytest.fixture
def owner_headers(seed_owner):
    return auth_headers_for(seed_owner)


@pytest.fixture
def other_owner_headers(seed_other_owner):
    return auth_headers_for(seed_other_owner)


@pytest.fixture
def admin_headers(seed_admin):
    return auth_headers_for(seed_admin)


# =============================================================================
# Shops & menu
# =============================================================================


def make_shop(db_session, owner: User, **overrides) -> Shop:
    data = {
        "owner_id": owner.id,
        "name": "Pasta Place",
        "description": "Fresh pasta daily",
        "category": "Italian",
        "cuisine": ["Italian"],
        "address": dict(DELIVERY_ADDRESS),
        "phone": "+15550001111",
        "delivery_fee_cents": 300,
        "minimum_order_cents": 1000,
        "delivery_time_min": 20,
        "delivery_time_max": 40,
        "is_active": True,
        "is_open": True,
    }
    data.update(overrides)
    shop = Shop(**data)
    db_session.add(shop)
    db_session.commit()
    return shop


def make_menu_item(db_session, shop: Shop, **overrides) -> MenuItem:
    data = {
        "shop_id": shop.id,
        "name": "Spaghetti",
        "price_cents": 1000,
        "category": "Pasta",
        "is_available": True,
        "variants": [],
        "add_ons": [],
    }
    data.update(overrides)
    item = MenuItem(**data)
    db_session.add(item)
    db_session.commit()
    return item


@pytest.fixture
def seed_shop(db_session, seed_owner):
    """Open shop: delivery fee $3.00, minimum order $10.00, max delivery 40 min."""
    return make_shop(db_session, seed_owner)


@pytest.fixture
def seed_items(db_session, seed_shop):
    """
    Item A: $10.00 with a Large variant at $14.00.
    Item B: $5.00 with an Extra Cheese add-on at $2.00.
    """
    item_a = make_menu_item(
        db_session,
        seed_shop,
        name="Item A",
        price_cents=1000,
        variants=[{"name": "Large", "price_cents": 1400}],
    )
    item_b = make_menu_item(
        db_session,
        seed_shop,
        name="Item B",
        price_cents=500,
        category="Sides",
        add_ons=[
            {"name": "Extra Cheese", "price_cents": 200},
            {"name": "Bacon", "price_cents": 150},
        ],
    )
    return item_a, item_b


def order_payload(shop_id: int, items: list[dict[str, Any]], **overrides) -> dict[str, Any]:
    payload = {
        "shop": shop_id,
        "items": items,
        "deliveryAddress": dict(DELIVERY_ADDRESS),
        "contactInfo": dict(CONTACT_INFO),
        "paymentInfo": {"method": "card"},
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def place_order(client, customer_headers, seed_shop, seed_items):
    """
    Place the reference cart: 2 x Item A + 1 x Item B with Extra Cheese.
    Returns the created order JSON.
    """
    item_a, item_b = seed_items

    def _place(headers=None, **overrides):
        payload = order_payload(
            seed_shop.id,
            [
                {"menuItemId": item_a.id, "quantity": 2},
                {"menuItemId": item_b.id, "quantity": 1, "addOns": ["Extra Cheese"]},
            ],
            **overrides,
        )
        response = client.post("/api/orders", json=payload, headers=headers or customer_headers)
        assert response.status_code == 201, response.json()
        return response.json()["data"]

    return _place


@pytest.fixture
def advance_order(client, owner_headers):
    """Walk an order through the given statuses as the shop owner."""

    def _advance(order_id: int, *statuses: str, headers=None) -> dict[str, Any]:
        data = None
        for next_status in statuses:
            response = client.patch(
                f"/api/orders/{order_id}/status",
                json={"status": next_status},
                headers=headers or owner_headers,
            )
            assert response.status_code == 200, response.json()
            data = response.json()["data"]
        return data

    return _advance

