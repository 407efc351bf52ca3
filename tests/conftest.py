# tests/conftest.py
from datetime import datetime, timezone

import pytest
import structlog

from shoplist.common.blob_store import MemoryBlobStore
from shoplist.common.config import Settings
from shoplist.common.schemas.cart import Cart, CartItem
from shoplist.domain.cart.reconciler import build_initial_state

FIXED_NOW = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


def make_item(asin, title, quantity=1, price="1.00", **extra):
    return CartItem(asin=asin, title=title, quantity=quantity, price=price, **extra)


def make_cart(*items, cart_id="T4GEU", **extra):
    return Cart(id=cart_id, items=list(items), **extra)


def sample_payload():
    """Share-a-cart API response as it comes off the wire (camelCase)."""
    return {
        "id": "T4GEU",
        "title": "Weekly groceries",
        "vendor": "amazon",
        "vendorDisplayName": "Amazon Fresh",
        "cartCCYS": "$",
        "cartTotalPrice": "12.47",
        "cartTotalQty": 4,
        "someFutureField": {"nested": True},
        "items": [
            {
                "asin": "B001",
                "title": "Organic Fresh Bananas",
                "quantity": 2,
                "price": "0.29",
                "ccyS": "$",
                "newVendorItemURL": "https://example.com/b001",
            },
            {"asin": "B002", "title": "Tofurky Deli Slices", "quantity": 1, "price": "4.99"},
            {"asin": "B003", "title": "Peanut Butter Crunchy", "quantity": 1, "price": "3.49"},
            {"asin": "B004", "title": "Mystery Gadget", "quantity": 1, "price": "3.41"},
        ],
    }


@pytest.fixture(autouse=True)
def _quiet_logging():
    # Keep pytest output readable; only warnings and errors are printed
    structlog.configure(wrapper_class=structlog.make_filtering_bound_logger(30))
    yield
    structlog.reset_defaults()


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        storage_backend="memory",
        share_a_cart_api_base="https://share-a-cart.test/api/get/r/cart",
        fetch_timeout_seconds=2.0,
    )


@pytest.fixture
def store():
    return MemoryBlobStore()


@pytest.fixture
def grocery_cart():
    return Cart.model_validate(sample_payload())


@pytest.fixture
def grocery_state(grocery_cart):
    return build_initial_state(grocery_cart, now=FIXED_NOW)
