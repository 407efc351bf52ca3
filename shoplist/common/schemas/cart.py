"""
Cart schemas (Pydantic models)

Wire format of the share-a-cart API plus the persisted checklist state.
Python attributes are snake_case; JSON uses the vendor's camelCase names.
Unknown fields are kept so a persisted cart round-trips without loss.
"""
import json
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from shoplist.common.errors import CartSchemaError


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class WireModel(BaseModel):
    """Base for camelCase payloads; parses ignoring-but-keeping unrecognized fields"""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)


class CompletedView(str, Enum):
    """How checked items are displayed"""
    ALL = "all"            # single list, no split
    HIDE = "hide"          # checked items moved to a collapsible section
    COLLAPSE = "collapse"  # checked items rendered thin, in place


class Direction(str, Enum):
    """Move direction for items and categories"""
    UP = "up"
    DOWN = "down"


class CartItem(WireModel):
    """Single item in a vendor cart. Identity is the asin, never the title."""
    asin: str = Field(..., min_length=1, description="Vendor item id, unique within a cart")
    title: str = Field(..., description="Display title")
    quantity: int = Field(..., ge=0)
    price: str = Field(default="0", description="Unit price, decimal-as-string")

    ccy_s: str = Field(default="$", alias="ccyS", description="Currency symbol")
    priceccy: Optional[str] = None
    sku: Optional[str] = None
    image: Optional[str] = None
    url: Optional[str] = None
    original_url: Optional[str] = None
    new_vendor_item_url: Optional[str] = Field(default=None, alias="newVendorItemURL")

    savings_bool: Optional[str] = None
    savings: Any = None
    savings_price: Optional[str] = None

    user_added: bool = Field(default=False, description="Created locally, not fetched from the vendor")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "asin": "B07FYZ2Q2Q",
                "title": "Organic Fresh Bananas",
                "quantity": 2,
                "price": "0.29",
                "ccyS": "$",
                "image": "https://m.media-amazon.com/images/I/banana.jpg",
                "url": "https://www.amazon.com/dp/B07FYZ2Q2Q",
            }
        }
    )


class VendorCart(WireModel):
    """Matched / original vendor cart attached to a share-a-cart snapshot"""
    match_to: Optional[str] = None
    match_to_display_name: Optional[str] = None
    items: List[Any] = Field(default_factory=list)
    split_price_diff: Optional[str] = None
    split_items_total_price: Optional[str] = None
    split_original_total_price: Optional[str] = None
    cart_ccy: Optional[str] = Field(default=None, alias="cartCCY")
    cart_ccys: Optional[str] = Field(default=None, alias="cartCCYS")


class Cart(WireModel):
    """Fetched snapshot of a vendor shopping cart"""
    id: str = Field(..., min_length=1)
    items: List[CartItem] = Field(default_factory=list)

    title: Optional[str] = None
    store: Optional[str] = None
    vendor: Optional[str] = None
    vendor_display_name: Optional[str] = None
    referrer: Optional[str] = None
    dest: Optional[str] = None
    locale: Optional[str] = None
    timestamp: Optional[int] = None

    ccy: Optional[str] = None
    cart_ccy: Optional[str] = Field(default=None, alias="cartCCY")
    cart_ccys: str = Field(default="$", alias="cartCCYS")
    cart_total_price: Optional[str] = None
    cart_total_qty: Optional[int] = None
    missing_count: Optional[int] = None

    matched_vendor_cart: Optional[VendorCart] = None
    original_vendor_cart: Optional[VendorCart] = None

    def item_ids(self) -> List[str]:
        return [item.asin for item in self.items]


class Category(WireModel):
    """Named grouping bucket for items"""
    id: str = Field(..., min_length=1)
    name: str


class CartState(WireModel):
    """
    Persisted checklist state layered on top of a Cart.

    Invariants (see check_invariants):
    - category_order is a permutation of categories keys, 'uncategorized' included
    - item_category has exactly one entry per cart item, pointing at a known category
    - item_order lists partition the item ids by item_category
    """
    cart: Cart
    checked_items: Dict[str, bool] = Field(default_factory=dict)
    updated_quantities: Dict[str, int] = Field(default_factory=dict)
    categories: Dict[str, Category] = Field(default_factory=dict)
    category_order: List[str] = Field(default_factory=list)
    item_category: Dict[str, str] = Field(default_factory=dict)
    item_order: Dict[str, List[str]] = Field(default_factory=dict)
    edit_mode: bool = False
    completed_view: CompletedView = CompletedView.ALL
    last_updated: datetime = Field(default_factory=utcnow)

    def quantity_of(self, item: CartItem) -> int:
        """Quantity shown for an item: the user's edit, else the vendor quantity"""
        return self.updated_quantities.get(item.asin, item.quantity)

    def is_checked(self, item_id: str) -> bool:
        return self.checked_items.get(item_id, False)

    def items_by_id(self) -> Dict[str, CartItem]:
        return {item.asin: item for item in self.cart.items}

    def touched(self, now: Optional[datetime] = None) -> "CartState":
        """Copy with last_updated bumped"""
        return self.model_copy(update={"last_updated": now or utcnow()})


class CheckedSnapshot(WireModel):
    """Minimal recovery backup stored next to every full state save"""
    checked_items: Dict[str, bool] = Field(default_factory=dict)
    last_updated: datetime = Field(default_factory=utcnow)


class CachedCart(WireModel):
    """Raw cart cache entry with its own expiry clock"""
    cart: Cart
    fetched_at: datetime = Field(default_factory=utcnow)


def validate_cart(raw: Any, strict: bool = False, cart_id: Optional[str] = None) -> Cart:
    """
    Boundary validator: raw decoded JSON -> typed Cart.

    Lenient mode ignores (and keeps) unrecognized fields and coerces compatible
    scalars ("2" -> 2). Strict mode refuses any type coercion. Either way a
    missing or mistyped required field rejects the whole cart.

    Raises:
        CartSchemaError: payload failed validation
    """
    try:
        if strict:
            # JSON-mode strict: nested objects allowed, scalar coercion refused
            return Cart.model_validate_json(json.dumps(raw), strict=True)
        return Cart.model_validate(raw)
    except ValidationError as e:
        raise CartSchemaError(cart_id or _guess_id(raw), e.errors()) from e


def _guess_id(raw: Any) -> str:
    if isinstance(raw, dict) and isinstance(raw.get("id"), str):
        return raw["id"]
    return "<unknown>"


def check_invariants(state: CartState) -> List[str]:
    """
    Return human-readable invariant violations for a state (empty = consistent).
    """
    problems: List[str] = []

    if "uncategorized" not in state.categories:
        problems.append("missing 'uncategorized' category")
    if sorted(state.category_order) != sorted(state.categories):
        problems.append("category_order is not a permutation of categories")

    cart_ids = state.cart.item_ids()
    if len(set(cart_ids)) != len(cart_ids):
        problems.append("duplicate asin in cart items")
    if set(state.item_category) != set(cart_ids):
        problems.append("item_category keys differ from cart item ids")
    for item_id, category_id in state.item_category.items():
        if category_id not in state.categories:
            problems.append(f"item {item_id} mapped to unknown category {category_id}")

    flattened: List[str] = []
    for category_id, item_ids in state.item_order.items():
        if category_id not in state.categories:
            problems.append(f"item_order has unknown category {category_id}")
        for item_id in item_ids:
            if state.item_category.get(item_id) != category_id:
                problems.append(f"item {item_id} listed under {category_id} but mapped elsewhere")
        flattened.extend(item_ids)
    if len(flattened) != len(set(flattened)):
        problems.append("item listed more than once in item_order")
    if set(flattened) != set(state.item_category):
        problems.append("item_order does not cover item_category")

    return problems
