"""
Item Order / Category Membership Manager

Keeps item_category (item → category) and item_order (category → ordered
items) consistent with each other and with cart.items under every edit:
- add a user item to a category
- move an item up/down within its category
- reassign an item to another category
- check/uncheck, change quantity

Every function returns a new CartState; the input is left untouched. Rejected
edits either raise InvalidInputError or return the input state unchanged, as
documented per function.

Edit-mode gating: quantity changes and category reassignments are only valid
while state.edit_mode is on. These functions do not check it; callers must
refuse such requests outside edit mode (CartService does).
"""
from numbers import Integral
from typing import Optional
from uuid import uuid4

import structlog

from shoplist.common.errors import InvalidInputError
from shoplist.common.schemas.cart import CartItem, CartState, CompletedView, Direction
from shoplist.domain.categorization.registry import resolve_category

logger = structlog.get_logger()

CUSTOM_ITEM_PREFIX = "custom-"


def _is_count(value, minimum: int) -> bool:
    return isinstance(value, Integral) and not isinstance(value, bool) and value >= minimum


def new_custom_item(title: str, quantity: int = 1, price: str = "0", ccy_s: str = "$") -> CartItem:
    """
    Build a user-added item with a generated id.

    Raises:
        InvalidInputError: title is blank
    """
    title = (title or "").strip()
    if not title:
        raise InvalidInputError("Item title cannot be empty")
    return CartItem(
        asin=f"{CUSTOM_ITEM_PREFIX}{uuid4()}",
        title=title,
        quantity=quantity if _is_count(quantity, 0) else 0,
        price=price,
        ccy_s=ccy_s,
        user_added=True,
    )


def add_item(state: CartState, category_id: str, item: CartItem, quantity: Optional[int] = None) -> CartState:
    """
    Append an item to the cart and to the end of a category.

    quantity defaults to item.quantity. A non-positive or non-integer quantity,
    or an asin already in the cart, leaves the state unchanged. Unknown
    categories fall back to 'uncategorized'.
    """
    quantity = item.quantity if quantity is None else quantity
    if not _is_count(quantity, 1):
        logger.warning("add_item_rejected", asin=item.asin, quantity=quantity,
                       reason="quantity must be a positive integer")
        return state
    if item.asin in state.item_category:
        logger.warning("add_item_rejected", asin=item.asin, reason="duplicate asin")
        return state

    target = resolve_category(state, category_id)
    new_state = state.model_copy(deep=True)
    new_state.cart.items.append(item.model_copy(update={"quantity": int(quantity)}))
    new_state.item_category[item.asin] = target
    new_state.item_order.setdefault(target, []).append(item.asin)
    new_state.checked_items[item.asin] = False
    new_state.updated_quantities[item.asin] = int(quantity)

    logger.info("item_added", asin=item.asin, category_id=target, quantity=quantity)
    return new_state.touched()


def move_item(state: CartState, item_id: str, category_id: str, direction: Direction) -> CartState:
    """Swap an item with its neighbor inside a category; no-op at either end."""
    items = state.item_order.get(category_id, [])
    if item_id not in items:
        return state

    index = items.index(item_id)
    neighbor = index - 1 if Direction(direction) == Direction.UP else index + 1
    if neighbor < 0 or neighbor >= len(items):
        return state

    new_state = state.model_copy(deep=True)
    new_items = new_state.item_order[category_id]
    new_items[index], new_items[neighbor] = new_items[neighbor], new_items[index]
    return new_state.touched()


def change_category(state: CartState, item_id: str, from_category_id: str, to_category_id: str) -> CartState:
    """
    Move an item to the end of another category.

    No-op for unknown items, and when the target is the given source or the
    item's current category.
    Unknown targets fall back to 'uncategorized'.
    """
    if item_id not in state.item_category:
        return state
    to_category_id = resolve_category(state, to_category_id)
    if to_category_id in (from_category_id, state.item_category[item_id]):
        return state

    new_state = state.model_copy(deep=True)
    # Trust the membership map over the caller's idea of the source category
    current = new_state.item_category[item_id]
    for source in {from_category_id, current}:
        if item_id in new_state.item_order.get(source, []):
            new_state.item_order[source].remove(item_id)
    new_state.item_order.setdefault(to_category_id, []).append(item_id)
    new_state.item_category[item_id] = to_category_id

    logger.info("item_category_changed", asin=item_id,
                from_category=current, to_category=to_category_id)
    return new_state.touched()


def set_checked(state: CartState, item_id: str, checked: bool) -> CartState:
    if item_id not in state.item_category:
        return state
    new_state = state.model_copy(deep=True)
    new_state.checked_items[item_id] = bool(checked)
    return new_state.touched()


def set_quantity(state: CartState, item_id: str, quantity: int) -> CartState:
    """
    Record a quantity edit. Caller must only invoke this in edit mode.

    Raises:
        InvalidInputError: quantity is negative or not an integer
    """
    if not _is_count(quantity, 0):
        raise InvalidInputError(f"Quantity must be a non-negative integer, got {quantity!r}")
    if item_id not in state.item_category:
        return state
    new_state = state.model_copy(deep=True)
    new_state.updated_quantities[item_id] = int(quantity)
    return new_state.touched()


def set_edit_mode(state: CartState, enabled: bool) -> CartState:
    return state.model_copy(update={"edit_mode": bool(enabled)}).touched()


def set_completed_view(state: CartState, view: CompletedView) -> CartState:
    return state.model_copy(update={"completed_view": CompletedView(view)}).touched()
