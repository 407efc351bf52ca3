"""
Category Registry - the ordered set of categories on a cart state

Default categories come from keywords.py; users can add, rename, delete and
reorder. 'uncategorized' is protected: it always exists and receives the items
of any deleted category.

All functions are pure: they return a new CartState and never modify the one
passed in.
"""
from typing import Dict, List, Tuple
from uuid import uuid4

import structlog

from shoplist.common.errors import InvalidInputError, ProtectedCategoryError
from shoplist.common.schemas.cart import CartState, Category, Direction
from shoplist.domain.categorization.keywords import (
    CATEGORY_NAMES,
    DEFAULT_CATEGORY_ORDER,
    UNCATEGORIZED_ID,
)

logger = structlog.get_logger()


def default_categories() -> Dict[str, Category]:
    return {
        category_id: Category(id=category_id, name=CATEGORY_NAMES[category_id])
        for category_id in DEFAULT_CATEGORY_ORDER
    }


def default_category_order() -> List[str]:
    return list(DEFAULT_CATEGORY_ORDER)


def generate_category(name: str) -> Category:
    """New user category with a random id (collisions are not handled)."""
    name = (name or "").strip()
    if not name:
        raise InvalidInputError("Category name cannot be empty")
    return Category(id=str(uuid4()), name=name)


def create_category(state: CartState, name: str) -> Tuple[CartState, Category]:
    """
    Add a user category, placed just before 'uncategorized'.

    Raises:
        InvalidInputError: name is empty or blank
    """
    category = generate_category(name)

    new_state = state.model_copy(deep=True)
    new_state.categories[category.id] = category
    order = new_state.category_order
    insert_at = order.index(UNCATEGORIZED_ID) if UNCATEGORIZED_ID in order else len(order)
    order.insert(insert_at, category.id)
    new_state.item_order[category.id] = []

    logger.info("category_created", category_id=category.id, name=category.name)
    return new_state.touched(), category


def rename_category(state: CartState, category_id: str, new_name: str) -> CartState:
    """Rename a category; unknown ids are ignored."""
    new_name = (new_name or "").strip()
    if not new_name:
        raise InvalidInputError("Category name cannot be empty")
    if category_id not in state.categories:
        logger.debug("category_rename_ignored", category_id=category_id)
        return state

    new_state = state.model_copy(deep=True)
    new_state.categories[category_id] = Category(id=category_id, name=new_name)
    return new_state.touched()


def delete_category(state: CartState, category_id: str) -> CartState:
    """
    Delete a category, moving its items to the end of 'uncategorized' in order.

    Raises:
        ProtectedCategoryError: category_id is 'uncategorized'
    """
    if category_id == UNCATEGORIZED_ID:
        raise ProtectedCategoryError(category_id)
    if category_id not in state.categories:
        logger.debug("category_delete_ignored", category_id=category_id)
        return state

    new_state = state.model_copy(deep=True)
    moved = new_state.item_order.pop(category_id, [])
    # Items mapped here but missing from the order list still need a home
    moved += [
        item_id for item_id, mapped in new_state.item_category.items()
        if mapped == category_id and item_id not in moved
    ]

    target = new_state.item_order.setdefault(UNCATEGORIZED_ID, [])
    for item_id in moved:
        new_state.item_category[item_id] = UNCATEGORIZED_ID
        target.append(item_id)

    del new_state.categories[category_id]
    new_state.category_order = [c for c in new_state.category_order if c != category_id]

    logger.info("category_deleted", category_id=category_id, items_moved=len(moved))
    return new_state.touched()


def reorder_category(state: CartState, category_id: str, direction: Direction) -> CartState:
    """Swap a category with its neighbor; no-op at either end or for unknown ids."""
    order = state.category_order
    if category_id not in order:
        return state

    index = order.index(category_id)
    neighbor = index - 1 if Direction(direction) == Direction.UP else index + 1
    if neighbor < 0 or neighbor >= len(order):
        return state

    new_state = state.model_copy(deep=True)
    new_order = new_state.category_order
    new_order[index], new_order[neighbor] = new_order[neighbor], new_order[index]
    return new_state.touched()


def resolve_category(state: CartState, category_id: str) -> str:
    """Known category id, else the 'uncategorized' fallback."""
    return category_id if category_id in state.categories else UNCATEGORIZED_ID
