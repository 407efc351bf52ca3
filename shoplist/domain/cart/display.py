"""
Display lists derived from a CartState (never stored).

One CategorySection per category in category_order. How checked items appear
depends on completed_view:
- all: one list in order, no split
- hide: unchecked items in `active`, checked items in `completed`
- collapse: one list in order, checked items flagged `thin`

Empty sections are dropped unless edit mode is on (so users can still add
items to an empty category).
"""
from decimal import Decimal, InvalidOperation
from typing import List

from pydantic import BaseModel, Field

from shoplist.common.schemas.cart import CartItem, CartState, Category, CompletedView


class ItemView(BaseModel):
    """One renderable checklist row"""
    item: CartItem
    checked: bool = False
    quantity: int = Field(..., ge=0)
    thin: bool = Field(default=False, description="Render the minimal checked-item row")


class CategorySection(BaseModel):
    """Items of one category as the active view shows them"""
    category: Category
    active: List[ItemView] = Field(default_factory=list)
    completed: List[ItemView] = Field(default_factory=list)

    @property
    def item_count(self) -> int:
        return len(self.active) + len(self.completed)


def build_sections(state: CartState) -> List[CategorySection]:
    items = state.items_by_id()
    view = CompletedView(state.completed_view)
    sections: List[CategorySection] = []

    for category_id in state.category_order:
        category = state.categories.get(category_id)
        if category is None:
            continue

        section = CategorySection(category=category)
        for item_id in state.item_order.get(category_id, []):
            item = items.get(item_id)
            if item is None:
                continue
            checked = state.is_checked(item_id)
            row = ItemView(
                item=item,
                checked=checked,
                quantity=state.quantity_of(item),
                thin=checked and view == CompletedView.COLLAPSE,
            )
            if view == CompletedView.HIDE and checked:
                section.completed.append(row)
            else:
                section.active.append(row)

        if section.item_count == 0 and not state.edit_mode:
            continue
        sections.append(section)

    return sections


def checked_count(state: CartState) -> int:
    ids = set(state.item_category)
    return sum(1 for item_id, checked in state.checked_items.items() if checked and item_id in ids)


def selected_total(state: CartState) -> Decimal:
    """Sum of price * quantity over checked items; unparsable prices count as zero."""
    total = Decimal("0")
    for item in state.cart.items:
        if not state.is_checked(item.asin):
            continue
        try:
            price = Decimal(item.price)
        except (InvalidOperation, TypeError):
            price = Decimal("0")
        if not price.is_finite():
            price = Decimal("0")
        total += price * state.quantity_of(item)
    return total.quantize(Decimal("0.01"))
