"""
Cart Reconciler - merges a fetched cart with the persisted checklist state

Cases:
1. No prior state: build a fresh state (classify every item, default
   categories, nothing checked). A recovered checked-items snapshot, if any,
   restores the check marks.
2. Prior state still usable (not stale under the policy, no forced refresh):
   returned unchanged.
3. Prior state being refreshed: check marks and quantity edits survive for
   items still in the cart, edits for vanished items are pruned, and category
   membership/order is rebuilt by classification. The user's categories,
   view settings and user-added items carry over.

Example:
- Prior: {A: checked, qty 5}, {Y: checked}
- Fresh cart: [A, B]
- Result: A checked qty 5, B unchecked qty from cart, no trace of Y
"""
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Dict, List, Optional

import structlog

from shoplist.common.schemas.cart import (
    Cart,
    CartItem,
    CartState,
    CheckedSnapshot,
    CompletedView,
    utcnow,
)
from shoplist.domain.categorization.keywords import UNCATEGORIZED_ID
from shoplist.domain.categorization.matcher import ItemClassifier, category_matcher
from shoplist.domain.categorization.registry import default_categories, default_category_order

logger = structlog.get_logger()


@dataclass(frozen=True)
class StalenessPolicy:
    """
    When a persisted state should be re-fetched.

    max_age=None never expires a state: once loaded, a cart is only refreshed
    on explicit request.
    """

    max_age: Optional[timedelta] = None

    def is_stale(self, state: CartState, now: Optional[datetime] = None) -> bool:
        if self.max_age is None:
            return False
        return (now or utcnow()) - state.last_updated > self.max_age


NEVER_STALE = StalenessPolicy()


def needs_refresh(
    prior_state: Optional[CartState],
    policy: StalenessPolicy = NEVER_STALE,
    force: bool = False,
    now: Optional[datetime] = None,
) -> bool:
    """True when a fresh cart must be fetched for this prior state."""
    return prior_state is None or force or policy.is_stale(prior_state, now)


def _classify_into(
    items: List[CartItem],
    classifier: ItemClassifier,
    known_categories,
) -> Dict[str, str]:
    assignments: Dict[str, str] = {}
    for item in items:
        category_id = classifier.classify(item)
        if category_id not in known_categories:
            category_id = UNCATEGORIZED_ID
        assignments[item.asin] = category_id
    return assignments


def _build_item_order(items: List[CartItem], assignments: Dict[str, str], category_order: List[str]) -> Dict[str, List[str]]:
    item_order: Dict[str, List[str]] = {category_id: [] for category_id in category_order}
    for item in items:
        item_order.setdefault(assignments[item.asin], []).append(item.asin)
    return item_order


def _dedupe_items(items: List[CartItem]) -> List[CartItem]:
    seen = set()
    unique: List[CartItem] = []
    for item in items:
        if item.asin in seen:
            logger.warning("duplicate_cart_item_dropped", asin=item.asin)
            continue
        seen.add(item.asin)
        unique.append(item)
    return unique


def build_initial_state(
    cart: Cart,
    classifier: ItemClassifier = category_matcher,
    now: Optional[datetime] = None,
) -> CartState:
    """Brand-new state for a cart seen for the first time."""
    items = _dedupe_items(cart.items)
    cart = cart.model_copy(update={"items": items})
    categories = default_categories()
    category_order = default_category_order()

    assignments = _classify_into(items, classifier, categories)

    return CartState(
        cart=cart,
        checked_items={},
        updated_quantities={item.asin: item.quantity for item in items},
        categories=categories,
        category_order=category_order,
        item_category=assignments,
        item_order=_build_item_order(items, assignments, category_order),
        edit_mode=False,
        completed_view=CompletedView.ALL,
        last_updated=now or utcnow(),
    )


def merge_with_prior(
    fresh_cart: Cart,
    prior_state: CartState,
    classifier: ItemClassifier = category_matcher,
    now: Optional[datetime] = None,
) -> CartState:
    """
    Re-apply a prior state's user edits onto a freshly fetched cart.

    Args:
        fresh_cart: Newly fetched vendor cart
        prior_state: Persisted state for the same cart id
        classifier: Category classifier for vendor items

    Returns:
        New CartState; prior_state is not modified
    """
    vendor_items = _dedupe_items([item for item in fresh_cart.items if not item.user_added])
    vendor_ids = {item.asin for item in vendor_items}

    # User-added items live only in our state; the vendor never returns them
    carried = [
        item for item in prior_state.cart.items
        if item.user_added and item.asin not in vendor_ids
    ]
    items = vendor_items + carried
    live_ids = {item.asin for item in items}

    categories = {cid: c.model_copy() for cid, c in prior_state.categories.items()}
    if UNCATEGORIZED_ID not in categories:
        categories.update({UNCATEGORIZED_ID: default_categories()[UNCATEGORIZED_ID]})
    category_order = [cid for cid in prior_state.category_order if cid in categories]
    category_order += [cid for cid in categories if cid not in category_order]

    assignments = _classify_into(vendor_items, classifier, categories)
    for item in carried:
        previous = prior_state.item_category.get(item.asin, UNCATEGORIZED_ID)
        assignments[item.asin] = previous if previous in categories else UNCATEGORIZED_ID

    item_order = _build_item_order(vendor_items, assignments, category_order)
    # Carried items go after vendor items, in the order the user last saw them
    carried_ids = {item.asin for item in carried}
    previous_order = [
        item_id
        for category_id in prior_state.category_order
        for item_id in prior_state.item_order.get(category_id, [])
        if item_id in carried_ids
    ]
    previous_order += [item.asin for item in carried]
    placed = set()
    for item_id in previous_order:
        if item_id in placed:
            continue
        placed.add(item_id)
        item_order[assignments[item_id]].append(item_id)

    checked_items = {
        item_id: checked for item_id, checked in prior_state.checked_items.items()
        if item_id in live_ids
    }
    updated_quantities = {item.asin: item.quantity for item in items}
    updated_quantities.update({
        item_id: quantity for item_id, quantity in prior_state.updated_quantities.items()
        if item_id in live_ids
    })

    pruned = sorted(
        (set(prior_state.checked_items) | set(prior_state.updated_quantities)) - live_ids
    )
    logger.info("cart_reconciled",
                cart_id=fresh_cart.id,
                items=len(items),
                carried_user_items=len(carried),
                pruned_items=len(pruned))

    return CartState(
        cart=fresh_cart.model_copy(update={"items": items}),
        checked_items=checked_items,
        updated_quantities=updated_quantities,
        categories=categories,
        category_order=category_order,
        item_category=assignments,
        item_order=item_order,
        edit_mode=prior_state.edit_mode,
        completed_view=prior_state.completed_view,
        last_updated=now or utcnow(),
    )


def apply_checked_snapshot(state: CartState, snapshot: CheckedSnapshot) -> CartState:
    """Restore check marks from a recovery snapshot, limited to items in the cart."""
    restored = {
        item_id: checked for item_id, checked in snapshot.checked_items.items()
        if item_id in state.item_category
    }
    logger.info("checked_items_recovered",
                cart_id=state.cart.id,
                restored=len(restored),
                discarded=len(snapshot.checked_items) - len(restored))
    return state.model_copy(update={"checked_items": restored})


def reconcile(
    fresh_cart: Cart,
    prior_state: Optional[CartState] = None,
    recovered: Optional[CheckedSnapshot] = None,
    *,
    classifier: ItemClassifier = category_matcher,
    policy: StalenessPolicy = NEVER_STALE,
    force: bool = False,
    now: Optional[datetime] = None,
) -> CartState:
    """
    Produce the state to show for a cart.

    Args:
        fresh_cart: Cart snapshot from the fetcher
        prior_state: Persisted state for this cart id, if any
        recovered: Checked-items backup, used only when there is no prior state
        classifier: Category classifier (defaults to the keyword matcher)
        policy: Staleness policy for prior_state
        force: Rebuild from fresh_cart even when prior_state is still usable

    Returns:
        CartState (prior_state itself when it is still usable)
    """
    if prior_state is not None:
        if not needs_refresh(prior_state, policy, force, now):
            return prior_state
        return merge_with_prior(fresh_cart, prior_state, classifier, now)

    state = build_initial_state(fresh_cart, classifier, now)
    if recovered is not None:
        state = apply_checked_snapshot(state, recovered)
    logger.info("cart_state_initialized",
                cart_id=fresh_cart.id,
                items=len(state.cart.items),
                recovered=recovered is not None)
    return state
