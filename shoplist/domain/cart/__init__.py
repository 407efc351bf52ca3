"""
Cart Module - checklist state for a shared shopping cart

Pieces:
1. Reconciler: fetched cart + persisted state → state to show
2. Item order: membership/order edits that keep the state consistent
3. Display: per-category lists for the active completed-items view
4. Repository + service: persistence layout and the load/edit/save flow
"""

from shoplist.domain.cart.cart_id import extract_cart_id
from shoplist.domain.cart.display import (
    CategorySection,
    ItemView,
    build_sections,
    checked_count,
    selected_total,
)
from shoplist.domain.cart.reconciler import (
    NEVER_STALE,
    StalenessPolicy,
    build_initial_state,
    reconcile,
)
from shoplist.domain.cart.repository import CartStateRepository
from shoplist.domain.cart.service import CartService

__all__ = [
    'extract_cart_id',
    'CategorySection',
    'ItemView',
    'build_sections',
    'checked_count',
    'selected_total',
    'NEVER_STALE',
    'StalenessPolicy',
    'build_initial_state',
    'reconcile',
    'CartStateRepository',
    'CartService',
]
