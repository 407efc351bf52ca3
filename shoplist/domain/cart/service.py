"""
Cart Service - orchestrates loading, reconciling, editing and saving a cart

Load flow:
1. Canonicalize the pasted link / code into a cart id
2. Load the persisted state (storage problems read as "no state")
3. Usable state → return it, no network
4. Otherwise get a cart (raw cart cache, else the fetcher), reconcile with the
   prior state or the recovered checked-items snapshot, save, return

Edits go through the pure functions in item_order.py / registry.py and are
saved immediately. Quantity and category edits are refused outside edit mode.
"""
from typing import Optional, Tuple

import structlog

from shoplist.clients.share_a_cart import CartFetcher, ShareACartClient
from shoplist.common.blob_store import BlobStore, create_blob_store
from shoplist.common.config import Settings, get_settings
from shoplist.common.errors import CartFetchError, InvalidInputError
from shoplist.common.schemas.cart import Cart, CartState, Category, CompletedView, Direction
from shoplist.domain.cart import item_order
from shoplist.domain.cart.cart_id import extract_cart_id
from shoplist.domain.cart.reconciler import StalenessPolicy, needs_refresh, reconcile
from shoplist.domain.cart.repository import CartStateRepository
from shoplist.domain.categorization import registry
from shoplist.domain.categorization.matcher import ItemClassifier, category_matcher

logger = structlog.get_logger()


class CartService:
    """
    Stateless orchestration over a repository, a fetcher and a classifier.

    Usage:
        service = CartService.from_settings()
        state = await service.load("https://share-a-cart.com/get/T4GEU")
        state = service.toggle_checked("T4GEU", state, "B07FYZ2Q2Q", True)
    """

    def __init__(
        self,
        store: BlobStore,
        fetcher: CartFetcher,
        settings: Optional[Settings] = None,
        classifier: ItemClassifier = category_matcher,
    ):
        self.settings = settings or get_settings()
        self.repository = CartStateRepository(store)
        self.fetcher = fetcher
        self.classifier = classifier
        self.policy = StalenessPolicy(max_age=self.settings.state_max_age)

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "CartService":
        settings = settings or get_settings()
        return cls(
            store=create_blob_store(settings),
            fetcher=ShareACartClient(settings),
            settings=settings,
        )

    @staticmethod
    def resolve_cart_id(text: str) -> str:
        """
        Raises:
            InvalidInputError: no cart id in the input
        """
        cart_id = extract_cart_id(text)
        if cart_id is None:
            raise InvalidInputError(
                "Invalid cart link. Expected https://share-a-cart.com/get/<ID> or a bare cart ID."
            )
        return cart_id

    async def _get_cart(self, cart_id: str, use_cache: bool = True) -> Cart:
        if use_cache and self.settings.cart_cache_enabled:
            cached = self.repository.get_cached_cart(cart_id, self.settings.cart_cache_ttl)
            if cached is not None:
                return cached

        try:
            cart = await self.fetcher.fetch_cart(cart_id)
        except CartFetchError as e:
            logger.warning("cart_load_failed", cart_id=cart_id,
                           error_type=type(e).__name__, error=str(e))
            raise

        if self.settings.cart_cache_enabled:
            self.repository.cache_cart(cart_id, cart)
        return cart

    async def load(self, text: str, force_refresh: bool = False) -> CartState:
        """
        State for a pasted link or cart id, fetching only when needed.

        Args:
            text: Share link or bare cart id
            force_refresh: Re-fetch and reconcile even if a usable state exists

        Raises:
            InvalidInputError: input holds no cart id
            CartNotFoundError, MalformedCartError, CartNetworkError: fetch failed
        """
        cart_id = self.resolve_cart_id(text)
        prior = self.repository.load_state(cart_id)

        if not needs_refresh(prior, self.policy, force_refresh):
            logger.info("cart_state_loaded", cart_id=cart_id, source="storage")
            return prior

        # A forced refresh must not be answered from the raw cart cache
        cart = await self._get_cart(cart_id, use_cache=not force_refresh)

        recovered = self.repository.pop_checked_snapshot(cart_id) if prior is None else None
        state = reconcile(
            cart,
            prior,
            recovered,
            classifier=self.classifier,
            policy=self.policy,
            force=True,
        )
        self.repository.save_state(cart_id, state)
        logger.info("cart_state_loaded", cart_id=cart_id,
                    source="refresh" if prior is not None else "fetch")
        return state

    def save(self, cart_id: str, state: CartState) -> CartState:
        self.repository.save_state(cart_id, state)
        return state

    def reset(self, cart_id: str) -> None:
        """Forget the state but keep check marks for the next load."""
        self.repository.reset_state(cart_id)

    def clear(self, cart_id: str) -> None:
        """Forget everything stored for the cart."""
        self.repository.clear(cart_id)

    # === Item edits ===

    def toggle_checked(self, cart_id: str, state: CartState, item_id: str, checked: bool) -> CartState:
        return self.save(cart_id, item_order.set_checked(state, item_id, checked))

    def update_quantity(self, cart_id: str, state: CartState, item_id: str, quantity: int) -> CartState:
        """
        Raises:
            InvalidInputError: not in edit mode, or quantity negative / non-integer
        """
        if not state.edit_mode:
            raise InvalidInputError("Quantity can only be changed in edit mode")
        return self.save(cart_id, item_order.set_quantity(state, item_id, quantity))

    def change_item_category(
        self, cart_id: str, state: CartState, item_id: str, from_category_id: str, to_category_id: str
    ) -> CartState:
        if not state.edit_mode:
            raise InvalidInputError("Categories can only be changed in edit mode")
        return self.save(cart_id, item_order.change_category(state, item_id, from_category_id, to_category_id))

    def move_item(self, cart_id: str, state: CartState, item_id: str, category_id: str, direction: Direction) -> CartState:
        return self.save(cart_id, item_order.move_item(state, item_id, category_id, direction))

    def add_custom_item(
        self, cart_id: str, state: CartState, category_id: str, title: str, quantity: int = 1, price: str = "0"
    ) -> CartState:
        item = item_order.new_custom_item(title, quantity, price, state.cart.cart_ccys)
        return self.save(cart_id, item_order.add_item(state, category_id, item, quantity))

    # === View settings ===

    def set_edit_mode(self, cart_id: str, state: CartState, enabled: bool) -> CartState:
        return self.save(cart_id, item_order.set_edit_mode(state, enabled))

    def set_completed_view(self, cart_id: str, state: CartState, view: CompletedView) -> CartState:
        return self.save(cart_id, item_order.set_completed_view(state, view))

    # === Category edits ===

    def create_category(self, cart_id: str, state: CartState, name: str) -> Tuple[CartState, Category]:
        new_state, category = registry.create_category(state, name)
        return self.save(cart_id, new_state), category

    def rename_category(self, cart_id: str, state: CartState, category_id: str, name: str) -> CartState:
        return self.save(cart_id, registry.rename_category(state, category_id, name))

    def delete_category(self, cart_id: str, state: CartState, category_id: str) -> CartState:
        return self.save(cart_id, registry.delete_category(state, category_id))

    def reorder_category(self, cart_id: str, state: CartState, category_id: str, direction: Direction) -> CartState:
        return self.save(cart_id, registry.reorder_category(state, category_id, direction))
