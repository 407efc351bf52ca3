"""
Cart State Repository - persisted layout of a cart's checklist

Keys per cart id:
- {id}-state: full CartState
- {id}-checked: CheckedSnapshot, rewritten with every state save; consumed
  (read then deleted) when a cart has to be rebuilt without a usable state
- cart-cache-{id}: raw Cart with its own fetched_at expiry

Storage failures never escape: a broken or unreadable blob is logged and
treated as "nothing stored", which makes the caller rebuild from a fresh fetch.
"""
from datetime import datetime, timedelta
from typing import Optional

import structlog
from pydantic import ValidationError

from shoplist.common.blob_store import BlobStore
from shoplist.common.schemas.cart import (
    Cart,
    CachedCart,
    CartState,
    CheckedSnapshot,
    check_invariants,
    utcnow,
)

logger = structlog.get_logger()


def state_key(cart_id: str) -> str:
    return f"{cart_id}-state"


def checked_key(cart_id: str) -> str:
    return f"{cart_id}-checked"


def cart_cache_key(cart_id: str) -> str:
    return f"cart-cache-{cart_id}"


class CartStateRepository:
    """
    Load/save cart states through a BlobStore.

    Usage:
        repo = CartStateRepository(MemoryBlobStore())
        repo.save_state("T4GEU", state)
        repo.load_state("T4GEU")
    """

    def __init__(self, store: BlobStore):
        self.store = store

    def _read(self, key: str) -> Optional[bytes]:
        try:
            return self.store.get(key)
        except OSError as e:
            logger.error("storage_read_failed", key=key, error=str(e))
            return None

    def _write(self, key: str, value: bytes) -> bool:
        try:
            self.store.set(key, value)
            return True
        except OSError as e:
            logger.error("storage_write_failed", key=key, error=str(e))
            return False

    def _delete(self, key: str) -> None:
        try:
            self.store.delete(key)
        except OSError as e:
            logger.error("storage_delete_failed", key=key, error=str(e))

    # === Full state ===

    def load_state(self, cart_id: str) -> Optional[CartState]:
        """
        Persisted state for a cart, or None.

        Invalid blobs (undecodable, schema mismatch, broken invariants) are
        deleted so the next load rebuilds from a fresh fetch; the checked-items
        snapshot is left in place for recovery.
        """
        key = state_key(cart_id)
        raw = self._read(key)
        if raw is None:
            return None

        try:
            state = CartState.model_validate_json(raw)
        except ValidationError as e:
            logger.warning("stored_state_invalid", cart_id=cart_id, errors=e.error_count())
            self._delete(key)
            return None

        problems = check_invariants(state)
        if problems:
            logger.warning("stored_state_inconsistent", cart_id=cart_id, problems=problems)
            self._delete(key)
            return None

        return state

    def save_state(self, cart_id: str, state: CartState) -> bool:
        """Write the state and its checked-items snapshot. Returns False on storage failure."""
        saved = self._write(state_key(cart_id), state.to_json().encode("utf-8"))
        snapshot = CheckedSnapshot(checked_items=state.checked_items, last_updated=state.last_updated)
        saved = self._write(checked_key(cart_id), snapshot.to_json().encode("utf-8")) and saved
        logger.debug("cart_state_saved", cart_id=cart_id, ok=saved)
        return saved

    def reset_state(self, cart_id: str) -> None:
        """Drop the state but keep the checked snapshot for recovery on next load."""
        self._delete(state_key(cart_id))
        logger.info("cart_state_reset", cart_id=cart_id)

    def clear(self, cart_id: str) -> None:
        """Forget everything stored for a cart."""
        for key in (state_key(cart_id), checked_key(cart_id), cart_cache_key(cart_id)):
            self._delete(key)
        logger.info("cart_state_cleared", cart_id=cart_id)

    # === Recovery snapshot ===

    def pop_checked_snapshot(self, cart_id: str) -> Optional[CheckedSnapshot]:
        """Read and delete the checked-items snapshot (consumed exactly once)."""
        key = checked_key(cart_id)
        raw = self._read(key)
        if raw is None:
            return None
        self._delete(key)

        try:
            return CheckedSnapshot.model_validate_json(raw)
        except ValidationError as e:
            logger.warning("checked_snapshot_invalid", cart_id=cart_id, errors=e.error_count())
            return None

    # === Raw cart cache ===

    def get_cached_cart(self, cart_id: str, ttl: timedelta, now: Optional[datetime] = None) -> Optional[Cart]:
        """Cached cart if younger than ttl; expired or broken entries are removed."""
        key = cart_cache_key(cart_id)
        raw = self._read(key)
        if raw is None:
            logger.debug("cart_cache_miss", cart_id=cart_id)
            return None

        try:
            cached = CachedCart.model_validate_json(raw)
        except ValidationError:
            logger.warning("cart_cache_invalid", cart_id=cart_id)
            self._delete(key)
            return None

        age = (now or utcnow()) - cached.fetched_at
        if age > ttl:
            logger.debug("cart_cache_expired", cart_id=cart_id, age_seconds=age.total_seconds())
            self._delete(key)
            return None

        logger.debug("cart_cache_hit", cart_id=cart_id, age_seconds=age.total_seconds())
        return cached.cart

    def cache_cart(self, cart_id: str, cart: Cart, now: Optional[datetime] = None) -> None:
        entry = CachedCart(cart=cart, fetched_at=now or utcnow())
        self._write(cart_cache_key(cart_id), entry.to_json().encode("utf-8"))
