"""
Cart identifier extraction from pasted input.

Accepts either a share link or a bare code, case-insensitively:
- "https://share-a-cart.com/get/t4geu" → "T4GEU"
- "t4geu" → "T4GEU"
- "not a url" → None
"""
import re
from typing import Optional

CART_ID_PATTERNS = [
    re.compile(r"https?://(?:www\.)?share-a-cart\.com/get/([A-Z0-9]+)", re.IGNORECASE),
    re.compile(r"^([A-Z0-9]+)$", re.IGNORECASE),
]


def extract_cart_id(text: str) -> Optional[str]:
    """Canonical (uppercase) cart id, or None when the input holds no id."""
    text = (text or "").strip()
    for pattern in CART_ID_PATTERNS:
        match = pattern.search(text)
        if match:
            return match.group(1).upper()
    return None
