"""
Exception hierarchy shared by the fetcher, the repository and the domain code.

Fetch errors propagate to the caller unchanged (no retries, no partial carts).
Domain errors are raised before any state is touched.
"""


class ShoplistError(Exception):
    """Base class for all shoplist errors"""
    pass


class CartFetchError(ShoplistError):
    """Raised when a cart snapshot cannot be obtained from the vendor"""

    def __init__(self, cart_id: str, message: str):
        super().__init__(f"{cart_id}: {message}")
        self.cart_id = cart_id


class CartNotFoundError(CartFetchError):
    """Remote cart identifier is unknown or expired"""
    pass


class MalformedCartError(CartFetchError):
    """Payload could not be decoded as a cart"""
    pass


class CartSchemaError(MalformedCartError):
    """Payload decoded but failed schema validation"""

    def __init__(self, cart_id: str, errors: list):
        super().__init__(cart_id, f"cart failed validation ({len(errors)} errors)")
        self.errors = errors


class CartNetworkError(CartFetchError):
    """Transport failure while talking to the vendor API"""
    pass


class ProtectedCategoryError(ShoplistError):
    """Raised when deleting the default 'uncategorized' category"""

    def __init__(self, category_id: str):
        super().__init__(f"Category '{category_id}' cannot be deleted")
        self.category_id = category_id


class InvalidInputError(ShoplistError):
    """Raised for rejected user input (empty names, bad quantities, edits outside edit mode)"""
    pass
