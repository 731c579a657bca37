"""Storefront errors and user-facing messages"""


class StorefrontError(Exception):
    """Base exception for storefront errors"""
    pass


class RemoteError(StorefrontError):
    """Transport, timeout, HTTP status or GraphQL-level failure"""
    pass


class PersistenceError(StorefrontError):
    """Persisted cart record could not be decoded"""
    pass


# Validation messages
MESSAGE_CART_EMPTY = "Your cart is empty. Add some items to proceed."
MESSAGE_ITEMS_UNAVAILABLE = "These items are no longer available: {names}"
MESSAGE_TOTAL_NOT_POSITIVE = "Cart total must be greater than $0.00"
MESSAGE_UNKNOWN_ITEM = "Unknown item"

# Checkout messages
MESSAGE_CHECKOUT_URL_MISSING = (
    "Checkout URL is not available. Please refresh your cart and try again."
)
MESSAGE_CHECKOUT_REDIRECTING = "Redirecting to secure checkout..."

# Cart action messages
MESSAGE_ITEM_ADDED = "Item added to cart!"
MESSAGE_ADD_FAILED = "Failed to add item to cart: {error}"
MESSAGE_UPDATE_FAILED = "Failed to update cart: {error}"
MESSAGE_REMOVE_FAILED = "Failed to remove item from cart: {error}"
MESSAGE_PRODUCTS_FAILED = "Failed to load products: {error}"
