# Storefront services

from .cart_store import CartStore, FileStorage, MemoryStorage, CART_STORAGE_KEY
from .checkout import CheckoutGuard, CheckoutResult, CheckoutState, CheckoutStatus
from .models import Cart, CartLine, CatalogPage, Money, Product, Variant
from .notifications import Notification, NotificationCenter, NotificationLevel
from .reconciler import reconcile_cart, reconcile_remote_cart
from .storefront import Storefront
from .storefront_client import StorefrontClient
from .validator import is_available, validate

__all__ = [
    "CartStore",
    "FileStorage",
    "MemoryStorage",
    "CART_STORAGE_KEY",
    "CheckoutGuard",
    "CheckoutResult",
    "CheckoutState",
    "CheckoutStatus",
    "Cart",
    "CartLine",
    "CatalogPage",
    "Money",
    "Product",
    "Variant",
    "Notification",
    "NotificationCenter",
    "NotificationLevel",
    "reconcile_cart",
    "reconcile_remote_cart",
    "Storefront",
    "StorefrontClient",
    "is_available",
    "validate",
]
