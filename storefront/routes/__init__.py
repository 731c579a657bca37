# Storefront Routes

from .cart import router as cart_router
from .products import router as products_router

__all__ = ["cart_router", "products_router"]
