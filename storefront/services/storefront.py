"""
Storefront

Plain method API over the cart engine, for any UI to call:
1. Loads the catalog
2. Creates and mutates the remote cart, mirroring it locally
3. Validates the cart and guards the checkout redirect
"""

import logging
from typing import Optional, Any, Callable

from ..core.errors import (
    RemoteError,
    MESSAGE_ITEM_ADDED,
    MESSAGE_ADD_FAILED,
    MESSAGE_UPDATE_FAILED,
    MESSAGE_REMOVE_FAILED,
    MESSAGE_PRODUCTS_FAILED,
    MESSAGE_CHECKOUT_REDIRECTING,
)
from .cart_store import CartStore
from .checkout import CheckoutGuard, CheckoutResult, CheckoutStatus
from .models import Cart, CatalogPage, Product
from .notifications import NotificationCenter
from .reconciler import reconcile_remote_cart
from .storefront_client import StorefrontClient
from .validator import validate

logger = logging.getLogger(__name__)


class Storefront:
    """
    Shopper-facing cart operations.

    Every mutation is: remote call -> reconcile -> replace -> persist.
    A failed remote call leaves the local cart untouched.
    """

    def __init__(
        self,
        client: StorefrontClient,
        store: CartStore,
        navigate: Callable[[str], Any],
        notifications: Optional[NotificationCenter] = None,
        release_timeout: float = 30.0,
        redirect_delay: float = 0.0,
    ):
        self.client = client
        self.store = store
        self.notifications = notifications or NotificationCenter()
        self.guard = CheckoutGuard(
            client=client,
            store=store,
            navigate=navigate,
            release_timeout=release_timeout,
            redirect_delay=redirect_delay,
        )
        self.products: list[Product] = []

    def start(self) -> Cart:
        """Restore the persisted cart at session start"""
        self.store.restore()
        return self.store.current()

    async def close(self) -> None:
        await self.client.close()

    # ==================== Catalog ====================

    async def load_products(self, page_size: int = 20, after: Optional[str] = None) -> CatalogPage:
        """Fetch a catalog page; pass the returned end_cursor as `after` for the next one"""
        try:
            page = await self.client.fetch_catalog_page(page_size, after)
        except RemoteError as e:
            self.notifications.error(MESSAGE_PRODUCTS_FAILED.format(error=e))
            raise
        self.products = page.products
        return page

    async def get_product(self, handle: str) -> Optional[Product]:
        return await self.client.fetch_product(handle)

    # ==================== Cart reads ====================

    def get_cart(self) -> Cart:
        return self.store.current()

    def get_validation_messages(self) -> list[str]:
        """Validate the cached cart, for enabling the checkout control"""
        return validate(self.store.current())

    def can_checkout(self) -> bool:
        return not self.get_validation_messages() and not self.guard.in_flight

    def cart_count(self) -> int:
        return self.store.current().total_quantity

    # ==================== Cart mutations ====================

    def _apply(self, payload: dict) -> Cart:
        cart = reconcile_remote_cart(payload)
        self.store.replace(cart)
        self.store.persist()
        return cart

    async def add_to_cart(self, variant_id: str, quantity: int = 1) -> Cart:
        """Add a variant, creating the remote cart on first use"""
        if not variant_id:
            raise ValueError("Product variant not found")
        if quantity < 1:
            raise ValueError("quantity must be a positive integer")

        cart_id = self.store.current().id
        try:
            if cart_id:
                payload = await self.client.add_line(cart_id, variant_id, quantity)
            else:
                payload = await self.client.create_cart(variant_id, quantity)
            cart = self._apply(payload)
        except RemoteError as e:
            self.notifications.error(MESSAGE_ADD_FAILED.format(error=e))
            raise

        self.notifications.success(MESSAGE_ITEM_ADDED)
        return cart

    async def update_quantity(
        self,
        line_id: str,
        quantity: Optional[int] = None,
        *,
        delta: Optional[int] = None,
    ) -> Cart:
        """
        Set a line's quantity, absolutely or by delta.

        A resulting quantity below one removes the line. Unknown lines
        are ignored.
        """
        if (quantity is None) == (delta is None):
            raise ValueError("Pass exactly one of quantity or delta")
        if quantity is not None and quantity < 0:
            raise ValueError("quantity must not be negative")

        cart = self.store.current()
        line = cart.find_line(line_id)
        if line is None:
            logger.debug(f"Ignoring update for unknown line {line_id}")
            return cart

        new_quantity = quantity if quantity is not None else max(0, line.quantity + delta)
        if new_quantity == 0:
            return await self.remove_from_cart(line_id)
        if new_quantity == line.quantity:
            return cart

        try:
            payload = await self.client.update_line(cart.id, line_id, new_quantity)
            return self._apply(payload)
        except RemoteError as e:
            self.notifications.error(MESSAGE_UPDATE_FAILED.format(error=e))
            raise

    async def remove_from_cart(self, line_id: str) -> Cart:
        """Remove a line from the cart"""
        cart = self.store.current()
        if not cart.id or cart.find_line(line_id) is None:
            logger.debug(f"Ignoring removal of unknown line {line_id}")
            return cart

        try:
            payload = await self.client.remove_lines(cart.id, [line_id])
            return self._apply(payload)
        except RemoteError as e:
            self.notifications.error(MESSAGE_REMOVE_FAILED.format(error=e))
            raise

    async def refresh(self) -> Cart:
        """Re-read the cart from the remote service"""
        await self.guard.refresh_cart()
        return self.store.current()

    # ==================== Checkout ====================

    async def checkout(self) -> CheckoutResult:
        """Validate against fresh state and redirect to the hosted checkout"""
        result = await self.guard.checkout()

        if result.status == CheckoutStatus.REDIRECTED:
            self.notifications.success(MESSAGE_CHECKOUT_REDIRECTING)
        elif result.status in (CheckoutStatus.BLOCKED, CheckoutStatus.URL_MISSING):
            for message in result.messages:
                self.notifications.error(message)

        return result
