"""
Checkout Guard

Serializes checkout attempts: at most one attempt is in flight, the cart
is refreshed from the remote service on a best-effort basis, validated,
persisted and only then handed to the navigator.
"""

import asyncio
import inspect
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Optional

from ..core.errors import RemoteError, MESSAGE_CHECKOUT_URL_MISSING
from .cart_store import CartStore
from .reconciler import reconcile_remote_cart
from .storefront_client import StorefrontClient
from .validator import validate

logger = logging.getLogger(__name__)


class CheckoutState(str, Enum):
    """Current state of the checkout guard"""
    IDLE = "idle"
    REFRESHING = "refreshing"
    VALIDATING = "validating"
    REDIRECTING = "redirecting"
    BLOCKED = "blocked"


class CheckoutStatus(str, Enum):
    """Outcome of a checkout request"""
    REDIRECTED = "redirected"
    BLOCKED = "blocked"
    URL_MISSING = "url_missing"
    IGNORED = "ignored"


@dataclass
class CheckoutResult:
    """Result of a checkout request"""
    status: CheckoutStatus
    messages: list[str] = field(default_factory=list)
    checkout_url: Optional[str] = None


class CheckoutGuard:
    """
    State machine guarding the redirect to the hosted checkout.

    States: IDLE -> REFRESHING -> VALIDATING -> REDIRECTING, or
    VALIDATING -> BLOCKED -> IDLE. Requests made while an attempt is in
    flight are ignored.
    """

    def __init__(
        self,
        client: StorefrontClient,
        store: CartStore,
        navigate: Callable[[str], Any],
        release_timeout: float = 30.0,
        redirect_delay: float = 0.0,
    ):
        self.client = client
        self.store = store
        self.navigate = navigate
        self.release_timeout = release_timeout
        self.redirect_delay = redirect_delay
        self.state = CheckoutState.IDLE
        self._in_flight = False
        self._attempt = 0
        self._release_handle: Optional[asyncio.TimerHandle] = None

    @property
    def in_flight(self) -> bool:
        return self._in_flight

    def update_state(self, new_state: CheckoutState) -> None:
        logger.debug(f"Checkout state: {self.state.value} -> {new_state.value}")
        self.state = new_state

    def release(self) -> None:
        """Clear the in-flight flag and return to IDLE"""
        if self._release_handle is not None:
            self._release_handle.cancel()
            self._release_handle = None
        self._in_flight = False
        self.update_state(CheckoutState.IDLE)

    async def refresh_cart(self) -> None:
        """
        Pull the remote cart into the store and persist it.

        A cart that no longer exists upstream clears the store so the
        next add starts a new cart. Raises RemoteError on failure, including
        a payload that cannot be reconciled.
        """
        cart_id = self.store.current().id
        if not cart_id:
            return

        payload = await self.client.fetch_cart(cart_id)
        if payload is None:
            logger.info(f"Cart {cart_id} expired upstream, starting over")
            self.store.clear()
            return

        self.store.replace(reconcile_remote_cart(payload))
        self.store.persist()

    async def checkout(self) -> CheckoutResult:
        """Run one checkout attempt"""
        if self._in_flight:
            logger.info("Checkout already in progress, ignoring request")
            return CheckoutResult(CheckoutStatus.IGNORED)

        if not self.store.current().checkout_url:
            return CheckoutResult(CheckoutStatus.URL_MISSING, [MESSAGE_CHECKOUT_URL_MISSING])

        self._in_flight = True
        self._attempt += 1
        try:
            return await self._run(self._attempt)
        except BaseException:
            self.release()
            raise

    async def _run(self, attempt: int) -> CheckoutResult:
        self.update_state(CheckoutState.REFRESHING)
        try:
            await self.refresh_cart()
        except RemoteError as e:
            # Network hiccups must not strand the shopper
            logger.warning(f"Failed to refresh cart data, using cached cart: {e}")

        self.update_state(CheckoutState.VALIDATING)
        messages = validate(self.store.current())
        if messages:
            self.update_state(CheckoutState.BLOCKED)
            self.release()
            return CheckoutResult(CheckoutStatus.BLOCKED, messages)

        cart = self.store.current()
        if not cart.checkout_url:
            self.release()
            return CheckoutResult(CheckoutStatus.URL_MISSING, [MESSAGE_CHECKOUT_URL_MISSING])

        self.update_state(CheckoutState.REDIRECTING)
        self.store.persist()

        if self.redirect_delay > 0:
            await asyncio.sleep(self.redirect_delay)

        outcome = self.navigate(cart.checkout_url)
        if inspect.isawaitable(outcome):
            await outcome

        logger.info(f"Redirected cart {cart.id} to checkout")
        self._schedule_release(attempt)
        return CheckoutResult(CheckoutStatus.REDIRECTED, checkout_url=cart.checkout_url)

    def _schedule_release(self, attempt: int) -> None:
        """Release the flag later in case the navigation never completes"""
        loop = asyncio.get_running_loop()
        self._release_handle = loop.call_later(self.release_timeout, self._release_expired, attempt)

    def _release_expired(self, attempt: int) -> None:
        if self._in_flight and attempt == self._attempt:
            logger.warning("Checkout redirect did not complete, releasing guard")
            self._release_handle = None
            self.release()
