"""
Cart availability and validation rules.

Both functions are pure: they can run on cached state to toggle the
checkout control, and again on freshly refreshed state before redirect.
"""

from typing import Optional

from ..core.errors import (
    MESSAGE_CART_EMPTY,
    MESSAGE_ITEMS_UNAVAILABLE,
    MESSAGE_TOTAL_NOT_POSITIVE,
    MESSAGE_UNKNOWN_ITEM,
)
from .models import Cart, Variant

POLICY_CONTINUE = "CONTINUE"
POLICY_DENY = "DENY"


def is_available(variant: Optional[Variant]) -> bool:
    """
    Decide whether a variant can be purchased.

    Fails open: when the flags do not clearly say "sold out", the
    variant is treated as available and the remote checkout enforces
    stock.
    """
    if variant is None:
        return False

    # Untracked inventory is always purchasable
    if not variant.inventory_management:
        return True

    if variant.inventory_policy == POLICY_CONTINUE:
        return True

    if variant.available_for_sale is True:
        return True

    if variant.inventory_policy == POLICY_DENY and variant.available_for_sale is False:
        return False

    return True


def validate(cart: Cart) -> list[str]:
    """Return every reason checkout is blocked; empty means allowed"""
    if cart.is_empty:
        return [MESSAGE_CART_EMPTY]

    messages = []

    unavailable = [line for line in cart.lines if not is_available(line.variant)]
    if unavailable:
        names = [line.product_title or MESSAGE_UNKNOWN_ITEM for line in unavailable]
        messages.append(MESSAGE_ITEMS_UNAVAILABLE.format(names=", ".join(names)))

    if cart.total.amount <= 0:
        messages.append(MESSAGE_TOTAL_NOT_POSITIVE)

    return messages
