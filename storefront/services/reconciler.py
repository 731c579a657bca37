"""
Cart Reconciler

Maps remote storefront payloads onto the local Cart shape. The remote
service is the source of truth: totals and checkout urls are taken as
sent, never recomputed here.
"""

import logging
from typing import Optional, Any

from ..core.errors import RemoteError
from .models import Cart, CartLine, Money, Product, Variant

logger = logging.getLogger(__name__)


def _nodes(connection: Any) -> list[dict]:
    """Flatten a GraphQL connection (edges/nodes) or a plain list"""
    if not connection:
        return []
    if isinstance(connection, list):
        return [item for item in connection if item]
    if "edges" in connection:
        return [edge["node"] for edge in connection["edges"] or [] if edge and edge.get("node")]
    return [node for node in connection.get("nodes") or [] if node]


def _total(payload: dict) -> Money:
    cost = payload.get("cost") or payload.get("estimatedCost") or {}
    total = cost.get("totalAmount")
    if not total:
        return Money()
    return Money.from_dict(total)


def parse_variant(node: dict, product: Optional[dict] = None) -> Variant:
    """Build a Variant from a merchandise / variant node"""
    variant = Variant.from_dict(node)
    if product and not node.get("product"):
        # Catalog variants do not embed their parent product
        image = product.get("featuredImage") or {}
        variant.product_title = product.get("title")
        variant.image_url = image.get("url")
    return variant


def parse_line(node: dict) -> Optional[CartLine]:
    """Build a CartLine, or None for a zero-quantity line"""
    quantity = int(node.get("quantity") or 0)
    if quantity < 1:
        logger.debug(f"Dropping zero-quantity line {node.get('id')}")
        return None
    merchandise = node.get("merchandise")
    return CartLine(
        id=node["id"],
        quantity=quantity,
        variant=parse_variant(merchandise) if merchandise and merchandise.get("id") else None,
    )


def reconcile_cart(payload: Optional[dict]) -> Cart:
    """
    Convert a remote cart payload into a local Cart.

    A payload without a lines collection yields an empty cart rather
    than an error. The total is the remote-declared total.
    """
    if not isinstance(payload, dict):
        raise ValueError("Remote cart payload must be an object")

    lines = []
    for node in _nodes(payload.get("lines")):
        line = parse_line(node)
        if line is not None:
            lines.append(line)

    cart = Cart(
        id=payload.get("id"),
        lines=lines,
        total=_total(payload),
        checkout_url=payload.get("checkoutUrl") or None,
    )
    logger.debug(f"Reconciled cart {cart.id}: {len(cart.lines)} lines, total {cart.total.amount}")
    return cart


def reconcile_remote_cart(payload: Optional[dict]) -> Cart:
    """
    Reconcile a payload straight from the remote service.

    A payload that cannot be mapped is a protocol failure and raises
    RemoteError, like any other bad response.
    """
    try:
        return reconcile_cart(payload)
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        logger.error(f"Malformed cart payload: {e!r}")
        raise RemoteError(f"Store returned a malformed cart: {e}") from e


def parse_product(node: dict) -> Product:
    """Build a Product with its variants from a catalog node"""
    image = node.get("featuredImage") or {}
    return Product(
        id=node["id"],
        title=node.get("title") or "",
        handle=node.get("handle"),
        description=node.get("description") or "",
        image_url=image.get("url"),
        variants=[parse_variant(variant, node) for variant in _nodes(node.get("variants"))],
    )
