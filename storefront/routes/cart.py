"""Cart API routes"""

import logging
from typing import Optional
from pydantic import BaseModel, Field
from fastapi import APIRouter, HTTPException, Depends

from ..core.config import settings
from ..core.errors import RemoteError
from ..services.cart_store import CartStore, FileStorage
from ..services.models import Cart
from ..services.notifications import NotificationCenter
from ..services.storefront import Storefront
from ..services.storefront_client import StorefrontClient

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Cart"])

# Initialize services (would be dependency injected in production)
storefront: Optional[Storefront] = None


def _navigate(url: str) -> None:
    # The HTTP response hands the url to the browser
    logger.info(f"Checkout redirect issued: {url}")


def get_storefront() -> Storefront:
    """Get or create the storefront"""
    global storefront
    if storefront is None:
        client = StorefrontClient.from_store_config(
            settings.store_config(),
            timeout=settings.request_timeout,
            access_token_header=settings.access_token_header,
        )
        storefront = Storefront(
            client=client,
            store=CartStore(FileStorage(settings.cart_storage_dir)),
            navigate=_navigate,
            notifications=NotificationCenter(
                error_ttl=settings.error_message_ttl,
                success_ttl=settings.success_message_ttl,
            ),
            release_timeout=settings.checkout_release_timeout,
            redirect_delay=settings.redirect_delay,
        )
        storefront.start()
    return storefront


class AddLineRequest(BaseModel):
    """Request to add a variant to the cart"""
    variant_id: str
    quantity: int = Field(default=1, gt=0)


class UpdateLineRequest(BaseModel):
    """Request to change a line quantity; exactly one field is set"""
    quantity: Optional[int] = Field(default=None, ge=0)
    delta: Optional[int] = None


class CheckoutResponse(BaseModel):
    """Response from checkout endpoint"""
    status: str
    messages: list[str] = []
    checkout_url: Optional[str] = None


def cart_response(shop: Storefront) -> dict:
    """Serialize the cart with its checkout state"""
    cart: Cart = shop.get_cart()
    messages = shop.get_validation_messages()
    return {
        "cart": {
            "id": cart.id,
            "lines": [
                {
                    "id": line.id,
                    "quantity": line.quantity,
                    "variant_id": line.variant_id,
                    "title": line.product_title,
                    "image_url": line.image_url,
                    "unit_price": line.unit_price.to_dict(),
                }
                for line in cart.lines
            ],
            "total": cart.total.to_dict(),
            "checkout_url": cart.checkout_url,
        },
        "count": shop.cart_count(),
        "validation_messages": messages,
        "can_checkout": shop.can_checkout(),
    }


@router.get("/cart")
async def get_cart(shop: Storefront = Depends(get_storefront)):
    """Get the current cart"""
    return cart_response(shop)


@router.post("/cart/lines")
async def add_line(request: AddLineRequest, shop: Storefront = Depends(get_storefront)):
    """Add an item to the cart"""
    try:
        await shop.add_to_cart(request.variant_id, request.quantity)
    except RemoteError as e:
        raise HTTPException(status_code=502, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return cart_response(shop)


@router.patch("/cart/lines/{line_id:path}")
async def update_line(
    line_id: str,
    request: UpdateLineRequest,
    shop: Storefront = Depends(get_storefront),
):
    """Update item quantity in cart"""
    try:
        await shop.update_quantity(line_id, request.quantity, delta=request.delta)
    except RemoteError as e:
        raise HTTPException(status_code=502, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return cart_response(shop)


@router.delete("/cart/lines/{line_id:path}")
async def remove_line(line_id: str, shop: Storefront = Depends(get_storefront)):
    """Remove an item from the cart"""
    try:
        await shop.remove_from_cart(line_id)
    except RemoteError as e:
        raise HTTPException(status_code=502, detail=str(e))
    return cart_response(shop)


@router.get("/cart/validation")
async def get_validation(shop: Storefront = Depends(get_storefront)):
    """Validation messages for the cached cart"""
    messages = shop.get_validation_messages()
    return {"messages": messages, "can_checkout": shop.can_checkout()}


@router.post("/cart/checkout", response_model=CheckoutResponse)
async def checkout(shop: Storefront = Depends(get_storefront)):
    """Validate the cart and hand back the hosted checkout url"""
    result = await shop.checkout()
    return CheckoutResponse(
        status=result.status.value,
        messages=result.messages,
        checkout_url=result.checkout_url,
    )


@router.get("/notifications")
async def list_notifications(shop: Storefront = Depends(get_storefront)):
    """Active notifications, oldest first"""
    return {
        "notifications": [
            {"id": n.id, "message": n.message, "level": n.level.value}
            for n in shop.notifications.active()
        ]
    }


@router.delete("/notifications/{notification_id}")
async def dismiss_notification(notification_id: str, shop: Storefront = Depends(get_storefront)):
    """Dismiss a notification"""
    if shop.notifications.dismiss(notification_id):
        return {"message": "Notification dismissed"}
    raise HTTPException(status_code=404, detail="Notification not found")
