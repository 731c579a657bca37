"""Product API routes"""

from typing import Optional
from fastapi import APIRouter, HTTPException, Depends, Query

from ..core.config import settings
from ..core.errors import RemoteError
from ..services.models import Product
from ..services.storefront import Storefront
from ..services.validator import is_available
from .cart import get_storefront

router = APIRouter(prefix="/api/products", tags=["Products"])


def product_response(product: Product) -> dict:
    """Serialize a product with derived variant availability"""
    return {
        "id": product.id,
        "title": product.title,
        "handle": product.handle,
        "description": product.description,
        "image_url": product.image_url,
        "available": is_available(product.first_variant),
        "variants": [
            {
                "id": variant.id,
                "title": variant.title,
                "price": variant.price.to_dict(),
                "available": is_available(variant),
            }
            for variant in product.variants
        ],
    }


@router.get("")
async def list_products(
    limit: Optional[int] = Query(default=None, ge=1, le=250),
    after: Optional[str] = None,
    shop: Storefront = Depends(get_storefront),
):
    """List one catalog page; pass `page_info.end_cursor` as `after` for the next"""
    try:
        page = await shop.load_products(limit or settings.catalog_page_size, after)
    except RemoteError as e:
        raise HTTPException(status_code=502, detail=str(e))
    return {
        "products": [product_response(p) for p in page.products],
        "page_info": {
            "end_cursor": page.end_cursor,
            "has_next_page": page.has_next_page,
        },
    }


@router.get("/{handle}")
async def get_product(handle: str, shop: Storefront = Depends(get_storefront)):
    """Get product details"""
    try:
        product = await shop.get_product(handle)
    except RemoteError as e:
        raise HTTPException(status_code=502, detail=str(e))
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return product_response(product)
