"""Pytest configuration and fixtures"""
import os
import pytest
from unittest.mock import AsyncMock, Mock
from typing import Optional

# Set test environment variables
os.environ.setdefault("SHOP_DOMAIN", "test-store.myshopify.com")
os.environ.setdefault("STOREFRONT_ACCESS_TOKEN", "test_token")

from storefront.services.cart_store import CartStore, MemoryStorage
from storefront.services.models import CatalogPage
from storefront.services.notifications import NotificationCenter
from storefront.services.storefront import Storefront
from storefront.services.storefront_client import StorefrontClient


def make_variant(
    variant_id: str = "gid://shopify/ProductVariant/1",
    title: str = "Default Title",
    amount: str = "25.00",
    currency: str = "USD",
    available_for_sale: Optional[bool] = True,
    inventory_management: Optional[str] = None,
    inventory_policy: Optional[str] = None,
    quantity_available: Optional[int] = None,
    currently_not_in_stock: Optional[bool] = None,
    product_title: str = "Test Hoodie",
    image_url: Optional[str] = "https://cdn.example.com/hoodie.jpg",
) -> dict:
    """Remote merchandise node"""
    return {
        "id": variant_id,
        "title": title,
        "availableForSale": available_for_sale,
        "quantityAvailable": quantity_available,
        "currentlyNotInStock": currently_not_in_stock,
        "inventoryManagement": inventory_management,
        "inventoryPolicy": inventory_policy,
        "priceV2": {"amount": amount, "currencyCode": currency},
        "product": {
            "title": product_title,
            "featuredImage": {"url": image_url} if image_url else None,
        },
    }


def make_line(line_id: str = "gid://shopify/CartLine/1", quantity: int = 1, **variant) -> dict:
    """Remote cart line node"""
    return {"id": line_id, "quantity": quantity, "merchandise": make_variant(**variant)}


def make_cart_payload(
    cart_id: str = "gid://shopify/Cart/abc123",
    lines: Optional[list] = None,
    total: str = "25.00",
    currency: str = "USD",
    checkout_url: Optional[str] = "https://test-store.myshopify.com/cart/c/abc123",
) -> dict:
    """Remote cart payload as returned by cart queries and mutations"""
    if lines is None:
        lines = [make_line()]
    return {
        "id": cart_id,
        "checkoutUrl": checkout_url,
        "lines": {"edges": [{"node": line} for line in lines]},
        "cost": {"totalAmount": {"amount": total, "currencyCode": currency}},
    }


@pytest.fixture
def memory_storage():
    """Empty in-memory local storage"""
    return MemoryStorage()


@pytest.fixture
def cart_store(memory_storage):
    """Cart store over in-memory storage"""
    return CartStore(memory_storage)


@pytest.fixture
def mock_client():
    """Mock storefront client"""
    client = Mock(spec=StorefrontClient)
    client.create_cart = AsyncMock(return_value=make_cart_payload())
    client.add_line = AsyncMock(return_value=make_cart_payload())
    client.update_line = AsyncMock(return_value=make_cart_payload())
    client.remove_lines = AsyncMock(return_value=make_cart_payload(lines=[], total="0.0"))
    client.fetch_cart = AsyncMock(return_value=make_cart_payload())
    client.fetch_catalog = AsyncMock(return_value=[])
    client.fetch_catalog_page = AsyncMock(return_value=CatalogPage())
    client.fetch_product = AsyncMock(return_value=None)
    client.close = AsyncMock()
    return client


@pytest.fixture
def navigate():
    """Records checkout redirects"""
    return Mock()


@pytest.fixture
def clock():
    """Controllable clock for notification expiry"""
    class _Clock:
        now = 1000.0

        def __call__(self):
            return self.now

    return _Clock()


@pytest.fixture
def shop(mock_client, cart_store, navigate, clock):
    """Storefront wired to the mock client"""
    return Storefront(
        client=mock_client,
        store=cart_store,
        navigate=navigate,
        notifications=NotificationCenter(clock=clock),
    )
