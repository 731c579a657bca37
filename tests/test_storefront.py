"""
Tests for the shopper-facing storefront operations
"""

import json
import pytest
from decimal import Decimal

from storefront.core.errors import RemoteError, MESSAGE_ITEM_ADDED, MESSAGE_CHECKOUT_URL_MISSING
from storefront.services.cart_store import CART_STORAGE_KEY
from storefront.services.checkout import CheckoutStatus
from storefront.services.notifications import NotificationLevel
from storefront.services.models import CatalogPage, Product
from storefront.services.reconciler import reconcile_cart
from conftest import make_cart_payload, make_line


def _seed(shop, payload=None):
    shop.store.replace(reconcile_cart(payload or make_cart_payload(lines=[
        make_line("line-1", 2),
    ], total="50.00")))
    shop.store.persist()


class TestAddToCart:
    """Tests for add_to_cart."""

    @pytest.mark.asyncio
    async def test_first_add_creates_cart(self, shop, mock_client, memory_storage):
        cart = await shop.add_to_cart("gid://shopify/ProductVariant/1")

        mock_client.create_cart.assert_awaited_once_with("gid://shopify/ProductVariant/1", 1)
        mock_client.add_line.assert_not_awaited()
        assert cart.id == "gid://shopify/Cart/abc123"
        assert json.loads(memory_storage.get(CART_STORAGE_KEY))["id"] == cart.id
        assert [n.message for n in shop.notifications.active()] == [MESSAGE_ITEM_ADDED]

    @pytest.mark.asyncio
    async def test_next_add_uses_existing_cart(self, shop, mock_client):
        await shop.add_to_cart("variant-1")
        await shop.add_to_cart("variant-2", 3)

        mock_client.add_line.assert_awaited_once_with("gid://shopify/Cart/abc123", "variant-2", 3)
        assert mock_client.create_cart.await_count == 1

    @pytest.mark.asyncio
    async def test_remote_failure_leaves_state_untouched(self, shop, mock_client, memory_storage):
        _seed(shop)
        before = shop.get_cart()
        stored = memory_storage.get(CART_STORAGE_KEY)
        mock_client.add_line.side_effect = RemoteError("Variant is sold out")

        with pytest.raises(RemoteError):
            await shop.add_to_cart("variant-2")

        assert shop.get_cart() is before
        assert memory_storage.get(CART_STORAGE_KEY) == stored
        notes = shop.notifications.active()
        assert notes[0].level == NotificationLevel.ERROR
        assert "Variant is sold out" in notes[0].message

    @pytest.mark.asyncio
    async def test_failed_create_is_not_persisted(self, shop, mock_client, memory_storage):
        mock_client.create_cart.side_effect = RemoteError("HTTP error! status: 500")

        with pytest.raises(RemoteError):
            await shop.add_to_cart("variant-1")

        assert memory_storage.get(CART_STORAGE_KEY) is None
        assert shop.get_cart().id is None

    @pytest.mark.asyncio
    async def test_malformed_payload_is_a_remote_error(self, shop, mock_client, memory_storage):
        mock_client.create_cart.return_value = make_cart_payload(lines=[{"quantity": 1}])

        with pytest.raises(RemoteError, match="malformed cart"):
            await shop.add_to_cart("gid://shopify/ProductVariant/1")

        assert memory_storage.get(CART_STORAGE_KEY) is None
        assert shop.get_cart().id is None
        notes = shop.notifications.active()
        assert [n.level for n in notes] == [NotificationLevel.ERROR]
        assert "Failed to add item" in notes[0].message

    @pytest.mark.asyncio
    async def test_missing_variant_rejected(self, shop, mock_client):
        with pytest.raises(ValueError):
            await shop.add_to_cart("")

        mock_client.create_cart.assert_not_awaited()


class TestUpdateQuantity:
    """Tests for update_quantity."""

    @pytest.mark.asyncio
    async def test_increase_by_delta(self, shop, mock_client):
        _seed(shop)

        await shop.update_quantity("line-1", delta=1)

        mock_client.update_line.assert_awaited_once_with("gid://shopify/Cart/abc123", "line-1", 3)

    @pytest.mark.asyncio
    async def test_absolute_quantity(self, shop, mock_client):
        _seed(shop)

        await shop.update_quantity("line-1", 5)

        mock_client.update_line.assert_awaited_once_with("gid://shopify/Cart/abc123", "line-1", 5)

    @pytest.mark.asyncio
    async def test_decrease_to_zero_removes_line(self, shop, mock_client):
        _seed(shop, make_cart_payload(lines=[make_line("line-1", 1)]))

        cart = await shop.update_quantity("line-1", delta=-1)

        mock_client.update_line.assert_not_awaited()
        mock_client.remove_lines.assert_awaited_once_with("gid://shopify/Cart/abc123", ["line-1"])
        assert cart.is_empty

    @pytest.mark.asyncio
    async def test_absolute_zero_removes_line(self, shop, mock_client):
        _seed(shop)

        await shop.update_quantity("line-1", 0)

        mock_client.remove_lines.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_negative_quantity_rejected(self, shop, mock_client):
        _seed(shop)

        with pytest.raises(ValueError):
            await shop.update_quantity("line-1", -2)

        mock_client.update_line.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_requires_exactly_one_mode(self, shop):
        _seed(shop)

        with pytest.raises(ValueError):
            await shop.update_quantity("line-1")
        with pytest.raises(ValueError):
            await shop.update_quantity("line-1", 2, delta=1)

    @pytest.mark.asyncio
    async def test_unknown_line_is_ignored(self, shop, mock_client):
        _seed(shop)

        cart = await shop.update_quantity("line-404", delta=1)

        assert cart is shop.get_cart()
        mock_client.update_line.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_update_failure_notifies(self, shop, mock_client):
        _seed(shop)
        mock_client.update_line.side_effect = RemoteError("Throttled")

        with pytest.raises(RemoteError):
            await shop.update_quantity("line-1", delta=1)

        assert shop.get_cart().lines[0].quantity == 2
        assert "Failed to update cart" in shop.notifications.active()[0].message

    @pytest.mark.asyncio
    async def test_malformed_total_leaves_cart_untouched(self, shop, mock_client, memory_storage):
        _seed(shop)
        stored = memory_storage.get(CART_STORAGE_KEY)
        payload = make_cart_payload(lines=[make_line("line-1", 3)])
        payload["cost"]["totalAmount"] = {"currencyCode": "USD"}
        mock_client.update_line.return_value = payload

        with pytest.raises(RemoteError):
            await shop.update_quantity("line-1", delta=1)

        assert shop.get_cart().lines[0].quantity == 2
        assert memory_storage.get(CART_STORAGE_KEY) == stored
        assert "Failed to update cart" in shop.notifications.active()[0].message


class TestRemoveFromCart:
    """Tests for remove_from_cart."""

    @pytest.mark.asyncio
    async def test_remove(self, shop, mock_client, memory_storage):
        _seed(shop)

        cart = await shop.remove_from_cart("line-1")

        assert cart.is_empty
        assert json.loads(memory_storage.get(CART_STORAGE_KEY))["items"] == []

    @pytest.mark.asyncio
    async def test_remove_without_cart_is_noop(self, shop, mock_client):
        await shop.remove_from_cart("line-1")

        mock_client.remove_lines.assert_not_awaited()


class TestReads:
    """Tests for synchronous reads."""

    def test_start_restores_persisted_cart(self, shop, memory_storage):
        memory_storage.set(CART_STORAGE_KEY, json.dumps({
            "id": "cart-1",
            "items": [],
            "total": 0,
            "checkoutUrl": None,
        }))

        assert shop.start().id == "cart-1"

    def test_start_with_corrupted_storage(self, shop, memory_storage):
        memory_storage.set(CART_STORAGE_KEY, "{broken")

        cart = shop.start()

        assert cart.is_empty
        assert memory_storage.get(CART_STORAGE_KEY) is None

    def test_validation_messages_and_count(self, shop):
        assert not shop.can_checkout()
        assert "empty" in shop.get_validation_messages()[0]

        _seed(shop)

        assert shop.get_validation_messages() == []
        assert shop.can_checkout()
        assert shop.cart_count() == 2

    @pytest.mark.asyncio
    async def test_refresh_replaces_cart(self, shop, mock_client):
        _seed(shop)
        mock_client.fetch_cart.return_value = make_cart_payload(total="99.00")

        cart = await shop.refresh()

        assert cart.total.amount == Decimal("99.00")


class TestCheckout:
    """Tests for checkout through the storefront."""

    @pytest.mark.asyncio
    async def test_checkout_redirects(self, shop, navigate):
        _seed(shop)

        result = await shop.checkout()

        assert result.status == CheckoutStatus.REDIRECTED
        navigate.assert_called_once_with("https://test-store.myshopify.com/cart/c/abc123")
        assert not shop.can_checkout()

    @pytest.mark.asyncio
    async def test_blocking_messages_shown_together(self, shop, mock_client):
        _seed(shop)
        mock_client.fetch_cart.return_value = make_cart_payload(
            lines=[make_line(available_for_sale=False, inventory_management="SHOPIFY", inventory_policy="DENY")],
            total="0.00",
        )

        result = await shop.checkout()

        assert result.status == CheckoutStatus.BLOCKED
        messages = [n.message for n in shop.notifications.active()]
        assert messages == result.messages
        assert len(messages) == 2

    @pytest.mark.asyncio
    async def test_missing_url_message(self, shop):
        _seed(shop, make_cart_payload(checkout_url=None))

        result = await shop.checkout()

        assert result.status == CheckoutStatus.URL_MISSING
        assert shop.notifications.active()[0].message == MESSAGE_CHECKOUT_URL_MISSING


class TestCatalog:
    """Tests for catalog loading."""

    @pytest.mark.asyncio
    async def test_load_products_failure_notifies(self, shop, mock_client):
        mock_client.fetch_catalog_page.side_effect = RemoteError("HTTP error! status: 500")

        with pytest.raises(RemoteError):
            await shop.load_products()

        assert "Failed to load products" in shop.notifications.active()[0].message

    @pytest.mark.asyncio
    async def test_load_products(self, shop, mock_client):
        page = await shop.load_products(page_size=5)

        mock_client.fetch_catalog_page.assert_awaited_once_with(5, None)
        assert page.products == []
        assert shop.products == []

    @pytest.mark.asyncio
    async def test_load_next_page(self, shop, mock_client):
        product = Product(id="gid://shopify/Product/2", title="Cap")
        mock_client.fetch_catalog_page.return_value = CatalogPage([product], "c2", False)

        page = await shop.load_products(page_size=1, after="c1")

        mock_client.fetch_catalog_page.assert_awaited_once_with(1, "c1")
        assert page.end_cursor == "c2"
        assert page.has_next_page is False
        assert shop.products == [product]
