"""
Storefront API Client

Async GraphQL client for the remote commerce storefront API.
Each call is one round trip with a bounded timeout; nothing is cached
and no local cart state is touched.
"""

import logging
from typing import Optional, Any, Mapping

import httpx

from ..core.config import StoreConfig
from ..core.errors import RemoteError
from . import queries
from .models import CatalogPage, Product
from .reconciler import parse_product

logger = logging.getLogger(__name__)


class StorefrontClient:
    """
    Client for the remote storefront GraphQL endpoint.

    Usage:
        async with StorefrontClient("shop.example.com", token) as client:
            payload = await client.create_cart(variant_id, 1)
    """

    def __init__(
        self,
        shop_domain: str,
        storefront_access_token: str,
        api_version: str = "2024-01",
        timeout: float = 10.0,
        access_token_header: str = "X-Shopify-Storefront-Access-Token",
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize storefront client.

        Args:
            shop_domain: Store domain, e.g. "example.myshopify.com"
            storefront_access_token: Public storefront access token
            api_version: Storefront API version
            timeout: Per-request timeout in seconds
            access_token_header: Header carrying the access token
            transport: Optional httpx transport (used by tests)
        """
        self.shop_domain = shop_domain
        self.api_version = api_version or "2024-01"
        self.endpoint = f"https://{shop_domain}/api/{self.api_version}/graphql.json"
        self._headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
            access_token_header: storefront_access_token,
        }
        self._http_client = httpx.AsyncClient(timeout=timeout, transport=transport)

    @classmethod
    def from_store_config(cls, config: StoreConfig, **kwargs) -> "StorefrontClient":
        """Create client from an injected store config"""
        return cls(
            shop_domain=config.shop_domain,
            storefront_access_token=config.storefront_access_token,
            api_version=config.api_version,
            **kwargs,
        )

    @classmethod
    def from_config(cls, config: Mapping[str, Any], **kwargs) -> "StorefrontClient":
        """
        Create client from a store-config mapping.

        Accepts both `storefrontAccessToken` and `storefrontToken`.
        """
        shop_domain = config.get("shopDomain") or config.get("shop_domain")
        token = (
            config.get("storefrontAccessToken")
            or config.get("storefrontToken")
            or config.get("storefront_access_token")
            or config.get("storefront_token")
        )
        if not shop_domain or not token:
            raise ValueError("Store config requires shopDomain and a storefront access token")
        return cls(
            shop_domain=shop_domain,
            storefront_access_token=token,
            api_version=config.get("apiVersion") or config.get("api_version") or "2024-01",
            **kwargs,
        )

    async def __aenter__(self) -> "StorefrontClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def close(self) -> None:
        """Close HTTP client"""
        await self._http_client.aclose()

    async def query(self, document: str, variables: Optional[dict] = None) -> dict[str, Any]:
        """Run a GraphQL document and return its `data` object"""
        try:
            response = await self._http_client.post(
                self.endpoint,
                headers=self._headers,
                json={"query": document, "variables": variables or {}},
            )
        except httpx.TimeoutException as e:
            logger.error(f"Storefront request timed out: {e}")
            raise RemoteError("Request to the store timed out") from e
        except httpx.HTTPError as e:
            logger.error(f"Storefront request failed: {e}")
            raise RemoteError(f"Request to the store failed: {e}") from e

        if not response.is_success:
            logger.error(f"Request failed: {response.status_code} - {response.text}")
            raise RemoteError(f"HTTP error! status: {response.status_code}")

        try:
            body = response.json()
        except ValueError as e:
            raise RemoteError("Store returned a non-JSON response") from e

        if not isinstance(body, dict):
            raise RemoteError("Store returned an unexpected response")

        errors = body.get("errors")
        if errors:
            message = errors[0].get("message") if isinstance(errors[0], dict) else str(errors[0])
            logger.error(f"GraphQL error: {message}")
            raise RemoteError(f"GraphQL error: {message}")

        return body.get("data") or {}

    async def _mutate(self, document: str, field: str, variables: dict) -> dict:
        """Run a cart mutation and return its cart payload"""
        data = await self.query(document, variables)
        result = data.get(field) or {}

        user_errors = result.get("userErrors") or []
        if user_errors:
            message = user_errors[0].get("message") or "Unknown cart error"
            logger.warning(f"{field} rejected: {message}")
            raise RemoteError(message)

        cart = result.get("cart")
        if not cart:
            raise RemoteError(f"{field} returned no cart")
        return cart

    # ==================== Cart APIs ====================

    async def create_cart(self, variant_id: str, quantity: int = 1) -> dict:
        """Create a new cart holding one line"""
        return await self._mutate(
            queries.CREATE_CART,
            "cartCreate",
            {"input": {"lines": [{"quantity": quantity, "merchandiseId": variant_id}]}},
        )

    async def add_line(self, cart_id: str, variant_id: str, quantity: int = 1) -> dict:
        """Add a variant to an existing cart"""
        return await self._mutate(
            queries.ADD_LINES,
            "cartLinesAdd",
            {"cartId": cart_id, "lines": [{"quantity": quantity, "merchandiseId": variant_id}]},
        )

    async def update_line(self, cart_id: str, line_id: str, quantity: int) -> dict:
        """Set the quantity of a cart line"""
        return await self._mutate(
            queries.UPDATE_LINES,
            "cartLinesUpdate",
            {"cartId": cart_id, "lines": [{"id": line_id, "quantity": quantity}]},
        )

    async def remove_lines(self, cart_id: str, line_ids: list[str]) -> dict:
        """Remove lines from a cart"""
        return await self._mutate(
            queries.REMOVE_LINES,
            "cartLinesRemove",
            {"cartId": cart_id, "lineIds": list(line_ids)},
        )

    async def fetch_cart(self, cart_id: str) -> Optional[dict]:
        """Get cart by ID, None when it expired or does not exist"""
        data = await self.query(queries.GET_CART, {"cartId": cart_id})
        cart = data.get("cart")
        if cart is None:
            logger.info(f"Cart {cart_id} not found upstream")
        return cart

    # ==================== Product APIs ====================

    async def fetch_catalog(self, page_size: int = 20) -> list[Product]:
        """Get the first page of the product catalog"""
        page = await self.fetch_catalog_page(page_size)
        return page.products

    async def fetch_catalog_page(self, page_size: int = 20, after: Optional[str] = None) -> CatalogPage:
        """Get one page of the product catalog, starting after a cursor"""
        data = await self.query(queries.GET_PRODUCTS, {"first": page_size, "after": after})
        connection = data.get("products") or {}
        edges = connection.get("edges") or []
        page_info = connection.get("pageInfo") or {}

        end_cursor = page_info.get("endCursor")
        if end_cursor is None and edges:
            end_cursor = edges[-1].get("cursor")

        return CatalogPage(
            products=[self._parse_product(edge["node"]) for edge in edges if edge.get("node")],
            end_cursor=end_cursor,
            has_next_page=bool(page_info.get("hasNextPage")),
        )

    async def fetch_product(self, handle: str) -> Optional[Product]:
        """Get product details by handle"""
        data = await self.query(queries.GET_PRODUCT, {"handle": handle})
        node = data.get("productByHandle")
        return self._parse_product(node) if node else None

    def _parse_product(self, node: dict) -> Product:
        try:
            return parse_product(node)
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            logger.error(f"Malformed product payload: {e!r}")
            raise RemoteError(f"Store returned a malformed product: {e}") from e
