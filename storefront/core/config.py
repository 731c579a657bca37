"""Storefront Configuration"""

from dataclasses import dataclass
from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache


@dataclass(frozen=True)
class StoreConfig:
    """Connection details for one remote store"""
    shop_domain: str
    storefront_access_token: str
    api_version: str = "2024-01"


class Settings(BaseSettings):
    """Application settings loaded from environment"""

    # Application
    app_name: str = "Storefront"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 8000

    # Store Configuration
    shop_domain: str = ""
    storefront_access_token: Optional[str] = None
    storefront_token: Optional[str] = None  # Older config files use this name
    api_version: str = "2024-01"
    access_token_header: str = "X-Shopify-Storefront-Access-Token"
    request_timeout: float = 10.0

    # Cart
    cart_storage_dir: str = ".storefront"
    catalog_page_size: int = 20

    # Checkout
    checkout_release_timeout: float = 30.0
    redirect_delay: float = 0.0

    # Notifications
    error_message_ttl: float = 5.0
    success_message_ttl: float = 3.0

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    def get_access_token(self) -> Optional[str]:
        """Get the storefront token under either of its names"""
        return self.storefront_access_token or self.storefront_token

    def store_config(self) -> StoreConfig:
        """Build the store config injected into the remote client"""
        token = self.get_access_token()
        if not self.shop_domain or not token:
            raise ValueError("SHOP_DOMAIN and STOREFRONT_ACCESS_TOKEN must be set")
        return StoreConfig(
            shop_domain=self.shop_domain,
            storefront_access_token=token,
            api_version=self.api_version,
        )

    @property
    def store_configured(self) -> bool:
        """Check if the remote store is configured"""
        return bool(self.shop_domain and self.get_access_token())


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


settings = get_settings()
