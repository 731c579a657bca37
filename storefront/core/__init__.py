# Core modules

from .config import settings, get_settings, Settings, StoreConfig
from .errors import StorefrontError, RemoteError, PersistenceError

__all__ = [
    "settings",
    "get_settings",
    "Settings",
    "StoreConfig",
    "StorefrontError",
    "RemoteError",
    "PersistenceError",
]
