"""
Cart State Store

Owns the in-process Cart and mirrors it to durable local storage.
Replacing the cart and persisting it are separate steps: callers
persist only after a remote call has been reconciled successfully.
"""

import json
import logging
from pathlib import Path
from typing import Optional, Protocol

from ..core.errors import PersistenceError
from .models import Cart

logger = logging.getLogger(__name__)

CART_STORAGE_KEY = "shopify-cart"


class LocalStorage(Protocol):
    """Key/value storage holding JSON documents"""

    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...


class MemoryStorage:
    """In-memory storage"""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self.data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value

    def delete(self, key: str) -> None:
        self.data.pop(key, None)


class FileStorage:
    """One file per key under a directory, written as a full overwrite"""

    def __init__(self, directory: str | Path):
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def get(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set(self, key: str, value: str) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self._path(key)
        tmp_path = path.with_suffix(".tmp")
        tmp_path.write_text(value, encoding="utf-8")
        tmp_path.replace(path)

    def delete(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)


def decode_cart(raw: str) -> Cart:
    """Decode a persisted cart record, raising PersistenceError if malformed"""
    try:
        return Cart.from_dict(json.loads(raw))
    except (ValueError, KeyError, TypeError, AttributeError) as e:
        raise PersistenceError(f"Corrupted cart record: {e}") from e


class CartStore:
    """Authoritative local view of the cart between remote round trips"""

    def __init__(self, storage: LocalStorage, key: str = CART_STORAGE_KEY):
        self.storage = storage
        self.key = key
        self._cart = Cart()

    def current(self) -> Cart:
        """Get the current cart"""
        return self._cart

    def replace(self, cart: Cart) -> None:
        """Swap in a new cart; does not persist"""
        self._cart = cart

    def persist(self) -> None:
        """Write the full cart to local storage"""
        self.storage.set(self.key, json.dumps(self._cart.to_dict()))
        logger.debug(f"Persisted cart {self._cart.id} ({len(self._cart.lines)} lines)")

    def restore(self) -> Optional[Cart]:
        """
        Load the persisted cart into memory.

        Returns None when nothing is stored. A corrupted record is
        deleted and the cart reset to empty; this never raises.
        """
        try:
            raw = self.storage.get(self.key)
            if not raw:
                return None
            cart = decode_cart(raw)
        except (PersistenceError, UnicodeDecodeError, OSError) as e:
            logger.warning(f"Failed to load cart from storage: {e}")
            self._cart = Cart()
            try:
                self.storage.delete(self.key)
            except OSError as delete_error:
                logger.error(f"Failed to remove corrupted cart record: {delete_error}")
            return None

        self._cart = cart
        logger.info(f"Restored cart {cart.id} with {len(cart.lines)} lines")
        return cart

    def clear(self) -> None:
        """Drop the persisted record and reset to an empty cart"""
        self.storage.delete(self.key)
        self._cart = Cart()
