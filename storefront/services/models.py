"""Cart and catalog data models"""

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Optional, Any


DEFAULT_CURRENCY = "USD"


def to_decimal(value: Any) -> Decimal:
    """
    Convert a remote or persisted amount to Decimal.

    Floats go through str() so 19.99 stays 19.99. Raises ValueError
    for anything that is not a finite number.
    """
    if isinstance(value, bool) or value is None:
        raise ValueError(f"Invalid amount: {value!r}")
    try:
        if isinstance(value, Decimal):
            amount = value
        elif isinstance(value, float):
            amount = Decimal(str(value))
        else:
            amount = Decimal(value)
    except (InvalidOperation, TypeError) as e:
        raise ValueError(f"Invalid amount: {value!r}") from e
    if not amount.is_finite():
        raise ValueError(f"Invalid amount: {value!r}")
    return amount


@dataclass
class Money:
    """Decimal amount with a currency code"""
    amount: Decimal = Decimal("0")
    currency_code: str = DEFAULT_CURRENCY

    def __post_init__(self):
        self.amount = to_decimal(self.amount)

    def to_dict(self) -> dict:
        return {"amount": str(self.amount), "currencyCode": self.currency_code}

    @classmethod
    def from_dict(cls, data: Optional[dict], default_currency: str = DEFAULT_CURRENCY) -> "Money":
        if not data:
            return cls(Decimal("0"), default_currency)
        return cls(
            amount=to_decimal(data["amount"]),
            currency_code=data.get("currencyCode") or default_currency,
        )


@dataclass
class Variant:
    """
    A purchasable configuration of a product.

    The raw inventory fields are kept as the remote service sent them;
    availability is derived from them at validation time.
    """
    id: str
    title: str = ""
    price: Money = field(default_factory=Money)
    available_for_sale: Optional[bool] = None
    inventory_management: Optional[str] = None
    inventory_policy: Optional[str] = None
    quantity_available: Optional[int] = None
    currently_not_in_stock: Optional[bool] = None
    product_title: Optional[str] = None
    image_url: Optional[str] = None

    def to_dict(self) -> dict:
        """Convert to the remote merchandise shape"""
        return {
            "id": self.id,
            "title": self.title,
            "priceV2": self.price.to_dict(),
            "availableForSale": self.available_for_sale,
            "inventoryManagement": self.inventory_management,
            "inventoryPolicy": self.inventory_policy,
            "quantityAvailable": self.quantity_available,
            "currentlyNotInStock": self.currently_not_in_stock,
            "product": {
                "title": self.product_title,
                "featuredImage": {"url": self.image_url} if self.image_url else None,
            },
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Variant":
        """Create from the remote merchandise shape"""
        product = data.get("product") or {}
        image = product.get("featuredImage") or {}
        price = data.get("priceV2") or data.get("price")
        return cls(
            id=data["id"],
            title=data.get("title") or "",
            price=Money.from_dict(price),
            available_for_sale=data.get("availableForSale"),
            inventory_management=data.get("inventoryManagement"),
            inventory_policy=data.get("inventoryPolicy"),
            quantity_available=data.get("quantityAvailable"),
            currently_not_in_stock=data.get("currentlyNotInStock"),
            product_title=product.get("title"),
            image_url=image.get("url"),
        )


@dataclass
class CartLine:
    """One variant + quantity entry in a cart"""
    id: str
    quantity: int
    variant: Optional[Variant] = None

    def __post_init__(self):
        if isinstance(self.quantity, bool) or not isinstance(self.quantity, int):
            raise ValueError(f"quantity must be an integer, got {self.quantity!r}")
        if self.quantity < 1:
            raise ValueError("quantity must be a positive integer")

    @property
    def variant_id(self) -> Optional[str]:
        return self.variant.id if self.variant else None

    @property
    def unit_price(self) -> Money:
        return self.variant.price if self.variant else Money()

    @property
    def product_title(self) -> Optional[str]:
        return self.variant.product_title if self.variant else None

    @property
    def image_url(self) -> Optional[str]:
        return self.variant.image_url if self.variant else None

    def to_dict(self) -> dict:
        """Convert to dictionary for local storage."""
        return {
            "id": self.id,
            "quantity": self.quantity,
            "variant": self.variant.to_dict() if self.variant else None,
            "price": float(self.unit_price.amount),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "CartLine":
        """Create from dictionary."""
        variant = data.get("variant")
        return cls(
            id=data["id"],
            quantity=data["quantity"],
            variant=Variant.from_dict(variant) if variant else None,
        )


@dataclass
class Cart:
    """Local view of the remote cart"""
    id: Optional[str] = None
    lines: list[CartLine] = field(default_factory=list)
    total: Money = field(default_factory=Money)
    checkout_url: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return not self.lines

    @property
    def total_quantity(self) -> int:
        """Number of units across all lines"""
        return sum(line.quantity for line in self.lines)

    def find_line(self, line_id: str) -> Optional[CartLine]:
        return next((line for line in self.lines if line.id == line_id), None)

    def to_dict(self) -> dict:
        """Convert to the persisted cart record."""
        return {
            "id": self.id,
            "items": [line.to_dict() for line in self.lines],
            "total": float(self.total.amount),
            "totalAmount": str(self.total.amount),
            "currency": self.total.currency_code,
            "checkoutUrl": self.checkout_url,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Cart":
        """
        Create from the persisted cart record.

        The exact `totalAmount` string wins over the numeric `total`.
        Raises KeyError, TypeError or ValueError on malformed records.
        """
        if not isinstance(data, dict):
            raise TypeError(f"Cart record must be an object, got {type(data).__name__}")
        cart_id = data.get("id")
        if cart_id is not None and not isinstance(cart_id, str):
            raise TypeError("Cart id must be a string")
        items = data.get("items") or []
        if not isinstance(items, list):
            raise TypeError("Cart items must be a list")
        return cls(
            id=cart_id,
            lines=[CartLine.from_dict(item) for item in items],
            total=Money(
                amount=to_decimal(data.get("totalAmount", data.get("total", 0))),
                currency_code=data.get("currency") or DEFAULT_CURRENCY,
            ),
            checkout_url=data.get("checkoutUrl"),
        )


@dataclass
class Product:
    """Catalog product with its variants"""
    id: str
    title: str
    handle: Optional[str] = None
    description: str = ""
    image_url: Optional[str] = None
    variants: list[Variant] = field(default_factory=list)

    @property
    def first_variant(self) -> Optional[Variant]:
        return self.variants[0] if self.variants else None


@dataclass
class CatalogPage:
    """One page of catalog products plus the cursor to continue from"""
    products: list[Product] = field(default_factory=list)
    end_cursor: Optional[str] = None
    has_next_page: bool = False
