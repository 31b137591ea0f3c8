# storefront/models/product.py

"""Product data models for inter-module data flow."""

import math
from dataclasses import dataclass
from typing import Any

from storefront.config.settings import Settings

# Serialised key → attribute name, in canonical field order
_FIELD_KEYS: dict[str, str] = {
    "id": "id",
    "name": "name",
    "shortDescription": "short_description",
    "fullDescription": "full_description",
    "price": "price",
    "image": "image",
}


@dataclass(frozen=True)
class Product:
    """A canonical catalog product.

    ``price`` is in minor currency units (kobo), exactly as the hosted
    table stores ``price_cents``.
    """

    id: str
    name: str
    short_description: str = ""
    full_description: str = ""
    price: float = 0.0
    image: str = Settings.PLACEHOLDER_IMAGE

    def to_dict(self) -> dict[str, Any]:
        """Serialise to the camelCase snapshot shape."""
        return {
            key: getattr(self, attr) for key, attr in _FIELD_KEYS.items()
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Product":
        """Rebuild a product from its snapshot shape.

        Strict: raises ``KeyError``, ``TypeError`` or ``ValueError``
        when the data does not look like a serialised product.
        """
        if not isinstance(data, dict):
            raise TypeError(
                f"expected a product object, got {type(data).__name__}"
            )
        values = {attr: data[key] for key, attr in _FIELD_KEYS.items()}
        for attr in ("id", "name", "short_description",
                     "full_description", "image"):
            if not isinstance(values[attr], str):
                raise TypeError(f"product field '{attr}' must be a string")
        price = values["price"]
        if isinstance(price, bool) or not isinstance(price, (int, float)):
            raise TypeError("product field 'price' must be a number")
        if not math.isfinite(price):
            raise ValueError("product field 'price' must be finite")
        if price < 0:
            raise ValueError("product field 'price' must be non-negative")
        return cls(**values)

    def to_record(self) -> dict[str, Any]:
        """Render as a raw hosted-table record (inverse of reconciliation)."""
        return {
            "id": self.id,
            "name": self.name,
            "short_description": self.short_description,
            "full_description": self.full_description,
            "price_cents": self.price,
            "image_url": self.image,
        }

    @property
    def has_real_image(self) -> bool:
        """True when the image is set and is not the placeholder asset."""
        return bool(self.image) and (
            Settings.PLACEHOLDER_MARKER not in self.image.lower()
        )


@dataclass
class ProductDraft:
    """Admin form input for a product that has not been stored yet."""

    name: str
    short_description: str
    full_description: str
    price_cents: int = 0
    image_url: str = ""

    def validate(self) -> list[str]:
        """Return human readable problems; empty when the draft is valid."""
        problems: list[str] = []
        if not self.name.strip():
            problems.append("Product name is required")
        if not self.short_description.strip():
            problems.append("Short description is required")
        if not self.full_description.strip():
            problems.append("Full description is required")
        if self.price_cents < 0:
            problems.append("Price cannot be negative")
        return problems

    def to_record(self) -> dict[str, Any]:
        """Build the insert payload for the hosted products table."""
        record: dict[str, Any] = {
            "name": self.name.strip(),
            "short_description": self.short_description.strip(),
            "full_description": self.full_description.strip(),
            "price_cents": self.price_cents,
        }
        if self.image_url.strip():
            record["image_url"] = self.image_url.strip()
        return record


def to_minor_units(amount: str | float | None) -> int | None:
    """Convert a major-unit amount (e.g. ``"1,500.50"`` naira) to kobo.

    Returns ``None`` for blank or unparseable input.
    """
    if amount is None:
        return None
    if isinstance(amount, str):
        cleaned = amount.replace(",", "").strip()
        if not cleaned:
            return None
        try:
            value = float(cleaned)
        except ValueError:
            return None
    else:
        value = float(amount)
    if not math.isfinite(value):
        return None
    return round(value * Settings.MINOR_UNITS_PER_MAJOR)


def format_price(price: float) -> str:
    """Format a minor-unit price for display, e.g. ``₦1,500.00``."""
    major = price / Settings.MINOR_UNITS_PER_MAJOR
    return f"{Settings.CURRENCY_SYMBOL}{major:,.2f}"
