# storefront/models/filter_config.py

"""Listing filter and sort configuration."""

from dataclasses import dataclass
from enum import Enum


class SortMode(str, Enum):
    """Display order of the product listing."""

    NEWEST = "newest"
    PRICE_ASCENDING = "price-ascending"
    PRICE_DESCENDING = "price-descending"

    @property
    def label(self) -> str:
        """Human readable label for selectors."""
        return _SORT_LABELS[self]


_SORT_LABELS: dict[SortMode, str] = {
    SortMode.NEWEST: "Newest first",
    SortMode.PRICE_ASCENDING: "Price: low to high",
    SortMode.PRICE_DESCENDING: "Price: high to low",
}


@dataclass(frozen=True)
class FilterConfig:
    """Search, price range and sort state owned by the listing view.

    Price bounds are inclusive and use the same units as
    ``Product.price`` (kobo).
    """

    search_text: str = ""
    sort_mode: SortMode = SortMode.NEWEST
    min_price: float | None = None
    max_price: float | None = None
    require_image: bool = False
