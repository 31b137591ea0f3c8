# storefront/filters/product_pipeline.py

"""Listing filter/sort pipeline: search, price range, image-only, order."""

import logging
from collections.abc import Sequence
from functools import lru_cache

from storefront.config.settings import Settings
from storefront.models.filter_config import FilterConfig, SortMode
from storefront.models.product import Product

logger = logging.getLogger("storefront.filters")


class ProductPipeline:
    """Derive the displayed product subset from the list and a config."""

    @staticmethod
    def apply(
        products: Sequence[Product],
        config: FilterConfig,
    ) -> list[Product]:
        """Filter then sort *products* according to *config*.

        Steps run strictly in order: search text (name OR short
        description, case-insensitive substring), minimum price, maximum
        price, image-only, then sort. Price sorts are stable, so equal
        prices keep their incoming order. ``newest`` keeps the input order,
        which the gateway already delivers newest first.

        The caller's sequence is never mutated.
        """
        result = list(products)

        query = config.search_text.strip().lower()
        if query:
            result = [
                p
                for p in result
                if query in p.name.lower()
                or query in p.short_description.lower()
            ]

        if config.min_price is not None:
            result = [p for p in result if p.price >= config.min_price]

        if config.max_price is not None:
            result = [p for p in result if p.price <= config.max_price]

        if config.require_image:
            marker = Settings.PLACEHOLDER_MARKER
            result = [
                p
                for p in result
                if p.image and marker not in p.image.lower()
            ]

        if config.sort_mode == SortMode.PRICE_ASCENDING:
            result = sorted(result, key=lambda p: p.price)
        elif config.sort_mode == SortMode.PRICE_DESCENDING:
            result = sorted(result, key=lambda p: p.price, reverse=True)

        logger.debug(
            "Pipeline kept %d of %d products (%s)",
            len(result),
            len(products),
            config,
        )
        return result

    @staticmethod
    def apply_cached(
        products: Sequence[Product],
        config: FilterConfig,
    ) -> list[Product]:
        """Memoised :meth:`apply`, keyed only on the products and config."""
        return list(_apply_memo(tuple(products), config))

    @staticmethod
    def cache_info() -> str:
        """Expose memo statistics for debugging."""
        return str(_apply_memo.cache_info())

    @staticmethod
    def clear_cache() -> None:
        """Drop all memoised results."""
        _apply_memo.cache_clear()

    @staticmethod
    def summarize(shown: int, total: int) -> str:
        """Build the listing status line."""
        if total == 0:
            return "No products in the catalog yet"
        if shown == 0:
            return "No products match your filters"
        if shown == total:
            return f"Showing all {total} products"
        return f"Showing {shown} of {total} products"


@lru_cache(maxsize=Settings.PIPELINE_CACHE_SIZE)
def _apply_memo(
    products: tuple[Product, ...],
    config: FilterConfig,
) -> tuple[Product, ...]:
    return tuple(ProductPipeline.apply(products, config))
