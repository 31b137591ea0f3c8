# storefront/filters/reconciler.py

"""Map raw hosted-table records onto the canonical Product shape."""

import logging
import math
import re
from collections.abc import Iterable, Mapping
from typing import Any

from storefront.config.settings import Settings
from storefront.models.product import Product

logger = logging.getLogger("storefront.reconciler")

_NUMBER_RE = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$")


class RecordReconciler:
    """Total, defaulting mapping from raw records to products.

    Every field has a fallback, so ``reconcile`` never raises no matter
    which optional or alternately named fields a record carries.
    """

    @staticmethod
    def coerce_price(value: Any) -> float:
        """Coerce a raw ``price_cents`` value to a non-negative number.

        Accepts ints, floats and numeric strings (``"1,250"``). Anything
        else, including booleans, NaN, infinities and negatives, is 0.
        """
        if not value or isinstance(value, bool):
            return 0.0
        if isinstance(value, (int, float)):
            number = float(value)
        elif isinstance(value, str):
            cleaned = value.replace(",", "").strip()
            if not _NUMBER_RE.match(cleaned):
                return 0.0
            number = float(cleaned)
        else:
            return 0.0
        if not math.isfinite(number) or number < 0:
            return 0.0
        return number

    @staticmethod
    def _text(value: Any, default: str = "") -> str:
        """Return *value* as display text, or *default* when falsy."""
        if not value:
            return default
        return value if isinstance(value, str) else str(value)

    @staticmethod
    def reconcile(raw: Mapping[str, Any]) -> Product:
        """Build a Product from one raw record, applying field defaults."""
        raw_id = raw.get("id")
        text = RecordReconciler._text
        return Product(
            id="" if raw_id is None else str(raw_id),
            name=text(
                raw.get("name") or raw.get("title"),
                Settings.DEFAULT_NAME,
            ),
            short_description=text(raw.get("short_description")),
            full_description=text(raw.get("full_description")),
            price=RecordReconciler.coerce_price(raw.get("price_cents")),
            image=text(raw.get("image_url"), Settings.PLACEHOLDER_IMAGE),
        )

    @staticmethod
    def reconcile_all(
        raws: Iterable[Mapping[str, Any]],
    ) -> list[Product]:
        """Reconcile a fetched batch, preserving its order."""
        products = [RecordReconciler.reconcile(raw) for raw in raws]
        defaulted = sum(
            1 for p in products if p.name == Settings.DEFAULT_NAME
        )
        if defaulted:
            logger.debug(
                "Reconciled %d records (%d without a name)",
                len(products),
                defaulted,
            )
        return products
