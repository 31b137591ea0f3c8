# storefront/storage/seed_catalog.py

"""Built-in starter catalog shown before any data is available."""

import json
import logging
from pathlib import Path
from typing import Any

from storefront.config.settings import Settings
from storefront.filters.reconciler import RecordReconciler
from storefront.models.product import Product

logger = logging.getLogger("storefront.storage")


def load_seed_products(path: Path | None = None) -> list[Product]:
    """Load and reconcile the bundled seed records.

    A missing or unreadable seed file yields an empty catalog.
    """
    seed_path = path or Settings.SEED_PATH
    try:
        with open(seed_path, encoding="utf-8") as f:
            records: Any = json.load(f)
    except (OSError, json.JSONDecodeError) as exc:
        logger.warning("Seed catalog unavailable at %s: %s", seed_path, exc)
        return []
    if not isinstance(records, list):
        logger.warning("Seed catalog at %s is not a list", seed_path)
        return []
    return RecordReconciler.reconcile_all(
        r for r in records if isinstance(r, dict)
    )
