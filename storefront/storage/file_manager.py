# storefront/storage/file_manager.py

"""Handles saving displayed listings to disk."""

import csv
import json
import logging
import re
from datetime import datetime
from pathlib import Path

from storefront.config.settings import Settings
from storefront.models.product import Product, format_price

logger = logging.getLogger("storefront.storage")

_UNSAFE_CHARS_RE = re.compile(r"[^A-Za-z0-9_-]+")


def _slug(label: str) -> str:
    """Make a filesystem-safe file name fragment."""
    return _UNSAFE_CHARS_RE.sub("_", label.strip()).strip("_") or "all"


class FileManager:
    """Handles saving displayed listings to disk."""

    def __init__(self, exports_dir: Path | None = None) -> None:
        self.exports_dir: Path = exports_dir or Settings.EXPORTS_DIR
        self.exports_dir.mkdir(parents=True, exist_ok=True)
        logger.debug(
            "FileManager initialised, exports_dir=%s", self.exports_dir
        )

    def save_listing(self, label: str, products: list[Product]) -> Path:
        """Save products (in displayed order) to a timestamped JSON file."""
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        filepath = self.exports_dir / f"listing_{_slug(label)}_{timestamp}.json"

        with open(filepath, "w", encoding="utf-8") as f:
            json.dump(
                [p.to_dict() for p in products],
                f,
                ensure_ascii=False,
                indent=2,
            )

        logger.info(
            "Saved %d products for '%s' to %s",
            len(products),
            label,
            filepath,
        )
        return filepath

    def export_csv(self, label: str, products: list[Product]) -> Path:
        """Export products (in displayed order) to a spreadsheet-ready CSV."""
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        filepath = self.exports_dir / f"export_{_slug(label)}_{timestamp}.csv"

        with open(filepath, "w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f)
            writer.writerow(
                ["ID", "Name", "Short Description", "Price", "Image"]
            )
            for p in products:
                writer.writerow(
                    [
                        p.id,
                        p.name,
                        p.short_description,
                        format_price(p.price),
                        p.image,
                    ]
                )

        logger.info(
            "Exported %d products for '%s' to %s",
            len(products),
            label,
            filepath,
        )
        return filepath
