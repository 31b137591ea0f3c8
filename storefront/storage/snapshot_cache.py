# storefront/storage/snapshot_cache.py

"""Best-effort on-disk mirror of the last successfully fetched catalog."""

import json
import logging
import os
import tempfile
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from storefront.config.settings import Settings
from storefront.models.product import Product

logger = logging.getLogger("storefront.cache")


class CacheError(Exception):
    """The local snapshot could not be read or parsed."""


class SnapshotCache:
    """Key/value JSON document holding one serialised product snapshot.

    The document mimics a browser local-storage area: the snapshot sits
    under a single well-known key and other keys are left untouched.
    Nothing here ever raises to the caller. A missing or corrupt
    snapshot loads as ``None`` and a failed write is logged and dropped.
    """

    def __init__(
        self,
        path: Path | None = None,
        key: str | None = None,
    ) -> None:
        self.path: Path = path or Settings.SNAPSHOT_PATH
        self.key: str = key or Settings.SNAPSHOT_KEY

    def load(self) -> list[Product] | None:
        """Return the stored snapshot, or ``None`` if absent or corrupt."""
        try:
            document = self._read_document()
            if self.key not in document:
                return None
            return self._decode(document[self.key])
        except CacheError as exc:
            logger.warning(
                "Ignoring unusable snapshot at %s: %s", self.path, exc
            )
            return None

    def store(self, products: Sequence[Product]) -> None:
        """Overwrite the snapshot with *products* (best-effort)."""
        try:
            try:
                document = self._read_document()
            except CacheError:
                document = {}
            document[self.key] = [p.to_dict() for p in products]
            self._write_document(document)
        except (OSError, TypeError, ValueError) as exc:
            logger.warning(
                "Snapshot write to %s failed, keeping previous copy: %s",
                self.path,
                exc,
            )
            return
        logger.info(
            "Stored snapshot of %d products in %s",
            len(products),
            self.path,
        )

    def clear(self) -> bool:
        """Remove the snapshot key.

        Returns True if a snapshot was present and removed.
        """
        try:
            document = self._read_document()
            if self.key not in document:
                return False
            del document[self.key]
            self._write_document(document)
        except (CacheError, OSError) as exc:
            logger.warning("Snapshot clear failed: %s", exc)
            return False
        logger.info("Snapshot cleared from %s", self.path)
        return True

    # ── Internal helpers ─────────────────────────────────

    def _read_document(self) -> dict[str, Any]:
        """Read the whole storage document; empty when the file is absent."""
        if not self.path.exists():
            return {}
        try:
            with open(self.path, encoding="utf-8") as f:
                document = json.load(f)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise CacheError(str(exc)) from exc
        if not isinstance(document, dict):
            raise CacheError("storage document is not an object")
        return document

    def _write_document(self, document: dict[str, Any]) -> None:
        """Write via a temp file and atomic rename."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=self.path.parent, prefix=".snapshot-", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(document, f, ensure_ascii=False, indent=2)
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    @staticmethod
    def _decode(payload: Any) -> list[Product]:
        """Turn the stored list back into products, or raise CacheError."""
        if not isinstance(payload, list):
            raise CacheError("snapshot is not a list")
        try:
            return [Product.from_dict(item) for item in payload]
        except (KeyError, TypeError, ValueError) as exc:
            raise CacheError(f"malformed product entry: {exc}") from exc
