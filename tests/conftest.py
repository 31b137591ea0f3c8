# tests/conftest.py

"""Shared pytest fixtures for all storefront tests."""

from collections.abc import Generator
from pathlib import Path
from unittest.mock import patch

import pytest

from storefront.config.settings import Settings
from storefront.filters.product_pipeline import ProductPipeline


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path: Path) -> Generator[None, None, None]:
    """Keep snapshots, exports and logs in a temp dir, backend unset."""
    with patch.multiple(
        Settings,
        SNAPSHOT_PATH=tmp_path / "local_storage.json",
        EXPORTS_DIR=tmp_path / "exports",
        LOGS_DIR=tmp_path / "logs",
        SUPABASE_URL="",
        SUPABASE_ANON_KEY="",
    ):
        yield
    ProductPipeline.clear_cache()
