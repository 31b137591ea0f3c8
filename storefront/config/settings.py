# storefront/config/settings.py

"""Central configuration for the storefront catalog."""

import os
from pathlib import Path

from curl_cffi.requests import BrowserTypeLiteral
from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Central configuration for the storefront catalog."""

    # --- Hosted backend ---
    SUPABASE_URL: str = os.getenv("SUPABASE_URL", "").rstrip("/")
    SUPABASE_ANON_KEY: str = os.getenv("SUPABASE_ANON_KEY", "")
    PRODUCTS_TABLE: str = os.getenv(
        "STOREFRONT_PRODUCTS_TABLE", "products"
    )
    IMAGE_BUCKET: str = os.getenv(
        "STOREFRONT_IMAGE_BUCKET", "product-images"
    )
    REQUEST_TIMEOUT: int = 15           # Seconds before a request times out
    HEALTH_TIMEOUT: int = 10            # Per-endpoint probe timeout
    SLOW_THRESHOLD_MS: float = 5000.0   # Probe latency reported as "slow"

    # --- HTTP client ---
    IMPERSONATE_BROWSER: BrowserTypeLiteral = "chrome131"
    DEFAULT_HEADERS: dict[str, str] = {
        "Accept": "application/json",
        "Accept-Language": "en-US,en;q=0.9",
    }

    # --- Catalog display ---
    CURRENCY_SYMBOL: str = "₦"
    MINOR_UNITS_PER_MAJOR: int = 100    # kobo per naira
    DEFAULT_NAME: str = "Untitled"
    PLACEHOLDER_IMAGE: str = "/placeholder.svg"
    PLACEHOLDER_MARKER: str = "placeholder"
    PIPELINE_CACHE_SIZE: int = 32       # Memoised filter/sort results

    # --- Paths ---
    BASE_DIR: Path = Path(__file__).resolve().parent.parent.parent
    SNAPSHOT_PATH: Path = BASE_DIR / "data" / "local_storage.json"
    SNAPSHOT_KEY: str = "products"
    SEED_PATH: Path = (
        Path(__file__).resolve().parent.parent / "data" / "seed_products.json"
    )
    EXPORTS_DIR: Path = BASE_DIR / "exports"
    LOGS_DIR: Path = BASE_DIR / "logs"

    # --- Health probes (registry of backend endpoints) ---
    HEALTH_ENDPOINTS: list[dict[str, str]] = [
        {"id": "rest", "label": "Database (REST)", "path": "/rest/v1/"},
        {
            "id": "storage",
            "label": "Image storage",
            "path": "/storage/v1/bucket",
        },
        {"id": "auth", "label": "Auth", "path": "/auth/v1/health"},
    ]

    @classmethod
    def is_backend_configured(cls) -> bool:
        """Return True when both the backend URL and API key are set."""
        return bool(cls.SUPABASE_URL and cls.SUPABASE_ANON_KEY)
