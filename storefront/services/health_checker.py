# storefront/services/health_checker.py

"""Hosted backend connectivity health checker."""

import asyncio
import logging
import time
from dataclasses import dataclass

from curl_cffi import requests as curl_requests

from storefront.config.settings import Settings

logger = logging.getLogger("storefront.health")


@dataclass
class HealthResult:
    """Result of a single endpoint health check."""

    endpoint_id: str
    status: str  # "ok", "slow", "down"
    latency_ms: float
    message: str


def probe_endpoint(endpoint: dict[str, str]) -> HealthResult:
    """Probe one backend endpoint for reachability and auth."""
    endpoint_id = endpoint["id"]

    if not Settings.is_backend_configured():
        return HealthResult(
            endpoint_id=endpoint_id,
            status="down",
            latency_ms=0.0,
            message="SUPABASE_URL / SUPABASE_ANON_KEY not set",
        )

    url = f"{Settings.SUPABASE_URL}{endpoint['path']}"
    headers = {
        **Settings.DEFAULT_HEADERS,
        "apikey": Settings.SUPABASE_ANON_KEY,
        "Authorization": f"Bearer {Settings.SUPABASE_ANON_KEY}",
    }

    start = time.monotonic()
    try:
        resp = curl_requests.get(
            url,
            headers=headers,
            timeout=Settings.HEALTH_TIMEOUT,
            impersonate=Settings.IMPERSONATE_BROWSER,
        )
        elapsed_ms = (time.monotonic() - start) * 1000

        if resp.status_code != 200:
            return HealthResult(
                endpoint_id=endpoint_id,
                status="down",
                latency_ms=elapsed_ms,
                message=f"HTTP {resp.status_code}",
            )

        if elapsed_ms > Settings.SLOW_THRESHOLD_MS:
            return HealthResult(
                endpoint_id=endpoint_id,
                status="slow",
                latency_ms=elapsed_ms,
                message="High latency",
            )

        return HealthResult(
            endpoint_id=endpoint_id,
            status="ok",
            latency_ms=elapsed_ms,
            message="",
        )

    except Exception as exc:
        elapsed_ms = (time.monotonic() - start) * 1000
        return HealthResult(
            endpoint_id=endpoint_id,
            status="down",
            latency_ms=elapsed_ms,
            message=str(exc)[:80],
        )


class HealthChecker:
    """Runs concurrent health probes against all backend endpoints."""

    def __init__(self) -> None:
        self.endpoints = Settings.HEALTH_ENDPOINTS

    async def check_all(self) -> list[HealthResult]:
        """Probe every registered endpoint concurrently."""
        tasks = [
            asyncio.to_thread(probe_endpoint, endpoint)
            for endpoint in self.endpoints
        ]
        results: list[HealthResult] = list(await asyncio.gather(*tasks))
        for r in results:
            logger.info(
                "Health check %s: %s (%.0fms) %s",
                r.endpoint_id,
                r.status,
                r.latency_ms,
                r.message,
            )
        return results
