# tests/test_cli_runner.py

"""Tests for the headless listing and health check runners."""

import io
import json
import os
import tempfile
import unittest
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

from storefront.cli.runner import build_config, cli_list, run_health_check
from storefront.gateway.base_gateway import CatalogGateway
from storefront.gateway.errors import RemoteError
from storefront.models.filter_config import FilterConfig, SortMode
from storefront.models.product import Product
from storefront.services.catalog_service import CatalogService
from storefront.services.health_checker import HealthResult
from storefront.storage.snapshot_cache import SnapshotCache

ROWS = [
    {"id": 3, "name": "Inverter 5kVA", "price_cents": 45000000,
     "image_url": "https://cdn/inverter.jpg"},
    {"id": 2, "name": "Solar Panel 450W", "price_cents": 9500000},
    {"id": 1, "name": "Charge Controller", "price_cents": 3200000,
     "short_description": "MPPT for solar arrays"},
]


class TestBuildConfig(unittest.TestCase):
    """CLI arguments to FilterConfig."""

    def test_prices_converted_to_minor_units(self) -> None:
        config = build_config("solar", "price-ascending", "1,000", "2500.5",
                              True)
        self.assertEqual(
            config,
            FilterConfig(
                search_text="solar",
                sort_mode=SortMode.PRICE_ASCENDING,
                min_price=100000,
                max_price=250050,
                require_image=True,
            ),
        )

    def test_defaults(self) -> None:
        config = build_config(None, "newest", None, None, False)
        self.assertEqual(config, FilterConfig())

    @patch("storefront.cli.runner._err")
    def test_invalid_price_exits(self, mock_err: MagicMock) -> None:
        with self.assertRaises(SystemExit) as ctx:
            build_config(None, "newest", "cheap", None, False)
        self.assertEqual(ctx.exception.code, 1)
        self.assertIn("--min-price", mock_err.print.call_args[0][0])


@patch("storefront.cli.runner._err", MagicMock())
class TestCliList(unittest.IsolatedAsyncioTestCase):
    """cli_list output and exit codes."""

    def setUp(self) -> None:
        self.tmp_dir = Path(tempfile.mkdtemp())
        self.gateway = MagicMock(spec=CatalogGateway)
        self.gateway.fetch_all.return_value = list(ROWS)
        self.service = CatalogService(
            gateway=self.gateway,
            cache=SnapshotCache(path=self.tmp_dir / "storage.json"),
            seed_loader=lambda: [Product(id="seed", name="Seed Kit")],
        )

    async def _run(self, config: FilterConfig, **kwargs: object) -> tuple[int, str]:
        with patch("sys.stdout", new_callable=io.StringIO) as out:
            code = await cli_list(config, service=self.service, **kwargs)  # type: ignore[arg-type]
        return code, out.getvalue()

    async def test_json_output_in_display_order(self) -> None:
        code, out = await self._run(
            FilterConfig(sort_mode=SortMode.PRICE_ASCENDING),
            output_format="json",
        )
        self.assertEqual(code, 0)
        data = json.loads(out)
        self.assertEqual([d["id"] for d in data], ["1", "2", "3"])

    async def test_search_applies(self) -> None:
        code, out = await self._run(
            FilterConfig(search_text="solar"), output_format="json"
        )
        self.assertEqual(code, 0)
        self.assertEqual([d["id"] for d in json.loads(out)], ["2", "1"])

    async def test_no_match_returns_one(self) -> None:
        code, out = await self._run(
            FilterConfig(search_text="wind turbine"), output_format="json"
        )
        self.assertEqual(code, 1)
        self.assertEqual(out, "")

    async def test_table_output(self) -> None:
        with patch.dict(os.environ, {"COLUMNS": "200"}):
            code, out = await self._run(FilterConfig(), output_format="table")
        self.assertEqual(code, 0)
        self.assertIn("Inverter 5kVA", out)
        self.assertIn("₦450,000.00", out)

    async def test_offline_skips_fetch(self) -> None:
        code, out = await self._run(
            FilterConfig(), output_format="json", offline=True
        )
        self.assertEqual(code, 0)
        self.gateway.fetch_all.assert_not_called()
        self.assertEqual(json.loads(out)[0]["name"], "Seed Kit")

    async def test_fetch_failure_falls_back(self) -> None:
        self.gateway.fetch_all.side_effect = RemoteError("Network error")
        code, out = await self._run(FilterConfig(), output_format="json")
        self.assertEqual(code, 0)
        self.assertEqual(json.loads(out)[0]["id"], "seed")

    async def test_output_dir_saves_listing(self) -> None:
        out_dir = self.tmp_dir / "out"
        code, _out = await self._run(
            FilterConfig(), output_format="json", output_dir=str(out_dir)
        )
        self.assertEqual(code, 0)
        saved = list(out_dir.glob("listing_all_*.json"))
        self.assertEqual(len(saved), 1)


class TestRunHealthCheck(unittest.IsolatedAsyncioTestCase):
    """Exit code of the health check runner."""

    def _results(self, *statuses: str) -> list[HealthResult]:
        return [
            HealthResult(f"ep{i}", status, 12.0, "")
            for i, status in enumerate(statuses)
        ]

    @patch("storefront.cli.runner.Console")
    @patch("storefront.cli.runner._err", MagicMock())
    async def test_all_ok(self, _console: MagicMock) -> None:
        with patch(
            "storefront.services.health_checker.HealthChecker.check_all",
            new=AsyncMock(return_value=self._results("ok", "slow")),
        ):
            self.assertEqual(await run_health_check(), 0)

    @patch("storefront.cli.runner.Console")
    @patch("storefront.cli.runner._err", MagicMock())
    async def test_any_down(self, _console: MagicMock) -> None:
        with patch(
            "storefront.services.health_checker.HealthChecker.check_all",
            new=AsyncMock(return_value=self._results("ok", "down")),
        ):
            self.assertEqual(await run_health_check(), 1)


if __name__ == "__main__":
    unittest.main()
