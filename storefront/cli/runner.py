# storefront/cli/runner.py

"""Headless catalog listing and health check runners."""

import json
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.table import Table

from storefront.filters.product_pipeline import ProductPipeline
from storefront.models.filter_config import FilterConfig, SortMode
from storefront.models.product import Product, format_price, to_minor_units
from storefront.services.catalog_service import CatalogService
from storefront.storage.file_manager import FileManager

logger = logging.getLogger("storefront.cli")

# Stderr console for status messages so stdout stays clean for JSON
_err = Console(stderr=True)


def build_config(
    query: str | None,
    sort: str,
    min_price: str | None,
    max_price: str | None,
    require_image: bool,
) -> FilterConfig:
    """Turn CLI arguments (prices in major units) into a FilterConfig.

    Raises ``SystemExit`` on an unparseable price.
    """
    bounds: list[int | None] = []
    for flag, raw in (("--min-price", min_price), ("--max-price", max_price)):
        value = to_minor_units(raw)
        if raw is not None and value is None:
            _err.print(f"[red]Invalid {flag}: {raw}[/red]")
            raise SystemExit(1)
        bounds.append(value)

    return FilterConfig(
        search_text=query or "",
        sort_mode=SortMode(sort),
        min_price=bounds[0],
        max_price=bounds[1],
        require_image=require_image,
    )


def _print_table(products: list[Product]) -> None:
    """Render a Rich table of products to stdout, in displayed order."""
    table = Table(
        title="Solar Catalog",
        show_lines=True,
        title_style="bold cyan",
    )
    table.add_column("#", style="dim", width=4)
    table.add_column("Name", max_width=40)
    table.add_column("Description", max_width=50)
    table.add_column("Price", justify="right", style="green")
    table.add_column("Image", overflow="fold", style="dim")

    for idx, p in enumerate(products, 1):
        table.add_row(
            str(idx),
            p.name,
            p.short_description or "—",
            format_price(p.price),
            p.image if p.has_real_image else "—",
        )

    Console().print(table)


async def cli_list(
    config: FilterConfig,
    output_format: str,
    offline: bool = False,
    output_dir: str | None = None,
    service: CatalogService | None = None,
) -> int:
    """Print the filtered catalog and return an exit code (0=ok, 1=empty)."""
    service = service or CatalogService()

    result = service.initial_products()
    if not offline:
        result = await service.refresh()
        if result.error:
            _err.print(f"[red]Error: {result.error}[/red]")
            _err.print(
                f"[yellow]Showing {result.source} data instead[/yellow]"
            )

    products = ProductPipeline.apply(service.products, config)
    _err.print(
        f"[green]✓ {ProductPipeline.summarize(len(products), len(service.products))}"
        f"[/green] [dim](source={result.source})[/dim]"
    )
    if not products:
        return 1

    if output_dir is not None:
        try:
            path = FileManager(Path(output_dir)).save_listing(
                config.search_text or "all", products
            )
            _err.print(f"[dim]Saved → {path}[/dim]")
        except OSError as exc:
            logger.error("Save failed: %s", exc, exc_info=True)
            _err.print(f"[red]Save failed: {exc}[/red]")

    if output_format == "table":
        _print_table(products)
    else:
        json.dump(
            [p.to_dict() for p in products],
            sys.stdout,
            ensure_ascii=False,
            indent=2,
        )
        sys.stdout.write("\n")

    return 0


async def run_health_check() -> int:
    """Run connectivity health check on all backend endpoints."""
    from storefront.services.health_checker import HealthChecker

    _err.print("[bold]Running backend health check...[/bold]")
    checker = HealthChecker()
    results = await checker.check_all()

    table = Table(
        title="Backend Health Check",
        show_lines=True,
        title_style="bold cyan",
    )
    table.add_column("Endpoint", style="bold")
    table.add_column("Status", justify="center")
    table.add_column("Latency", justify="right")
    table.add_column("Notes", style="dim")

    any_down = False
    for r in results:
        if r.status == "ok":
            status = "[green]✅ OK[/green]"
        elif r.status == "slow":
            status = "[yellow]⚠️  SLOW[/yellow]"
        else:
            status = "[red]❌ DOWN[/red]"
            any_down = True

        latency = f"{r.latency_ms:.0f}ms" if r.latency_ms > 0 else "—"
        table.add_row(r.endpoint_id, status, latency, r.message)

    Console().print(table)
    return 1 if any_down else 0
