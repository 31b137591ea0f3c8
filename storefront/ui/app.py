# storefront/ui/app.py

"""Terminal UI for browsing and administering the solar catalog."""

import logging
from typing import cast

import pyperclip  # type: ignore[import-untyped]
from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal
from textual.widgets import (
    Checkbox,
    DataTable,
    Footer,
    Header,
    Input,
    LoadingIndicator,
    Select,
    Static,
)

from storefront.filters.product_pipeline import ProductPipeline
from storefront.models.filter_config import FilterConfig, SortMode
from storefront.models.product import Product, format_price, to_minor_units
from storefront.services.catalog_service import CatalogService
from storefront.storage.file_manager import FileManager
from storefront.ui.screens import (
    AdminLoginScreen,
    AdminScreen,
    ProductDetailScreen,
)

logger = logging.getLogger("storefront.ui")

_SOURCE_LABELS: dict[str, str] = {
    "remote": "live catalog",
    "memory": "last loaded catalog",
    "cache": "saved snapshot",
    "seed": "starter catalog",
}


class StorefrontApp(App[object]):
    """Public product listing with an admin panel behind sign-in."""

    CSS_PATH = "styles.css"
    TITLE = "Solar Storefront"

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("r", "refresh", "Refresh"),
        Binding("a", "admin", "Admin"),
        Binding("s", "save", "Save"),
        Binding("e", "export", "Export CSV"),
        Binding("c", "copy_image", "Copy Image URL"),
    ]

    def __init__(
        self,
        service: CatalogService | None = None,
        auto_refresh: bool = True,
    ) -> None:
        super().__init__()
        self.service = service or CatalogService()
        self.file_manager = FileManager()
        self.displayed: list[Product] = []
        self.loading: bool = False
        self._auto_refresh = auto_refresh

    def compose(self) -> ComposeResult:
        """Build the widget tree for the TUI."""
        sort_options = [(mode.label, mode.value) for mode in SortMode]

        yield Header()
        yield Container(
            Static("☀ Our Premium Solar Collection", id="title"),

            # Search and sort
            Horizontal(
                Input(placeholder="Search products...", id="search_input"),
                Select(
                    sort_options,
                    value=SortMode.NEWEST.value,
                    allow_blank=False,
                    id="sort_select",
                ),
                id="search_bar",
            ),

            # Price range and image filter
            Horizontal(
                Input(placeholder="Min price (₦)", id="min_price_input"),
                Input(placeholder="Max price (₦)", id="max_price_input"),
                Checkbox("With image only", value=False, id="image_only"),
                id="filter_bar",
            ),

            Static("Ready", id="status"),
            LoadingIndicator(id="loader"),
            cast(
                DataTable[str | Text],
                DataTable(
                    id="results_table",
                    zebra_stripes=True,
                    cursor_type="row",
                ),
            ),
            id="main_container",
        )
        yield Footer()

    def on_mount(self) -> None:
        """Show the cached/seed catalog, then fetch the live one."""
        table = cast(
            DataTable[str | Text],
            self.query_one("#results_table", DataTable),
        )
        table.add_columns("Name", "Description", "Price", "Image")
        self.query_one("#loader", LoadingIndicator).display = False

        initial = self.service.initial_products()
        self.apply_filters()
        logger.info(
            "Listing opened with %s", _SOURCE_LABELS[initial.source]
        )

        if self._auto_refresh:
            self.run_worker(self.refresh_products(), group="refresh")

    # ── Filter state ─────────────────────────────────────

    def current_config(self) -> FilterConfig:
        """Read the filter controls into a FilterConfig."""
        sort_value = self.query_one("#sort_select", Select).value
        sort_mode = (
            SortMode(sort_value)
            if isinstance(sort_value, str)
            else SortMode.NEWEST
        )
        return FilterConfig(
            search_text=self.query_one("#search_input", Input).value,
            sort_mode=sort_mode,
            min_price=to_minor_units(
                self.query_one("#min_price_input", Input).value
            ),
            max_price=to_minor_units(
                self.query_one("#max_price_input", Input).value
            ),
            require_image=self.query_one("#image_only", Checkbox).value,
        )

    def apply_filters(self) -> None:
        """Recompute the displayed subset and redraw the table."""
        self.displayed = ProductPipeline.apply_cached(
            self.service.products, self.current_config()
        )
        self.populate_table()
        self.query_one("#status", Static).update(
            ProductPipeline.summarize(
                len(self.displayed), len(self.service.products)
            )
        )

    def on_input_changed(self, event: Input.Changed) -> None:
        if event.input.id in (
            "search_input",
            "min_price_input",
            "max_price_input",
        ):
            self.apply_filters()

    def on_select_changed(self, event: Select.Changed) -> None:
        if event.select.id == "sort_select":
            self.apply_filters()

    def on_checkbox_changed(self, event: Checkbox.Changed) -> None:
        if event.checkbox.id == "image_only":
            self.apply_filters()

    # ── Remote refresh ───────────────────────────────────

    async def refresh_products(self) -> None:
        """Fetch the live catalog, one request at a time."""
        if self.loading:
            self.notify("Already loading products", severity="warning")
            return

        loader = self.query_one("#loader", LoadingIndicator)
        status = self.query_one("#status", Static)
        self.loading = True
        loader.display = True
        status.update("Loading products...")
        try:
            result = await self.service.refresh()
        finally:
            self.loading = False
            loader.display = False

        self.apply_filters()
        if result.error:
            self.notify(
                f"Could not load products: {result.error}",
                severity="error",
            )
            status.update(
                f"Offline, showing {_SOURCE_LABELS[result.source]} "
                f"({len(result.products)} products)"
            )

    async def action_refresh(self) -> None:
        await self.refresh_products()

    def populate_table(self) -> None:
        """Fill the DataTable with the displayed products."""
        table = cast(
            DataTable[str | Text],
            self.query_one("#results_table", DataTable),
        )
        table.clear()
        for p in self.displayed:
            table.add_row(
                p.name[:50],
                p.short_description[:60],
                Text(format_price(p.price), style="bold green"),
                "✓" if p.has_real_image else "",
            )

    def on_data_table_row_selected(
        self, event: DataTable.RowSelected
    ) -> None:
        """Open the detail view for the selected product."""
        if event.data_table.id != "results_table":
            return
        if 0 <= event.cursor_row < len(self.displayed):
            self.push_screen(
                ProductDetailScreen(self.displayed[event.cursor_row])
            )

    # ── Admin ────────────────────────────────────────────

    def action_admin(self) -> None:
        """Open the admin panel, asking for sign-in first if needed."""
        if self.service.is_admin:
            self._open_admin()
        else:
            self.push_screen(
                AdminLoginScreen(self.service), self._on_login_closed
            )

    def _on_login_closed(self, signed_in: bool | None) -> None:
        if signed_in:
            self._open_admin()

    def _open_admin(self) -> None:
        self.push_screen(AdminScreen(self.service), self._on_admin_closed)

    def _on_admin_closed(self, _result: None) -> None:
        self.apply_filters()

    # ── Export ───────────────────────────────────────────

    def _listing_label(self) -> str:
        return self.query_one("#search_input", Input).value.strip() or "all"

    def action_save(self) -> None:
        """Save the displayed listing to a JSON file."""
        if not self.displayed:
            self.notify("No products to save", severity="warning")
            return
        try:
            path = self.file_manager.save_listing(
                self._listing_label(), self.displayed
            )
            self.notify(f"Saved to {path}")
        except OSError as e:
            logger.error("Failed to save listing", exc_info=True)
            self.notify(f"Save failed: {e}", severity="error")

    def action_export(self) -> None:
        """Export the displayed listing to a CSV file."""
        if not self.displayed:
            self.notify("No products to export", severity="warning")
            return
        try:
            path = self.file_manager.export_csv(
                self._listing_label(), self.displayed
            )
            self.notify(f"Exported to {path}")
        except OSError as e:
            logger.error("Failed to export listing", exc_info=True)
            self.notify(f"Export failed: {e}", severity="error")

    def action_copy_image(self) -> None:
        """Copy the selected product's image URL to the clipboard."""
        table = self.query_one("#results_table", DataTable)
        row = table.cursor_row
        if not 0 <= row < len(self.displayed):
            self.notify("No product selected", severity="warning")
            return
        try:
            pyperclip.copy(self.displayed[row].image)
            self.notify("Image URL copied")
        except pyperclip.PyperclipException:
            logger.error("Failed to copy image URL", exc_info=True)
            self.notify("Clipboard unavailable", severity="warning")
