# storefront/ui/screens.py

"""Product detail, admin sign-in and admin management screens."""

import logging
from pathlib import Path
from typing import cast

from rich.text import Text
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal, Vertical
from textual.screen import ModalScreen, Screen
from textual.widgets import (
    Button,
    DataTable,
    Footer,
    Header,
    Input,
    Label,
    Static,
    TextArea,
)

from storefront.gateway.errors import RemoteError, UploadError
from storefront.models.product import (
    Product,
    ProductDraft,
    format_price,
    to_minor_units,
)
from storefront.services.catalog_service import CatalogService

logger = logging.getLogger("storefront.ui")


class ProductDetailScreen(ModalScreen[None]):
    """Full description view for a single product."""

    BINDINGS = [Binding("escape", "close", "Close")]

    def __init__(self, product: Product) -> None:
        super().__init__()
        self.product = product

    def compose(self) -> ComposeResult:
        p = self.product
        yield Vertical(
            Static(Text(p.name, style="bold"), id="detail_name"),
            Static(
                Text(format_price(p.price), style="bold green"),
                id="detail_price",
            ),
            Static(p.short_description, id="detail_short"),
            Static(p.full_description or "No description yet.",
                   id="detail_full"),
            Static(Text(f"Image: {p.image}", style="dim"), id="detail_image"),
            Button("Close", variant="primary", id="close_btn"),
            id="detail_dialog",
        )

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "close_btn":
            self.dismiss(None)

    def action_close(self) -> None:
        self.dismiss(None)


class AdminLoginScreen(ModalScreen[bool]):
    """Admin sign-in gate; dismisses with True once signed in."""

    BINDINGS = [Binding("escape", "cancel", "Cancel")]

    def __init__(self, service: CatalogService) -> None:
        super().__init__()
        self.service = service

    def compose(self) -> ComposeResult:
        yield Vertical(
            Static(Text("Admin Login", style="bold"), id="login_title"),
            Input(placeholder="Email", id="email_input"),
            Input(placeholder="Password", password=True, id="password_input"),
            Horizontal(
                Button("Sign in", variant="primary", id="signin_btn"),
                Button("Cancel", id="cancel_btn"),
                id="login_buttons",
            ),
            id="login_dialog",
        )

    async def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "signin_btn":
            await self.attempt_sign_in()
        elif event.button.id == "cancel_btn":
            self.dismiss(False)

    async def on_input_submitted(self, event: Input.Submitted) -> None:
        if event.input.id == "password_input":
            await self.attempt_sign_in()

    async def attempt_sign_in(self) -> None:
        """Sign in with the entered credentials."""
        email = self.query_one("#email_input", Input).value.strip()
        password = self.query_one("#password_input", Input).value
        if not email or not password:
            self.notify("Enter email and password", severity="warning")
            return

        try:
            await self.service.sign_in(email, password)
        except RemoteError as exc:
            logger.warning("Admin sign-in failed for %s: %s", email, exc)
            self.notify(f"Sign-in failed: {exc.message}", severity="error")
            return

        self.notify("Signed in")
        self.dismiss(True)

    def action_cancel(self) -> None:
        self.dismiss(False)


class AdminScreen(Screen[None]):
    """Create and delete products in the hosted catalog."""

    BINDINGS = [
        Binding("escape", "back", "Back"),
        Binding("ctrl+d", "delete_selected", "Delete"),
    ]

    def __init__(self, service: CatalogService) -> None:
        super().__init__()
        self.service = service

    def compose(self) -> ComposeResult:
        yield Header()
        yield Container(
            Static(Text("Admin Panel", style="bold"), id="admin_title"),
            Vertical(
                Label("Product Name"),
                Input(id="name_input"),
                Label("Short Description"),
                Input(id="short_input"),
                Label("Full Description"),
                TextArea(id="full_input"),
                Label("Price (₦)"),
                Input(placeholder="e.g. 165000", id="price_input"),
                Label("Image"),
                Input(
                    placeholder="Enter image URL or local file path",
                    id="image_input",
                ),
                Horizontal(
                    Button("Add Product", variant="primary", id="add_btn"),
                    Button("Clear", id="clear_btn"),
                    id="form_buttons",
                ),
                id="product_form",
            ),
            cast(
                DataTable[str | Text],
                DataTable(
                    id="admin_table",
                    zebra_stripes=True,
                    cursor_type="row",
                ),
            ),
            Horizontal(
                Button("Delete Selected", variant="error", id="delete_btn"),
                Button("Logout", id="logout_btn"),
                Button("Back", id="back_btn"),
                id="admin_buttons",
            ),
            id="admin_container",
        )
        yield Footer()

    def on_mount(self) -> None:
        table = cast(
            DataTable[str | Text],
            self.query_one("#admin_table", DataTable),
        )
        table.add_columns("Name", "Price", "Image")
        self.populate_table()

    def populate_table(self) -> None:
        """Show the current catalog, newest first."""
        table = cast(
            DataTable[str | Text],
            self.query_one("#admin_table", DataTable),
        )
        table.clear()
        for p in self.service.products:
            table.add_row(
                p.name[:60],
                Text(format_price(p.price), style="green"),
                p.image[:60],
            )

    async def on_button_pressed(self, event: Button.Pressed) -> None:
        button_id = event.button.id
        if button_id == "add_btn":
            await self.add_product()
        elif button_id == "clear_btn":
            self.clear_form()
        elif button_id == "delete_btn":
            await self.action_delete_selected()
        elif button_id == "logout_btn":
            self.action_logout()
        elif button_id == "back_btn":
            self.action_back()

    def read_form(self) -> tuple[ProductDraft, Path | None] | None:
        """Build a draft from the form, or notify and return None."""
        price_text = self.query_one("#price_input", Input).value
        # An untouched price field means a free listing.
        price = to_minor_units(price_text) if price_text.strip() else 0
        if price is None:
            self.notify("Enter a valid price", severity="warning")
            return None

        image_value = self.query_one("#image_input", Input).value.strip()
        image_path: Path | None = None
        image_url = image_value
        if image_value and not image_value.startswith(("http://", "https://")):
            candidate = Path(image_value).expanduser()
            if candidate.is_file():
                image_path, image_url = candidate, ""

        draft = ProductDraft(
            name=self.query_one("#name_input", Input).value,
            short_description=self.query_one("#short_input", Input).value,
            full_description=self.query_one("#full_input", TextArea).text,
            price_cents=price,
            image_url=image_url,
        )
        return draft, image_path

    async def add_product(self) -> None:
        """Upload (if needed) and insert the product in the form."""
        form = self.read_form()
        if form is None:
            return
        draft, image_path = form

        try:
            product = await self.service.create_product(draft, image_path)
        except ValueError as exc:
            self.notify(str(exc), severity="warning")
            return
        except UploadError as exc:
            logger.error("Image upload failed: %s", exc.message)
            self.notify(
                f"Image upload failed: {exc.message}", severity="error"
            )
            return
        except RemoteError as exc:
            logger.error("Product insert failed: %s", exc.message)
            self.notify(
                f"Could not add product: {exc.message}", severity="error"
            )
            return

        self.clear_form()
        self.populate_table()
        self.notify(f"Added {product.name}")

    def clear_form(self) -> None:
        for input_id in ("#name_input", "#short_input", "#price_input",
                         "#image_input"):
            self.query_one(input_id, Input).value = ""
        self.query_one("#full_input", TextArea).load_text("")

    async def action_delete_selected(self) -> None:
        """Delete the product under the table cursor."""
        products = self.service.products
        table = self.query_one("#admin_table", DataTable)
        row = table.cursor_row
        if not 0 <= row < len(products):
            self.notify("No product selected", severity="warning")
            return

        product = products[row]
        try:
            await self.service.delete_product(product.id)
        except RemoteError as exc:
            logger.error(
                "Delete of %s failed: %s", product.id, exc.message
            )
            self.notify(f"Delete failed: {exc.message}", severity="error")
            return

        self.populate_table()
        self.notify(f"Deleted {product.name}")

    def action_logout(self) -> None:
        self.service.sign_out()
        self.notify("Signed out")
        self.dismiss(None)

    def action_back(self) -> None:
        self.dismiss(None)
