# storefront/services/catalog_service.py

"""Coordinates the gateway, reconciler and snapshot cache for the views."""

import asyncio
import logging
import mimetypes
from collections.abc import Callable
from dataclasses import dataclass, replace
from pathlib import Path

from storefront.filters.reconciler import RecordReconciler
from storefront.gateway.base_gateway import CatalogGateway
from storefront.gateway.errors import RemoteError, UploadError
from storefront.gateway.supabase_gateway import SupabaseGateway
from storefront.models.product import Product, ProductDraft
from storefront.storage.seed_catalog import load_seed_products
from storefront.storage.snapshot_cache import SnapshotCache

logger = logging.getLogger("storefront.catalog")


@dataclass
class RefreshResult:
    """Outcome of one catalog refresh.

    ``source`` says where the shown products came from: ``remote`` for a
    fresh fetch, ``memory`` for the last good fetch of this session,
    ``cache`` for the on-disk snapshot and ``seed`` for the starter set.
    """

    products: tuple[Product, ...] = ()
    source: str = "remote"
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class CatalogService:
    """Holds the current product list and applies admin changes.

    ``products`` is an immutable tuple, replaced wholesale after a fetch,
    insert or delete so that readers never observe a half-updated list.
    """

    def __init__(
        self,
        gateway: CatalogGateway | None = None,
        cache: SnapshotCache | None = None,
        seed_loader: Callable[[], list[Product]] = load_seed_products,
    ) -> None:
        self.gateway = gateway or SupabaseGateway()
        self.cache = cache or SnapshotCache()
        self._seed_loader = seed_loader
        self.products: tuple[Product, ...] = ()
        self.has_fetched: bool = False

    # ── Private helpers ──────────────────────────────────

    def _fallback(self) -> tuple[tuple[Product, ...], str]:
        """Snapshot if one exists, otherwise the seed catalog."""
        cached = self.cache.load()
        if cached is not None:
            return tuple(cached), "cache"
        return tuple(self._seed_loader()), "seed"

    def _replace(self, products: tuple[Product, ...], persist: bool) -> None:
        self.products = products
        if persist:
            self.cache.store(products)

    # ── Listing ──────────────────────────────────────────

    def initial_products(self) -> RefreshResult:
        """Products to show before the first fetch completes."""
        products, source = self._fallback()
        self.products = products
        logger.info(
            "Initial catalog: %d products from %s", len(products), source
        )
        return RefreshResult(products=products, source=source)

    async def refresh(self) -> RefreshResult:
        """Fetch the catalog, reconcile it and refresh the snapshot.

        A failed fetch never raises: the error message comes back in the
        result together with the best list still available.
        """
        try:
            raws = await asyncio.to_thread(self.gateway.fetch_all)
        except RemoteError as exc:
            logger.error("Catalog fetch failed: %s", exc.message)
            if self.has_fetched:
                return RefreshResult(
                    products=self.products,
                    source="memory",
                    error=exc.message,
                )
            products, source = self._fallback()
            self.products = products
            return RefreshResult(
                products=products, source=source, error=exc.message
            )

        products = tuple(RecordReconciler.reconcile_all(raws))
        self.has_fetched = True
        self._replace(products, persist=True)
        return RefreshResult(products=products, source="remote")

    def find(self, product_id: str) -> Product | None:
        """Look up a product in the current list."""
        for product in self.products:
            if product.id == product_id:
                return product
        return None

    # ── Admin ────────────────────────────────────────────

    @property
    def is_admin(self) -> bool:
        return self.gateway.is_signed_in

    async def sign_in(self, email: str, password: str) -> None:
        """Authenticate the admin; raises AuthError on rejection."""
        await asyncio.to_thread(
            self.gateway.sign_in, email.strip(), password
        )

    def sign_out(self) -> None:
        self.gateway.sign_out()

    async def upload_image(self, image_path: Path) -> str:
        """Upload a local image file and return its public URL."""
        try:
            data = await asyncio.to_thread(image_path.read_bytes)
        except OSError as exc:
            raise UploadError(
                f"Cannot read image {image_path}: {exc.strerror or exc}"
            ) from exc
        content_type = (
            mimetypes.guess_type(image_path.name)[0]
            or "application/octet-stream"
        )
        return await asyncio.to_thread(
            self.gateway.upload_image,
            data,
            image_path.name,
            content_type,
        )

    async def create_product(
        self,
        draft: ProductDraft,
        image_path: Path | None = None,
    ) -> Product:
        """Upload the image (if any), insert the draft, prepend the result.

        Raises ``ValueError`` for an invalid draft, :class:`UploadError`
        before anything is inserted, or :class:`RemoteError` from insert.
        """
        problems = draft.validate()
        if problems:
            raise ValueError("; ".join(problems))

        if image_path is not None:
            draft = replace(
                draft, image_url=await self.upload_image(image_path)
            )

        stored = await asyncio.to_thread(
            self.gateway.insert, draft.to_record()
        )
        product = RecordReconciler.reconcile(stored)
        self._replace((product, *self.products), persist=True)
        logger.info("Created product %s (%s)", product.id, product.name)
        return product

    async def delete_product(self, product_id: str) -> None:
        """Delete remotely, then drop the product from the local list."""
        await asyncio.to_thread(self.gateway.delete_by_id, product_id)
        remaining = tuple(p for p in self.products if p.id != product_id)
        self._replace(remaining, persist=True)
        logger.info("Deleted product %s", product_id)
