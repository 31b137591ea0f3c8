# storefront/gateway/supabase_gateway.py

"""Catalog gateway for a Supabase project (PostgREST + Storage + Auth)."""

import uuid
from pathlib import PurePosixPath
from typing import Any

import httpx
from supabase import (
    AuthError as SupabaseAuthError,
    Client,
    ClientOptions,
    PostgrestAPIError,
    StorageException,
    SupabaseException,
    create_client,
)

from storefront.gateway.base_gateway import UNEXPECTED_RESPONSE, CatalogGateway
from storefront.gateway.errors import AuthError, RemoteError, UploadError


class SupabaseGateway(CatalogGateway):
    """Talks to the hosted products table, image bucket and auth API."""

    backend_errors = (
        PostgrestAPIError,
        StorageException,
        SupabaseAuthError,
        SupabaseException,
        httpx.HTTPError,
        ValueError,
    )

    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        table: str | None = None,
        bucket: str | None = None,
    ) -> None:
        super().__init__("supabase")
        self.base_url = (
            base_url if base_url is not None else self.settings.SUPABASE_URL
        ).rstrip("/")
        self.api_key = (
            api_key
            if api_key is not None
            else self.settings.SUPABASE_ANON_KEY
        )
        self.table = table or self.settings.PRODUCTS_TABLE
        self.bucket = bucket or self.settings.IMAGE_BUCKET
        self._client: Client | None = None
        self._access_token: str | None = None

    # ── Helpers ──────────────────────────────────────────

    def _require_config(self, error_cls: type[Exception] = RemoteError) -> None:
        if not (self.base_url and self.api_key):
            raise error_cls("Catalog backend is not configured")

    def _connect(self, error_cls: type[Exception] = RemoteError) -> Client:
        """Create the client on first use; it keeps the auth session."""
        self._require_config(error_cls)
        if self._client is None:
            timeout = self.settings.REQUEST_TIMEOUT
            options = ClientOptions(
                postgrest_client_timeout=timeout,
                storage_client_timeout=timeout,
                auto_refresh_token=False,
                persist_session=False,
            )
            self._client = self._call(
                "connect",
                lambda: create_client(self.base_url, self.api_key, options),
                error_cls,
            )
        return self._client

    @staticmethod
    def _rows(data: Any) -> list[Any]:
        # A non-JSON body comes back from the client as plain text.
        if not isinstance(data, list):
            raise RemoteError(UNEXPECTED_RESPONSE)
        return data

    # ── CatalogGateway API ───────────────────────────────

    @property
    def is_signed_in(self) -> bool:
        return self._access_token is not None

    def fetch_all(self) -> list[dict[str, Any]]:
        """Return every product row ordered by ``created_at`` descending."""
        client = self._connect()
        resp = self._call(
            "fetch",
            lambda: client.table(self.table)
            .select("*")
            .order("created_at", desc=True)
            .retry(False)
            .execute(),
        )
        records = [r for r in self._rows(resp.data) if isinstance(r, dict)]
        self.logger.info(
            "[%s] Fetched %d product records",
            self.backend_name,
            len(records),
        )
        return records

    def insert(self, record: dict[str, Any]) -> dict[str, Any]:
        """Insert one row and return the stored representation."""
        client = self._connect()
        resp = self._call(
            "insert",
            lambda: client.table(self.table).insert(record).execute(),
        )
        rows = self._rows(resp.data)
        if not rows:
            raise RemoteError("Insert returned no product")
        stored = rows[0]
        if not isinstance(stored, dict):
            raise RemoteError(UNEXPECTED_RESPONSE)
        self.logger.info(
            "[%s] Inserted product id=%s", self.backend_name, stored.get("id")
        )
        return stored

    def delete_by_id(self, product_id: str) -> None:
        """Delete the row with *product_id*."""
        client = self._connect()
        resp = self._call(
            "delete",
            lambda: client.table(self.table)
            .delete()
            .eq("id", product_id)
            .execute(),
        )
        if not self._rows(resp.data):
            raise RemoteError(
                f"Product {product_id} not found or not deletable"
            )
        self.logger.info(
            "[%s] Deleted product id=%s", self.backend_name, product_id
        )

    def upload_image(
        self, data: bytes, filename: str, content_type: str
    ) -> str:
        """Store *data* under a unique name and return its public URL."""
        self._require_config(UploadError)
        if not data:
            raise UploadError("Image file is empty")
        client = self._connect(UploadError)
        suffix = PurePosixPath(filename).suffix.lower()
        object_path = f"products/{uuid.uuid4().hex}{suffix}"
        bucket = client.storage.from_(self.bucket)
        self._call(
            "upload",
            lambda: bucket.upload(
                object_path,
                data,
                {"content-type": content_type, "upsert": "false"},
            ),
            UploadError,
        )
        url = self._call(
            "public url", lambda: bucket.get_public_url(object_path), UploadError
        )
        if not isinstance(url, str) or not url:
            raise UploadError(UNEXPECTED_RESPONSE)
        self.logger.info(
            "[%s] Uploaded %s (%d bytes) to %s",
            self.backend_name,
            filename,
            len(data),
            url,
        )
        return url

    def sign_in(self, email: str, password: str) -> str:
        """Password sign-in; the client sends the token on later writes."""
        client = self._connect(AuthError)
        resp = self._call(
            "sign-in",
            lambda: client.auth.sign_in_with_password(
                {"email": email, "password": password}
            ),
            AuthError,
        )
        session = getattr(resp, "session", None)
        token = getattr(session, "access_token", None)
        if not isinstance(token, str) or not token:
            raise AuthError("Sign-in response had no access token")
        self._access_token = token
        self.logger.info("[%s] Admin signed in as %s", self.backend_name, email)
        return token

    def sign_out(self) -> None:
        """Drop the admin session; later calls use the anonymous key."""
        if self._access_token is None:
            return
        self._access_token = None
        if self._client is not None:
            try:
                self._call("sign-out", self._client.auth.sign_out)
            except RemoteError:
                self.logger.warning(
                    "[%s] Sign-out not confirmed by backend; "
                    "local session cleared",
                    self.backend_name,
                )
        self.logger.info("[%s] Admin signed out", self.backend_name)
