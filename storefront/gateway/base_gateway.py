# storefront/gateway/base_gateway.py

"""Abstract base class for hosted catalog backends."""

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any, TypeVar

from storefront.config.settings import Settings
from storefront.gateway.errors import RemoteError

T = TypeVar("T")

UNEXPECTED_RESPONSE = "Unexpected response from catalog backend"


class CatalogGateway(ABC):
    """Fetch/insert/delete/upload access to a hosted product catalog.

    Every call is single shot: no retries, no backoff. Failures surface as
    :class:`RemoteError` (or :class:`UploadError` for images) carrying a
    message fit for display.
    """

    # Client-library exceptions that ``_call`` translates. ``ValueError``
    # covers undecodable or schema-invalid response bodies.
    backend_errors: tuple[type[Exception], ...] = (ValueError,)

    def __init__(self, backend_name: str) -> None:
        self.backend_name = backend_name
        self.logger = logging.getLogger(
            f"storefront.gateway.{backend_name}"
        )
        self.settings = Settings()

    @staticmethod
    def error_message(exc: Exception) -> str:
        """Pull a readable message out of a client-library exception."""
        message = getattr(exc, "message", None)
        if isinstance(message, str) and message:
            return message
        detail = exc.args[0] if exc.args else None
        if isinstance(detail, dict):
            for field in ("message", "error_description", "msg", "error"):
                value = detail.get(field)
                if isinstance(value, str) and value:
                    return value
        if isinstance(exc, ValueError):
            return UNEXPECTED_RESPONSE
        return str(exc) or type(exc).__name__

    @staticmethod
    def error_status(exc: Exception) -> int | None:
        status = getattr(exc, "status", None)
        if isinstance(status, int):
            return status
        if isinstance(status, str) and status.isdigit():
            return int(status)
        return None

    def _call(
        self,
        action: str,
        call: Callable[[], T],
        error_cls: type[RemoteError] | type[Exception] = RemoteError,
    ) -> T:
        """Run one backend call and raise *error_cls* on any failure."""
        try:
            return call()
        except self.backend_errors as exc:
            message = self.error_message(exc)
            self.logger.warning(
                "[%s] %s failed: %s",
                self.backend_name,
                action,
                message,
                exc_info=True,
            )
            raise error_cls(message, self.error_status(exc)) from exc

    @property
    @abstractmethod
    def is_signed_in(self) -> bool:
        """True when an admin session token is held."""
        ...

    @abstractmethod
    def fetch_all(self) -> list[dict[str, Any]]:
        """Return every raw product record, newest first."""
        ...

    @abstractmethod
    def insert(self, record: dict[str, Any]) -> dict[str, Any]:
        """Store a new record and return it with server-assigned fields."""
        ...

    @abstractmethod
    def delete_by_id(self, product_id: str) -> None:
        """Delete one record; raise RemoteError if nothing was deleted."""
        ...

    @abstractmethod
    def upload_image(
        self, data: bytes, filename: str, content_type: str
    ) -> str:
        """Upload an image and return its public URL."""
        ...

    @abstractmethod
    def sign_in(self, email: str, password: str) -> str:
        """Authenticate an admin and return the access token."""
        ...

    @abstractmethod
    def sign_out(self) -> None:
        """Forget the admin session."""
        ...
