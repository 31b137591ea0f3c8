# storefront/gateway/errors.py

"""Failures raised at the hosted-backend boundary."""


class RemoteError(Exception):
    """A fetch, insert, delete or sign-in call to the backend failed.

    ``message`` is human readable and safe to show in a notification.
    """

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status = status


class AuthError(RemoteError):
    """The backend rejected the admin credentials or session."""


class UploadError(Exception):
    """An image upload to object storage failed."""

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status = status
