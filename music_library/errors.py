"""Error taxonomy shared by the gateway, the metadata client and the service.

Every error carries the HTTP status the request layer should answer with and
a ``context`` dict of identifiers (song id, group, operation name, ...).
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class MusicLibraryError(Exception):
    """Base exception for the music library."""

    http_status = 500
    code = "internal_error"

    def __init__(self, message: str, *, operation: Optional[str] = None, context: Optional[Dict[str, Any]] = None):
        self.message = message
        self.operation = operation
        self.context: Dict[str, Any] = dict(context or {})
        super().__init__(message)

    def wrap(self, operation: str, **context: Any) -> "MusicLibraryError":
        """Return a copy of this error prefixed with ``operation``.

        The copy keeps the class, so callers and the request layer still see
        the same classification. Raise it with ``from`` to keep the cause.
        """
        return self.__class__(
            f"{operation}: {self.message}",
            operation=operation,
            context={**self.context, **context},
        )

    def to_dict(self) -> dict:
        return {"error": self.code, "message": self.message}


class ValidationError(MusicLibraryError):
    """Raised when request input is malformed."""

    http_status = 400
    code = "validation_error"


class NotFoundError(MusicLibraryError):
    """Raised when no song row matches the requested id."""

    http_status = 404
    code = "not_found"


class PageOutOfRangeError(MusicLibraryError):
    """Raised when a verse page starts past the last verse."""

    http_status = 404
    code = "page_out_of_range"


class StorageError(MusicLibraryError):
    """Raised on connectivity or constraint failures in the database."""

    code = "storage_error"


class NetworkError(MusicLibraryError):
    """Raised when the metadata API cannot be reached."""

    code = "network_error"


class UpstreamError(MusicLibraryError):
    """Raised when the metadata API answers with a non-success status."""

    code = "upstream_error"

    @property
    def upstream_status(self) -> Optional[int]:
        return self.context.get("status_code")


class DecodeError(MusicLibraryError):
    """Raised when the metadata API body is not the expected JSON object."""

    code = "decode_error"


__all__ = [
    "MusicLibraryError",
    "ValidationError",
    "NotFoundError",
    "PageOutOfRangeError",
    "StorageError",
    "NetworkError",
    "UpstreamError",
    "DecodeError",
]
