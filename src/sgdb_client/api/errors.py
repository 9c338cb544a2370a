"""
Error types for the SteamGridDB client.

Network and HTTP failures are never raised: the transport folds them
into a ``Failure`` result tagged with a ``FailureKind``. Exceptions are
reserved for contract violations that should fail loudly.
"""

from datetime import datetime, timezone
from enum import Enum


class FailureKind(str, Enum):
    """Category of a failed request."""

    TRANSPORT = "transport_error"
    API = "api_error"


class SGDBError(Exception):
    """Base exception for client errors."""

    def __init__(
        self,
        message: str,
        *,
        endpoint: str | None = None,
        original_error: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.endpoint = endpoint
        self.original_error = original_error
        self.timestamp = datetime.now(timezone.utc)


class MappingError(SGDBError):
    """Raised when a successful payload lacks a field the entity requires."""

    pass
