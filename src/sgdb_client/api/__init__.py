"""
Transport layer for the SteamGridDB API.

Authenticated request building, multipart encoding and
uniform success/failure results.
"""

from sgdb_client.api.errors import FailureKind, MappingError, SGDBError
from sgdb_client.api.multipart import encode_multipart
from sgdb_client.api.results import (
    Failure,
    ResponseResult,
    Success,
    is_envelope_success,
)
from sgdb_client.api.transport import (
    HTTPMethod,
    RequestIntent,
    Transport,
    TransportConfig,
)

__all__ = [
    # Errors
    "FailureKind",
    "MappingError",
    "SGDBError",
    # Results
    "Failure",
    "ResponseResult",
    "Success",
    "is_envelope_success",
    # Transport
    "HTTPMethod",
    "RequestIntent",
    "Transport",
    "TransportConfig",
    "encode_multipart",
]
