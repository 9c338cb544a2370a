"""
SteamGridDB API client.

Typed access to game lookup, search, grid listing, upload,
voting and deletion on SteamGridDB.
"""

from sgdb_client.api import (
    Failure,
    FailureKind,
    MappingError,
    ResponseResult,
    SGDBError,
    Success,
    Transport,
    TransportConfig,
)
from sgdb_client.client import SGDBClient
from sgdb_client.config import Settings, get_settings
from sgdb_client.contracts import Author, Game, Grid, IdType, Style
from sgdb_client.logger import get_logger, setup_logging

__version__ = "0.1.0"

__all__ = [
    "Author",
    "Failure",
    "FailureKind",
    "Game",
    "Grid",
    "IdType",
    "MappingError",
    "ResponseResult",
    "SGDBClient",
    "SGDBError",
    "Settings",
    "Style",
    "Success",
    "Transport",
    "TransportConfig",
    "get_logger",
    "get_settings",
    "setup_logging",
    "__version__",
]
