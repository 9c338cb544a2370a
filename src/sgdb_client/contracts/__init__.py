"""
Data contracts for SteamGridDB API entities.

Pydantic models for games, grids and authors, plus the
closed sets of grid styles and identifier types.
"""

from sgdb_client.contracts.entities import (
    Author,
    Game,
    Grid,
    IdType,
    Style,
)

__all__ = [
    "Author",
    "Game",
    "Grid",
    "IdType",
    "Style",
]
