"""
Data contracts for SteamGridDB API entities.

These Pydantic models define the expected structure of ``data``
objects returned by the API. All of them are immutable.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Style(str, Enum):
    """Visual style of a grid image."""

    ALTERNATE = "alternate"
    NO_LOGO = "no_logo"
    BLURRED = "blurred"
    MATERIAL = "material"
    # Present in a response but not one of the known values
    UNKNOWN = "unknown"


STYLE_BY_NAME: dict[str, Style] = {
    "alternate": Style.ALTERNATE,
    "no_logo": Style.NO_LOGO,
    "blurred": Style.BLURRED,
    "material": Style.MATERIAL,
}


def string_to_style(value: str) -> Style:
    """Exact-match lookup; anything else is ``Style.UNKNOWN``."""
    return STYLE_BY_NAME.get(value, Style.UNKNOWN)


class IdType(str, Enum):
    """Namespace a game identifier belongs to."""

    STEAM_APP_ID = "steam"
    ORIGIN_ID = "origin"
    EGS_ID = "egs"
    UPLAY_ID = "uplay"
    GOG_ID = "gog"
    GAME_ID = "game"


def _coerce_id(v: Any) -> Any:
    # The API sends numeric ids; strings are the canonical form here
    if isinstance(v, int) and not isinstance(v, bool):
        return str(v)
    return v


class Game(BaseModel):
    """A game known to SteamGridDB. Two games are equal when their ids are."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="SteamGridDB game id")
    name: str = Field(..., description="Game name")
    types: tuple[str, ...] = Field(..., description="Store types, e.g. steam, gog")

    @field_validator("id", mode="before")
    @classmethod
    def normalize_id(cls, v: Any) -> Any:
        """Convert numeric ids to strings."""
        return _coerce_id(v)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Game):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)


class Author(BaseModel):
    """Uploader of a grid."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    steam64: str
    avatar_url: str = Field(..., alias="avatar")

    @field_validator("steam64", mode="before")
    @classmethod
    def normalize_steam64(cls, v: Any) -> Any:
        return _coerce_id(v)


class Grid(BaseModel):
    """
    Grid image metadata.

    ``thumb`` and ``avatar`` in API payloads map to ``thumb_url`` and
    ``author.avatar_url``.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    score: float
    style: Style
    url: str
    thumb_url: str = Field(..., alias="thumb")
    tags: tuple[str, ...] = Field(...)
    author: Author

    @field_validator("id", mode="before")
    @classmethod
    def normalize_id(cls, v: Any) -> Any:
        """Convert numeric ids to strings."""
        return _coerce_id(v)

    @field_validator("style", mode="before")
    @classmethod
    def parse_style(cls, v: Any) -> Any:
        """Unrecognized style strings become ``Style.UNKNOWN``."""
        if isinstance(v, str):
            return string_to_style(v)
        return v

    @field_validator("tags", mode="before")
    @classmethod
    def stringify_tags(cls, v: Any) -> Any:
        """Tags are kept as strings whatever JSON type the API used."""
        if isinstance(v, list):
            return tuple(str(tag) for tag in v)
        return v
