"""
Mapping between API payloads and entities.

All ``map_*`` functions expect the payload of a call that already
succeeded. A missing or mistyped field is a broken API contract and
raises ``MappingError``.
"""

from collections.abc import Iterable
from typing import Any, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from sgdb_client.api.errors import MappingError
from sgdb_client.contracts import Game, Grid, Style
from sgdb_client.contracts.entities import STYLE_BY_NAME, string_to_style

T = TypeVar("T", bound=BaseModel)

_NAME_BY_STYLE: dict[Style, str] = {style: name for name, style in STYLE_BY_NAME.items()}

__all__ = [
    "map_game",
    "map_game_list",
    "map_grid",
    "map_grid_list",
    "string_to_style",
    "style_to_string",
    "styles_to_query",
]


def style_to_string(style: Style) -> str:
    """
    Canonical API name of a style.

    Raises:
        ValueError: For ``Style.UNKNOWN``, which has no API name
    """
    try:
        return _NAME_BY_STYLE[style]
    except KeyError:
        raise ValueError(f"Style {style!r} cannot be sent to the API") from None


def styles_to_query(styles: Iterable[Style]) -> str:
    """Comma-joined style names in the given order."""
    return ",".join(style_to_string(style) for style in styles)


def _validate(model: type[T], raw: Any) -> T:
    try:
        return model.model_validate(raw)
    except PydanticValidationError as e:
        raise MappingError(f"Invalid {model.__name__} payload: {e}", original_error=e) from e


def _data(payload: Any) -> Any:
    if not isinstance(payload, dict) or "data" not in payload:
        raise MappingError("Response envelope has no 'data' field")
    return payload["data"]


def _data_list(payload: Any) -> list[Any]:
    data = _data(payload)
    if not isinstance(data, list):
        raise MappingError(f"Expected 'data' to be a list, got {type(data).__name__}")
    return data


def map_game(payload: Any) -> Game:
    """Build a ``Game`` from a lookup response envelope."""
    return _validate(Game, _data(payload))


def map_game_list(payload: Any) -> list[Game]:
    """Build the games of a search response envelope, in response order."""
    return [_validate(Game, item) for item in _data_list(payload)]


def map_grid(raw_grid: Any) -> Grid:
    """Build a ``Grid`` from one element of a grid list."""
    return _validate(Grid, raw_grid)


def map_grid_list(payload: Any) -> list[Grid]:
    """Build the grids of a grid list response envelope, in response order."""
    return [map_grid(item) for item in _data_list(payload)]
