"""
SteamGridDB endpoint router.

Maps domain calls onto API paths, sends them through the shared
``Transport`` and maps successful payloads into entities. Failed
calls come back as ``None``, an empty list or ``False``.
"""

from collections.abc import Iterable, Sequence
from functools import partialmethod
from pathlib import Path
from typing import Any
from urllib.parse import quote

from sgdb_client.api.results import ResponseResult, is_envelope_success
from sgdb_client.api.transport import Transport, TransportConfig
from sgdb_client.config import Settings
from sgdb_client.contracts import Game, Grid, IdType, Style
from sgdb_client.logger import get_logger
from sgdb_client.mapping import (
    map_game,
    map_game_list,
    map_grid_list,
    style_to_string,
    styles_to_query,
)

GAME_PATHS: dict[IdType, str] = {
    IdType.STEAM_APP_ID: "games/steam/{id}",
    IdType.ORIGIN_ID: "games/origin/{id}",
    IdType.EGS_ID: "games/egs/{id}",
    IdType.UPLAY_ID: "games/uplay/{id}",
    IdType.GOG_ID: "games/gog/{id}",
    IdType.GAME_ID: "games/id/{id}",
}

GRID_PATHS: dict[IdType, str] = {
    IdType.STEAM_APP_ID: "grids/steam/{id}",
    IdType.ORIGIN_ID: "grids/origin/{id}",
    IdType.EGS_ID: "grids/egs/{id}",
    IdType.UPLAY_ID: "grids/uplay/{id}",
    IdType.GOG_ID: "grids/gog/{id}",
    IdType.GAME_ID: "grids/game/{id}",
}

SEARCH_PATH = "search/autocomplete/{term}"
UPLOAD_PATH = "grids"
UPVOTE_PATH = "grids/vote/up/{id}"
DOWNVOTE_PATH = "grids/vote/down/{id}"
DELETE_PATH = "grids/{id}"

GridRef = Grid | str


def _grid_id(grid: GridRef) -> str:
    return grid.id if isinstance(grid, Grid) else grid


class SGDBClient:
    """
    High-level SteamGridDB client.

    Example:
        >>> with SGDBClient.from_settings() as sgdb:
        ...     game = sgdb.get_game_by_steam_app_id("440")
        ...     grids = sgdb.get_grids_by_game_id(game.id, styles=[Style.ALTERNATE])
    """

    def __init__(self, transport: Transport) -> None:
        self._transport = transport
        self._logger = get_logger(
            self.__class__.__name__,
            component="client",
        )

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "SGDBClient":
        """Create a client with its own transport from application settings."""
        return cls(Transport(TransportConfig.from_settings(settings)))

    @property
    def transport(self) -> Transport:
        return self._transport

    def configure(self, base_uri: str, auth_token: str) -> None:
        """Point the underlying transport at another API base or token."""
        self._transport.configure(base_uri, auth_token)

    def close(self) -> None:
        self._transport.close()

    def __enter__(self) -> "SGDBClient":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()

    def _log_failure(self, operation: str, result: ResponseResult, **context: Any) -> None:
        if result.success:
            self._logger.warning(
                "API returned success=false",
                operation=operation,
                **context,
            )
        else:
            self._logger.warning(
                "Request failed",
                operation=operation,
                status_code=result.status_code,
                kind=result.kind.value,
                errors=result.errors,
                **context,
            )

    # Games

    def get_game_raw(self, game_id: str, id_type: IdType) -> ResponseResult:
        """Look up a game and return the unmapped result."""
        path = GAME_PATHS[id_type].format(id=game_id)
        return self._transport.get(path)

    def get_game(self, game_id: str, id_type: IdType) -> Game | None:
        """
        Look up a game by an identifier of the given type.

        Store ids are sent verbatim.

        Returns:
            Game | None: The game, or None when the call failed
        """
        result = self.get_game_raw(game_id, id_type)
        if not is_envelope_success(result):
            self._log_failure("get_game", result, game_id=game_id, id_type=id_type.value)
            return None
        return map_game(result.payload)

    get_game_by_steam_app_id = partialmethod(get_game, id_type=IdType.STEAM_APP_ID)
    get_game_by_origin_id = partialmethod(get_game, id_type=IdType.ORIGIN_ID)
    get_game_by_egs_id = partialmethod(get_game, id_type=IdType.EGS_ID)
    get_game_by_uplay_id = partialmethod(get_game, id_type=IdType.UPLAY_ID)
    get_game_by_gog_id = partialmethod(get_game, id_type=IdType.GOG_ID)
    get_game_by_game_id = partialmethod(get_game, id_type=IdType.GAME_ID)

    # Search

    def search_games_raw(self, term: str) -> ResponseResult:
        """Autocomplete search returning the unmapped result."""
        # Free text, so the whole term is encoded into one path segment
        path = SEARCH_PATH.format(term=quote(term, safe=""))
        return self._transport.get(path)

    def search_games(self, term: str) -> list[Game]:
        """Games whose names match the search term, in API order."""
        result = self.search_games_raw(term)
        if not is_envelope_success(result):
            self._log_failure("search_games", result, term=term)
            return []
        return map_game_list(result.payload)

    # Grids

    def get_grids_raw(
        self,
        game_id: str,
        id_type: IdType,
        styles: Sequence[Style] | None = None,
    ) -> ResponseResult:
        """Fetch grids for a game and return the unmapped result."""
        path = GRID_PATHS[id_type].format(id=game_id)
        query = {"styles": styles_to_query(styles)} if styles else None
        return self._transport.get(path, query=query)

    def get_grids(
        self,
        game_id: str,
        id_type: IdType,
        styles: Sequence[Style] | None = None,
    ) -> list[Grid]:
        """
        Grids for a game, optionally filtered by style.

        Args:
            game_id: Identifier of the game
            id_type: Namespace of ``game_id``
            styles: Only return grids of these styles (all if None)

        Returns:
            list[Grid]: Grids in API order, empty when the call failed
        """
        result = self.get_grids_raw(game_id, id_type, styles)
        if not is_envelope_success(result):
            self._log_failure("get_grids", result, game_id=game_id, id_type=id_type.value)
            return []
        return map_grid_list(result.payload)

    get_grids_by_steam_app_id = partialmethod(get_grids, id_type=IdType.STEAM_APP_ID)
    get_grids_by_origin_id = partialmethod(get_grids, id_type=IdType.ORIGIN_ID)
    get_grids_by_egs_id = partialmethod(get_grids, id_type=IdType.EGS_ID)
    get_grids_by_uplay_id = partialmethod(get_grids, id_type=IdType.UPLAY_ID)
    get_grids_by_gog_id = partialmethod(get_grids, id_type=IdType.GOG_ID)
    get_grids_by_game_id = partialmethod(get_grids, id_type=IdType.GAME_ID)

    def upload_grid(self, game_id: str, style: Style, file_path: str | Path) -> bool:
        """
        Upload an image as a new grid for a game.

        Raises:
            OSError: If the image file cannot be read
            ValueError: If ``style`` is ``Style.UNKNOWN``
        """
        fields = {
            "game_id": game_id,
            "style": style_to_string(style),
            "grid": Path(file_path),
        }
        result = self._transport.post_multipart(UPLOAD_PATH, fields)
        if not is_envelope_success(result):
            self._log_failure("upload_grid", result, game_id=game_id)
            return False
        self._logger.info("Grid uploaded", game_id=game_id, style=style.value)
        return True

    # Votes

    def vote(self, grid: GridRef, upvote: bool) -> bool:
        """Vote a grid up (True) or down (False)."""
        return self.upvote(grid) if upvote else self.downvote(grid)

    def upvote(self, grid: GridRef) -> bool:
        grid_id = _grid_id(grid)
        result = self._transport.post(UPVOTE_PATH.format(id=grid_id))
        if not is_envelope_success(result):
            self._log_failure("upvote", result, grid_id=grid_id)
            return False
        return True

    def downvote(self, grid: GridRef) -> bool:
        grid_id = _grid_id(grid)
        result = self._transport.post(DOWNVOTE_PATH.format(id=grid_id))
        if not is_envelope_success(result):
            self._log_failure("downvote", result, grid_id=grid_id)
            return False
        return True

    # Deletion

    def delete_grid(self, grid: GridRef) -> bool:
        """Delete one grid owned by the authenticated user."""
        grid_id = _grid_id(grid)
        result = self._transport.delete(DELETE_PATH.format(id=grid_id))
        if not is_envelope_success(result):
            self._log_failure("delete_grid", result, grid_id=grid_id)
            return False
        return True

    def delete_grids(self, grids: Iterable[GridRef]) -> dict[str, bool]:
        """
        Delete several grids, one request each.

        A failed deletion does not stop the remaining ones.

        Returns:
            dict[str, bool]: Outcome per grid id, in input order
        """
        outcomes: dict[str, bool] = {}
        for grid in grids:
            outcomes[_grid_id(grid)] = self.delete_grid(grid)

        deleted = sum(outcomes.values())
        self._logger.info(
            "Batch deletion complete",
            total=len(outcomes),
            deleted=deleted,
            failed=len(outcomes) - deleted,
        )
        return outcomes
