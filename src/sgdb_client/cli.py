"""
Command-line interface for the SteamGridDB client.

Thin wrapper over ``SGDBClient`` that prints JSON results.
"""

import json
import sys
from collections.abc import Callable
from datetime import datetime, timezone
from functools import partial
from typing import Any

from dotenv import load_dotenv
from pydantic import BaseModel, Field

from sgdb_client.api.results import ResponseResult, is_envelope_success
from sgdb_client.client import SGDBClient
from sgdb_client.config import get_settings
from sgdb_client.contracts import IdType, Style
from sgdb_client.contracts.entities import STYLE_BY_NAME
from sgdb_client.logger import get_logger, setup_logging
from sgdb_client.mapping import map_game_list, map_grid_list, string_to_style

logger = get_logger(__name__, component="cli")


class CLIOutput(BaseModel):
    """Structured output for CLI commands."""

    success: bool
    command: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    data: dict[str, Any] | list[Any] | None = None
    error: str | None = None


class UsageError(Exception):
    """Bad command-line arguments."""


def print_json(output: CLIOutput) -> None:
    """Print output as formatted JSON."""
    print(json.dumps(output.model_dump(mode="json"), indent=2, default=str))


def _option(args: list[str], name: str, default: str | None = None) -> str | None:
    """Value following ``name`` in args, if present."""
    if name in args:
        idx = args.index(name)
        if idx + 1 < len(args):
            return args[idx + 1]
        raise UsageError(f"{name} requires a value")
    return default


def _positional(args: list[str], index: int, what: str) -> str:
    if len(args) <= index or args[index].startswith("--"):
        raise UsageError(f"{what} required")
    return args[index]


def _parse_id_type(value: str) -> IdType:
    try:
        return IdType(value)
    except ValueError:
        choices = ", ".join(t.value for t in IdType)
        raise UsageError(f"Invalid id type '{value}'. Use one of: {choices}") from None


def _parse_style(value: str) -> Style:
    style = string_to_style(value.strip())
    if style is Style.UNKNOWN:
        choices = ", ".join(STYLE_BY_NAME)
        raise UsageError(f"Invalid style '{value}'. Use one of: {choices}")
    return style


def _failure_message(result: ResponseResult) -> str:
    """Readable reason for a call that did not succeed."""
    if result.success:
        return "API returned success=false"
    if result.errors:
        return f"{result.reason}: {'; '.join(result.errors)}"
    return result.reason


def cmd_test_config() -> CLIOutput:
    """Test configuration loading."""
    settings = get_settings()
    return CLIOutput(
        success=True,
        command="test-config",
        data={
            "environment": settings.environment,
            "sgdb_base_url": settings.sgdb.base_url,
            "sgdb_timeout_seconds": settings.sgdb.timeout_seconds,
            "api_key_configured": bool(settings.sgdb.api_key.get_secret_value()),
        },
    )


def cmd_game(client: SGDBClient, args: list[str]) -> CLIOutput:
    """Look up a game."""
    game_id = _positional(args, 0, "game id")
    id_type = _parse_id_type(_option(args, "--type", IdType.STEAM_APP_ID.value) or "")

    logger.info("Looking up game", game_id=game_id, id_type=id_type.value)
    game = client.get_game(game_id, id_type)

    return CLIOutput(
        success=game is not None,
        command="game",
        data=game.model_dump() if game else None,
        error=None if game else f"No game found for {id_type.value} id {game_id}",
    )


def cmd_search(client: SGDBClient, args: list[str]) -> CLIOutput:
    """Autocomplete search by name."""
    term = " ".join(args)
    if not term:
        raise UsageError("search term required")

    result = client.search_games_raw(term)
    if not is_envelope_success(result):
        return CLIOutput(success=False, command="search", error=_failure_message(result))

    games = map_game_list(result.payload)
    return CLIOutput(
        success=True,
        command="search",
        data=[game.model_dump() for game in games],
    )


def cmd_grids(client: SGDBClient, args: list[str]) -> CLIOutput:
    """List grids for a game."""
    game_id = _positional(args, 0, "game id")
    id_type = _parse_id_type(_option(args, "--type", IdType.GAME_ID.value) or "")
    styles_str = _option(args, "--styles")
    styles = [_parse_style(s) for s in styles_str.split(",")] if styles_str else None

    result = client.get_grids_raw(game_id, id_type, styles=styles)
    if not is_envelope_success(result):
        return CLIOutput(success=False, command="grids", error=_failure_message(result))

    grids = map_grid_list(result.payload)
    return CLIOutput(
        success=True,
        command="grids",
        data=[grid.model_dump() for grid in grids],
    )


def cmd_upload(client: SGDBClient, args: list[str]) -> CLIOutput:
    """Upload a grid image."""
    game_id = _positional(args, 0, "game id")
    style = _parse_style(_positional(args, 1, "style"))
    file_path = _positional(args, 2, "file path")

    uploaded = client.upload_grid(game_id, style, file_path)
    return CLIOutput(
        success=uploaded,
        command="upload",
        data={"game_id": game_id, "style": style.value, "file": file_path},
        error=None if uploaded else "Upload rejected",
    )


def cmd_vote(client: SGDBClient, args: list[str], *, upvote: bool) -> CLIOutput:
    """Vote a grid up or down."""
    grid_id = _positional(args, 0, "grid id")
    voted = client.vote(grid_id, upvote)
    return CLIOutput(
        success=voted,
        command="upvote" if upvote else "downvote",
        data={"grid_id": grid_id},
        error=None if voted else "Vote rejected",
    )


def cmd_delete(client: SGDBClient, args: list[str]) -> CLIOutput:
    """Delete one or more grids (comma-separated ids)."""
    ids_str = _positional(args, 0, "grid ids (comma-separated)")
    grid_ids = [x.strip() for x in ids_str.split(",") if x.strip()]

    outcomes = client.delete_grids(grid_ids)
    return CLIOutput(
        success=all(outcomes.values()),
        command="delete",
        data=outcomes,
    )


CLIENT_COMMANDS: dict[str, Callable[[SGDBClient, list[str]], CLIOutput]] = {
    "game": cmd_game,
    "search": cmd_search,
    "grids": cmd_grids,
    "upload": cmd_upload,
    "upvote": partial(cmd_vote, upvote=True),
    "downvote": partial(cmd_vote, upvote=False),
    "delete": cmd_delete,
}


def print_usage() -> None:
    """Print CLI usage information."""
    usage = """
SteamGridDB CLI
===============

Usage: sgdb <command> [arguments]

Commands:
  test-config                          Test configuration loading
  game <id> [--type T]                 Look up a game (default type: steam)
  search <term>                        Search games by name
  grids <id> [--type T] [--styles S]   List grids (default type: game)
  upload <game_id> <style> <file>      Upload a grid image
  upvote <grid_id>                     Upvote a grid
  downvote <grid_id>                   Downvote a grid
  delete <grid_ids>                    Delete grids (comma-separated)

Id types: steam, origin, egs, uplay, gog, game
Styles:   alternate, no_logo, blurred, material

Examples:
  sgdb game 440
  sgdb grids 13 --styles alternate,blurred
"""
    print(usage)


def main() -> None:
    """Main CLI entry point."""
    load_dotenv()

    if len(sys.argv) < 2:
        print_usage()
        sys.exit(1)

    command = sys.argv[1]
    args = sys.argv[2:]

    if command in ("help", "--help", "-h"):
        print_usage()
        return

    if command != "test-config" and command not in CLIENT_COMMANDS:
        print(f"Unknown command: {command}")
        print_usage()
        sys.exit(1)

    setup_logging()

    try:
        if command == "test-config":
            output = cmd_test_config()
        else:
            with SGDBClient.from_settings() as client:
                output = CLIENT_COMMANDS[command](client, args)

    except UsageError as e:
        print(f"Error: {e}")
        sys.exit(1)
    except KeyboardInterrupt:
        print("\nInterrupted by user")
        sys.exit(130)
    except Exception as e:
        logger.exception("CLI error", error=str(e))
        print_json(CLIOutput(success=False, command=command, error=str(e)))
        sys.exit(1)

    print_json(output)
    if not output.success:
        sys.exit(1)


if __name__ == "__main__":
    main()
