"""Integration tests for SGDBClient with mocked HTTP responses."""

import json
from collections.abc import Iterator
from pathlib import Path
from typing import Any, cast

import httpx
import pytest
import respx

from sgdb_client import Game, IdType, SGDBClient, Style, Transport, TransportConfig

FIXTURES_DIR = Path(__file__).parent.parent / "fixtures"

BASE = "https://api.example.com/"


def load_fixture(name: str) -> dict[str, Any]:
    """Load a JSON fixture file."""
    with (FIXTURES_DIR / name).open(encoding="utf-8") as f:
        return cast(dict[str, Any], json.load(f))


@pytest.fixture
def client() -> Iterator[SGDBClient]:
    """Client configured against a fake API base."""
    transport = Transport(TransportConfig(base_uri="https://unused.invalid", auth_token="unset"))
    with SGDBClient(transport) as sgdb:
        sgdb.configure("https://api.example.com", "TOK")
        yield sgdb


@pytest.fixture
def grids_response() -> dict[str, Any]:
    return load_fixture("grids_response.json")


class TestGetGame:
    """Tests for game lookups."""

    @respx.mock
    def test_lookup_by_steam_app_id(self, client: SGDBClient) -> None:
        """Test the Steam app id lookup end to end."""
        route = respx.get(f"{BASE}games/steam/440").mock(
            return_value=httpx.Response(
                200,
                json={
                    "success": True,
                    "data": {"id": 13, "name": "Team Fortress 2", "types": ["game"]},
                },
            )
        )

        game = client.get_game_by_steam_app_id("440")

        assert game is not None
        assert game.id == "13"
        assert game.name == "Team Fortress 2"
        assert game.types == ("game",)
        assert route.calls.last.request.headers["Authorization"] == "Bearer TOK"

    @respx.mock
    @pytest.mark.parametrize(
        ("id_type", "path"),
        [
            (IdType.STEAM_APP_ID, "games/steam/440"),
            (IdType.ORIGIN_ID, "games/origin/440"),
            (IdType.EGS_ID, "games/egs/440"),
            (IdType.UPLAY_ID, "games/uplay/440"),
            (IdType.GOG_ID, "games/gog/440"),
            (IdType.GAME_ID, "games/id/440"),
        ],
    )
    def test_path_per_id_type(self, client: SGDBClient, id_type: IdType, path: str) -> None:
        """Test that each identifier type hits exactly its path."""
        route = respx.get(f"{BASE}{path}").mock(
            return_value=httpx.Response(200, json=load_fixture("game_response.json"))
        )

        game = client.get_game("440", id_type)

        assert game == Game(id="13", name="Team Fortress 2", types=["steam"])
        assert route.call_count == 1
        assert len(respx.calls) == 1

    @respx.mock
    def test_wrappers_route_to_id_type(self, client: SGDBClient) -> None:
        """Test the per-identifier convenience methods."""
        gog = respx.get(f"{BASE}games/gog/1207658691").mock(
            return_value=httpx.Response(200, json=load_fixture("game_response.json"))
        )
        internal = respx.get(f"{BASE}games/id/13").mock(
            return_value=httpx.Response(200, json=load_fixture("game_response.json"))
        )

        assert client.get_game_by_gog_id("1207658691") is not None
        assert client.get_game_by_game_id("13") is not None
        assert gog.called
        assert internal.called

    @respx.mock
    def test_envelope_failure_returns_none(self, client: SGDBClient) -> None:
        """Test that success=false yields no game and no exception."""
        respx.get(f"{BASE}games/steam/440").mock(
            return_value=httpx.Response(200, json={"success": False})
        )

        assert client.get_game_by_steam_app_id("440") is None

    @respx.mock
    def test_api_error_returns_none(self, client: SGDBClient) -> None:
        """Test that a non-200 status yields no game."""
        respx.get(f"{BASE}games/steam/440").mock(
            return_value=httpx.Response(404, json=load_fixture("error_response.json"))
        )

        assert client.get_game_by_steam_app_id("440") is None

    @respx.mock
    def test_transport_error_returns_none(self, client: SGDBClient) -> None:
        """Test that network failures yield no game."""
        respx.get(f"{BASE}games/steam/440").mock(side_effect=httpx.ConnectError("refused"))

        assert client.get_game_by_steam_app_id("440") is None

    @respx.mock
    def test_raw_result(self, client: SGDBClient) -> None:
        """Test that the raw variant exposes status and server errors."""
        respx.get(f"{BASE}games/id/999").mock(
            return_value=httpx.Response(404, json=load_fixture("error_response.json"))
        )

        result = client.get_game_raw("999", IdType.GAME_ID)

        assert result.success is False
        assert result.status_code == 404
        assert result.errors == ["Game not found"]


class TestSearch:
    """Tests for autocomplete search."""

    @respx.mock
    def test_search_encodes_term(self, client: SGDBClient) -> None:
        """Test that the term is percent-encoded into a single path segment."""
        route = respx.get(url__startswith=f"{BASE}search/autocomplete/").mock(
            return_value=httpx.Response(200, json=load_fixture("search_response.json"))
        )

        games = client.search_games("Half Life/2")

        assert [g.name for g in games] == ["Half-Life", "Half-Life 2"]
        assert route.calls.last.request.url.raw_path == b"/search/autocomplete/Half%20Life%2F2"

    @respx.mock
    def test_search_failure_returns_empty(self, client: SGDBClient) -> None:
        respx.get(url__startswith=f"{BASE}search/autocomplete/").mock(
            return_value=httpx.Response(500, json={"success": False})
        )

        assert client.search_games("anything") == []


class TestGrids:
    """Tests for grid listing."""

    @respx.mock
    def test_styles_filter(self, client: SGDBClient, grids_response: dict[str, Any]) -> None:
        """Test the styles query and the mapped grids."""
        route = respx.get(f"{BASE}grids/game/13").mock(
            return_value=httpx.Response(200, json=grids_response)
        )

        grids = client.get_grids("13", IdType.GAME_ID, styles=[Style.ALTERNATE, Style.BLURRED])

        assert route.calls.last.request.url.params["styles"] == "alternate,blurred"
        assert [g.id for g in grids] == ["80", "81"]
        assert grids[0].tags == ("humor", "nsfw", "epilepsy")
        assert grids[0].author.name == "gridmaker"

    @respx.mock
    def test_no_styles_no_query(self, client: SGDBClient, grids_response: dict[str, Any]) -> None:
        route = respx.get(f"{BASE}grids/steam/440").mock(
            return_value=httpx.Response(200, json=grids_response)
        )

        client.get_grids_by_steam_app_id("440")

        assert route.calls.last.request.url.query == b""

    @respx.mock
    @pytest.mark.parametrize(
        ("id_type", "path"),
        [
            (IdType.STEAM_APP_ID, "grids/steam/7"),
            (IdType.ORIGIN_ID, "grids/origin/7"),
            (IdType.EGS_ID, "grids/egs/7"),
            (IdType.UPLAY_ID, "grids/uplay/7"),
            (IdType.GOG_ID, "grids/gog/7"),
            (IdType.GAME_ID, "grids/game/7"),
        ],
    )
    def test_path_per_id_type(
        self,
        client: SGDBClient,
        grids_response: dict[str, Any],
        id_type: IdType,
        path: str,
    ) -> None:
        route = respx.get(f"{BASE}{path}").mock(
            return_value=httpx.Response(200, json=grids_response)
        )

        assert len(client.get_grids("7", id_type)) == 2
        assert route.call_count == 1

    @respx.mock
    def test_failure_returns_empty(self, client: SGDBClient) -> None:
        respx.get(f"{BASE}grids/game/13").mock(
            return_value=httpx.Response(200, json={"success": False})
        )

        assert client.get_grids_by_game_id("13") == []


class TestUpload:
    """Tests for grid upload."""

    @respx.mock
    def test_upload(self, client: SGDBClient, tmp_path: Path) -> None:
        """Test the multipart fields sent for an upload."""
        image = tmp_path / "tf2.png"
        image.write_bytes(b"\x89PNG-bytes")
        route = respx.post(f"{BASE}grids").mock(
            return_value=httpx.Response(200, json={"success": True, "data": {"id": 90}})
        )

        assert client.upload_grid("13", Style.NO_LOGO, image) is True

        body = route.calls.last.request.content
        assert b'name="game_id"\r\n\r\n13\r\n' in body
        assert b'name="style"\r\n\r\nno_logo\r\n' in body
        assert b'name="grid"; filename="tf2.png"\r\nContent-Type: image/png' in body
        assert body.index(b'name="game_id"') < body.index(b'name="style"') < body.index(b'name="grid"')

    @respx.mock
    def test_upload_rejected(self, client: SGDBClient, tmp_path: Path) -> None:
        image = tmp_path / "tf2.png"
        image.write_bytes(b"x")
        respx.post(f"{BASE}grids").mock(
            return_value=httpx.Response(422, json={"success": False, "errors": ["Invalid dimensions"]})
        )

        assert client.upload_grid("13", Style.MATERIAL, image) is False

    def test_upload_missing_file(self, client: SGDBClient, tmp_path: Path) -> None:
        """Test that an unreadable image raises instead of returning False."""
        with pytest.raises(OSError):
            client.upload_grid("13", Style.ALTERNATE, tmp_path / "missing.png")


class TestVotesAndDeletion:
    """Tests for voting and deletion."""

    @respx.mock
    def test_vote_paths(self, client: SGDBClient) -> None:
        up = respx.post(f"{BASE}grids/vote/up/80").mock(
            return_value=httpx.Response(200, json={"success": True})
        )
        down = respx.post(f"{BASE}grids/vote/down/81").mock(
            return_value=httpx.Response(200, json={"success": True})
        )

        assert client.upvote("80") is True
        assert client.vote("81", upvote=False) is True
        assert up.call_count == 1
        assert down.call_count == 1

    @respx.mock
    def test_vote_accepts_grid(self, client: SGDBClient, grids_response: dict[str, Any]) -> None:
        respx.get(f"{BASE}grids/game/13").mock(
            return_value=httpx.Response(200, json=grids_response)
        )
        route = respx.post(f"{BASE}grids/vote/up/80").mock(
            return_value=httpx.Response(200, json={"success": True})
        )
        grid = client.get_grids_by_game_id("13")[0]

        assert client.vote(grid, upvote=True) is True
        assert route.called

    @respx.mock
    def test_delete_grids_isolated(self, client: SGDBClient) -> None:
        """Test one DELETE per id, with a failure not aborting the rest."""
        first = respx.delete(f"{BASE}grids/1").mock(
            return_value=httpx.Response(200, json={"success": True})
        )
        second = respx.delete(f"{BASE}grids/2").mock(side_effect=httpx.ConnectError("refused"))
        third = respx.delete(f"{BASE}grids/3").mock(
            return_value=httpx.Response(200, json={"success": True})
        )

        outcomes = client.delete_grids(["1", "2", "3"])

        assert outcomes == {"1": True, "2": False, "3": True}
        assert first.call_count == 1
        assert second.call_count == 1
        assert third.call_count == 1
        assert [c.request.method for c in respx.calls] == ["DELETE", "DELETE", "DELETE"]

    @respx.mock
    def test_delete_forbidden(self, client: SGDBClient) -> None:
        respx.delete(f"{BASE}grids/5").mock(
            return_value=httpx.Response(403, json={"success": False, "errors": ["Not owner"]})
        )

        assert client.delete_grid("5") is False
