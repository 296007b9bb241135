"""Tests for the Steam Web API owned-games client."""

from __future__ import annotations

from typing import Callable
from unittest.mock import MagicMock, patch

import pytest
import requests

from steamlibsync.core.errors import (
    ApiKeyRejectedError,
    ApiUnreachableError,
    ErrorCategory,
    NoGamesFoundError,
    TransportError,
)
from steamlibsync.integrations.steam_web_api import SteamWebAPI, parse_owned_games

OWNED_GAMES = {
    "response": {
        "game_count": 2,
        "games": [
            {"appid": 440, "name": "Team Fortress 2", "playtime_forever": 90},
            {"appid": 620, "name": "Portal 2", "playtime_forever": 0},
        ],
    }
}


class TestSteamWebAPIInit:
    """Tests for SteamWebAPI initialization."""

    def test_empty_api_key_raises_value_error(self) -> None:
        """Empty API key raises ValueError."""
        with pytest.raises(ValueError, match="must not be empty"):
            SteamWebAPI("")

    def test_whitespace_api_key_raises_value_error(self) -> None:
        """Whitespace-only API key raises ValueError."""
        with pytest.raises(ValueError, match="must not be empty"):
            SteamWebAPI("   ")

    def test_valid_api_key_accepted(self) -> None:
        """Valid API key is accepted and stripped."""
        assert SteamWebAPI("  my_key  ").api_key == "my_key"


class TestGetOwnedGames:
    """Tests for the request and retry policy."""

    @patch("steamlibsync.integrations.steam_web_api.requests.get")
    def test_request_parameters(self, mock_get: MagicMock, make_response: Callable[..., MagicMock]) -> None:
        """App info and played free games are requested, free subs only on demand."""
        mock_get.return_value = make_response(json_data=OWNED_GAMES)

        SteamWebAPI("key").get_owned_games(76561197960287930)
        params = mock_get.call_args.kwargs["params"]
        assert params["key"] == "key"
        assert params["steamid"] == 76561197960287930
        assert params["include_appinfo"] == 1
        assert params["include_played_free_games"] == 1
        assert "include_free_sub" not in params

        SteamWebAPI("key").get_owned_games(1, include_free_sub=True)
        assert mock_get.call_args.kwargs["params"]["include_free_sub"] == 1

    @patch("steamlibsync.integrations.steam_web_api.time.sleep")
    @patch("steamlibsync.integrations.steam_web_api.requests.get")
    def test_429_four_times_then_success(
        self, mock_get: MagicMock, mock_sleep: MagicMock, make_response: Callable[..., MagicMock]
    ) -> None:
        """Four rate limits followed by a success return the payload."""
        mock_get.side_effect = [make_response(429)] * 4 + [make_response(json_data=OWNED_GAMES)]

        games = SteamWebAPI("key").get_owned_games(1)

        assert [game.app_id for game in games] == [440, 620]
        assert mock_get.call_count == 5
        assert mock_sleep.call_count == 4

    @patch("steamlibsync.integrations.steam_web_api.time.sleep")
    @patch("steamlibsync.integrations.steam_web_api.requests.get")
    def test_429_five_times_is_api_unreachable(
        self, mock_get: MagicMock, mock_sleep: MagicMock, make_response: Callable[..., MagicMock]
    ) -> None:
        """Five rate limits in a row give up with ApiUnreachableError."""
        mock_get.return_value = make_response(429)

        with pytest.raises(ApiUnreachableError):
            SteamWebAPI("key").get_owned_games(1)

        assert mock_get.call_count == 5
        # No sleep after the final attempt
        assert mock_sleep.call_count == 4

    @patch("steamlibsync.integrations.steam_web_api.time.sleep")
    @patch("steamlibsync.integrations.steam_web_api.requests.get")
    def test_other_http_error_not_retried(
        self, mock_get: MagicMock, mock_sleep: MagicMock, make_response: Callable[..., MagicMock]
    ) -> None:
        """A 500 aborts at once with TransportError."""
        mock_get.return_value = make_response(500)

        with pytest.raises(TransportError):
            SteamWebAPI("key").get_owned_games(1)

        assert mock_get.call_count == 1
        mock_sleep.assert_not_called()

    @pytest.mark.parametrize("status", [401, 403])
    @patch("steamlibsync.integrations.steam_web_api.requests.get")
    def test_rejected_key(self, mock_get: MagicMock, status: int, make_response: Callable[..., MagicMock]) -> None:
        """401/403 mean the key was refused, an authentication failure."""
        mock_get.return_value = make_response(status)
        with pytest.raises(ApiKeyRejectedError) as exc_info:
            SteamWebAPI("key").get_owned_games(1)
        assert exc_info.value.category is ErrorCategory.AUTH
        assert mock_get.call_count == 1

    @patch("steamlibsync.integrations.steam_web_api.requests.get")
    def test_network_error_wrapped(self, mock_get: MagicMock) -> None:
        """Connection errors become TransportError."""
        mock_get.side_effect = requests.ConnectionError("offline")
        with pytest.raises(TransportError, match="offline"):
            SteamWebAPI("key").get_owned_games(1)


class TestParseOwnedGames:
    """Tests for payload parsing."""

    def test_missing_games_list(self) -> None:
        """A response without games means a private or empty library."""
        with pytest.raises(NoGamesFoundError):
            parse_owned_games({"response": {}})

    @pytest.mark.parametrize("payload", [None, [], {"nope": 1}, {"response": {"games": "x"}}])
    def test_unexpected_shape(self, payload: object) -> None:
        """Anything but the documented shape is a TransportError."""
        with pytest.raises(TransportError):
            parse_owned_games(payload)

    def test_entry_fields(self) -> None:
        """Optional fields default to empty values."""
        (entry,) = parse_owned_games({"response": {"games": [{"appid": "10"}]}})
        assert entry.app_id == 10
        assert entry.name == ""
        assert entry.playtime_forever == 0
        assert entry.app_type == 0
