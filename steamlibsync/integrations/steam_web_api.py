"""Steam Web API client for an account's owned games (private mode).

Uses IPlayerService/GetOwnedGames with an API key. The endpoint likes to
answer 429 even after hours of silence, so rate limiting is retried a fixed
number of times with a fixed delay; any other failure aborts at once.
"""

from __future__ import annotations

import logging
import time
from typing import Any

import requests

from steamlibsync.core.errors import ApiKeyRejectedError, ApiUnreachableError, NoGamesFoundError, TransportError
from steamlibsync.core.game import OwnedGameEntry
from steamlibsync.utils.i18n import t

logger = logging.getLogger("steamlibsync.steam_web_api")

__all__ = ["SteamWebAPI", "parse_owned_games"]

_OWNED_GAMES_URL = "https://api.steampowered.com/IPlayerService/GetOwnedGames/v0001/"
_MAX_ATTEMPTS = 5
_RETRY_DELAY = 5.0
_TIMEOUT = 30
# Status codes meaning the key itself was refused
_KEY_REJECTED = (401, 403)


def parse_owned_games(payload: Any) -> list[OwnedGameEntry]:
    """Parses a GetOwnedGames-shaped payload.

    Also used for the family shared library once its fields are renamed.

    Args:
        payload: Decoded JSON body.

    Returns:
        Entries in response order.

    Raises:
        NoGamesFoundError: If the response carries no ``games`` list
            (private profile or empty account).
        TransportError: If the payload does not have the expected shape.
    """
    if not isinstance(payload, dict) or not isinstance(payload.get("response"), dict):
        raise TransportError(t("errors.unexpected_response"))

    games = payload["response"].get("games")
    if games is None:
        raise NoGamesFoundError()
    if not isinstance(games, list):
        raise TransportError(t("errors.unexpected_response"))

    try:
        return [OwnedGameEntry.from_json(item) for item in games]
    except (KeyError, ValueError, TypeError) as e:
        raise TransportError(f"{t('errors.unexpected_response')} ({e})") from e


class SteamWebAPI:
    """Owned-games client authenticated by a Web API key.

    Attributes:
        api_key: Steam Web API key for authentication.
    """

    def __init__(self, api_key: str) -> None:
        """Initializes the SteamWebAPI client.

        Args:
            api_key: Steam Web API key. Must not be empty.

        Raises:
            ValueError: If api_key is empty or whitespace-only.
        """
        if not api_key or not api_key.strip():
            raise ValueError("Steam API key must not be empty")
        self.api_key: str = api_key.strip()

    def get_owned_games(self, steam_id: int, include_free_sub: bool = False) -> list[OwnedGameEntry]:
        """Fetches the owned games of one account.

        Requests app info and played free games; free-subscription titles
        only when asked. HTTP 429 is retried up to five attempts in total
        with a fixed delay, blocking the caller meanwhile.

        Args:
            steam_id: 64-bit Steam ID of the account.
            include_free_sub: Also request free-subscription titles.

        Returns:
            Owned game entries.

        Raises:
            ApiUnreachableError: If every attempt was rate limited.
            ApiKeyRejectedError: If the key was refused (HTTP 401/403).
            NoGamesFoundError: If the account exposes no games.
            TransportError: On any other network or HTTP failure.
        """
        params: dict[str, str | int] = {
            "key": self.api_key,
            "steamid": steam_id,
            "include_appinfo": 1,
            "include_played_free_games": 1,
            "skip_unvetted_apps": 0,
            "format": "json",
        }
        if include_free_sub:
            params["include_free_sub"] = 1

        for attempt in range(1, _MAX_ATTEMPTS + 1):
            try:
                response = requests.get(_OWNED_GAMES_URL, params=params, timeout=_TIMEOUT)
            except requests.RequestException as exc:
                logger.error(t("logs.steam_web_api.request_failed", error=exc))
                raise TransportError(str(exc)) from exc

            if response.status_code == 429:
                logger.debug("GetOwnedGames returned 429 (attempt %d/%d)", attempt, _MAX_ATTEMPTS)
                if attempt < _MAX_ATTEMPTS:
                    time.sleep(_RETRY_DELAY)
                continue

            if response.status_code in _KEY_REJECTED:
                logger.error(t("logs.steam_web_api.key_rejected", status=response.status_code))
                raise ApiKeyRejectedError()

            try:
                response.raise_for_status()
                payload = response.json()
            except requests.HTTPError as exc:
                logger.error(t("logs.steam_web_api.request_failed", error=exc))
                raise TransportError(str(exc)) from exc
            except ValueError as exc:
                raise TransportError(f"{t('errors.unexpected_response')} ({exc})") from exc

            return parse_owned_games(payload)

        logger.warning(t("logs.steam_web_api.rate_limit_exhausted", attempts=_MAX_ATTEMPTS))
        raise ApiUnreachableError()
