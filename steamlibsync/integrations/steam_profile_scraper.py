"""Steam Community profile games page reader (public mode).

Loads ``/profiles/<id>/games`` for an account that has no API key
configured and reads the owned games payload the page embeds as JSON in
the ``data-profile-gameslist`` attribute of ``#gameslist_config``.
Works only for profiles whose game details are public.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass

import requests
from bs4 import BeautifulSoup

from steamlibsync.core.errors import ProfileDeserializeError, ProfileFetchError
from steamlibsync.core.game import OwnedGameEntry
from steamlibsync.utils.i18n import t

logger = logging.getLogger("steamlibsync.profile_scraper")

__all__ = ["PageEvaluation", "SteamProfileScraper"]


@dataclass(frozen=True)
class PageEvaluation:
    """Outcome of reading the games payload out of a loaded page.

    Attributes:
        success: Whether the attribute was found and is a string.
        result: Raw attribute value on success.
        message: Diagnostic text on failure.
    """

    success: bool
    result: str | None = None
    message: str = ""


class SteamProfileScraper:
    """Fetches owned games from a public Steam Community profile."""

    PROFILE_URL_BY_ID = "https://steamcommunity.com/profiles/{steamid}/games"
    GAMES_LIST_SELECTOR = "#gameslist_config"
    GAMES_LIST_ATTRIBUTE = "data-profile-gameslist"

    _HEADERS: dict[str, str] = {
        "Accept": "text/html,application/xhtml+xml",
        "Accept-Language": "en-US,en;q=0.9",
        "User-Agent": (
            "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 " "(KHTML, like Gecko) Chrome/131.0.0.0 Safari/537.36"
        ),
    }

    def __init__(self, session_cookie: str | None = None) -> None:
        """Initialize the scraper.

        Args:
            session_cookie: Optional steamLoginSecure cookie, lets the owner
                read their own page while it is friends-only.
        """
        self._session = requests.Session()
        self._session.headers.update(self._HEADERS)
        if session_cookie:
            self._session.cookies.set(
                "steamLoginSecure",
                session_cookie,
                domain="steamcommunity.com",
            )

    def fetch_games(self, steam_id: int) -> list[OwnedGameEntry]:
        """Fetch all games from a user's profile by SteamID64.

        Args:
            steam_id: The user's 64-bit Steam ID.

        Returns:
            Owned game entries, empty when the payload lists no games.

        Raises:
            ProfileFetchError: If the page cannot be loaded or carries no
                games payload.
            ProfileDeserializeError: If the payload is not the expected JSON.
        """
        html = self.load_page(self.PROFILE_URL_BY_ID.format(steamid=steam_id))
        evaluation = self.evaluate_games_list(html)
        if not evaluation.success:
            logger.error(t("logs.profile_scraper.evaluation_failed", message=evaluation.message))
            raise ProfileFetchError(evaluation.message)

        return self.parse_games_payload(evaluation.result or "")

    def load_page(self, url: str) -> str:
        """Loads a profile page completely.

        Args:
            url: Full URL to the games page.

        Returns:
            The page HTML.

        Raises:
            ProfileFetchError: On network or HTTP failure.
        """
        try:
            response = self._session.get(url, timeout=(10, 60))
            response.raise_for_status()
        except requests.RequestException as e:
            logger.warning(t("logs.profile_scraper.request_error", error=str(e)))
            raise ProfileFetchError(str(e)) from e

        # Decode directly, charset detection is slow on large pages
        return response.content.decode("utf-8", errors="replace")

    @classmethod
    def evaluate_games_list(cls, html: str) -> PageEvaluation:
        """Reads the games payload attribute from the page DOM.

        Args:
            html: Loaded page HTML.

        Returns:
            Evaluation carrying the raw JSON string or a diagnostic message.
        """
        soup = BeautifulSoup(html, "html.parser")
        element = soup.select_one(cls.GAMES_LIST_SELECTOR)
        if element is None:
            return PageEvaluation(False, message=f"{cls.GAMES_LIST_SELECTOR} not found")

        value = element.get(cls.GAMES_LIST_ATTRIBUTE)
        if not isinstance(value, str):
            return PageEvaluation(False, message=f"{cls.GAMES_LIST_ATTRIBUTE} attribute missing")

        return PageEvaluation(True, result=value)

    @staticmethod
    def parse_games_payload(raw: str) -> list[OwnedGameEntry]:
        """Deserializes the ``data-profile-gameslist`` JSON.

        Args:
            raw: Attribute value (``{"rgGames": [...], ...}``).

        Returns:
            Entries in page order.

        Raises:
            ProfileDeserializeError: If the JSON is invalid or mis-shaped.
        """
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.error(t("logs.profile_scraper.deserialize_failed", error=e))
            logger.debug("Profile payload: %s", raw[:2000])
            raise ProfileDeserializeError(str(e)) from e

        if not isinstance(data, dict):
            raise ProfileDeserializeError("payload is not an object")

        games = data.get("rgGames") or []
        if not isinstance(games, list):
            raise ProfileDeserializeError("rgGames is not a list")

        try:
            entries = [OwnedGameEntry.from_json(item) for item in games]
        except (KeyError, ValueError, TypeError, AttributeError) as e:
            logger.error(t("logs.profile_scraper.deserialize_failed", error=e))
            raise ProfileDeserializeError(str(e)) from e

        logger.info(t("logs.profile_scraper.parsed_games", count=len(entries)))
        return entries
