"""Steam Families shared library client.

Two calls against IFamilyGroupsService, both authenticated with the web
access token of the logged-in user:

1. GetFamilyGroupForUser resolves the caller's family group id.
2. GetSharedLibraryApps lists the apps shared in that group.

The shared library answers with its own field names; they are renamed onto
the GetOwnedGames schema so the result parses like any owned-games payload.
"""

from __future__ import annotations

import logging
from typing import Any

import requests

from steamlibsync.core.errors import FamilySharingUnauthorizedError, NoFamilyGroupError, TransportError
from steamlibsync.core.game import OwnedGameEntry
from steamlibsync.integrations.steam_web_api import parse_owned_games
from steamlibsync.utils.i18n import t

logger = logging.getLogger("steamlibsync.family_sharing")

__all__ = ["FamilySharingClient", "SHARED_LIBRARY_FIELD_MAP", "rename_shared_library_fields"]

_FAMILY_GROUP_URL = "https://api.steampowered.com/IFamilyGroupsService/GetFamilyGroupForUser/v1/"
_SHARED_LIBRARY_URL = "https://api.steampowered.com/IFamilyGroupsService/GetSharedLibraryApps/v1/"
_TIMEOUT = 30

SHARED_LIBRARY_FIELD_MAP: dict[str, str] = {
    "apps": "games",
    "rt_playtime": "playtime_forever",
    "img_icon_hash": "img_icon_url",
}


def rename_shared_library_fields(payload: Any) -> Any:
    """Renames shared-library keys onto the owned-games schema, at any depth.

    Pure key renaming, values are untouched.

    Args:
        payload: Decoded GetSharedLibraryApps JSON.

    Returns:
        A new structure using GetOwnedGames field names.
    """
    if isinstance(payload, dict):
        return {
            SHARED_LIBRARY_FIELD_MAP.get(key, key): rename_shared_library_fields(value)
            for key, value in payload.items()
        }
    if isinstance(payload, list):
        return [rename_shared_library_fields(item) for item in payload]
    return payload


class FamilySharingClient:
    """Resolves and reads the family shared library of one account."""

    def __init__(self, access_token: str) -> None:
        """Initializes the client.

        Args:
            access_token: Steam web access token of the family member.
        """
        self.access_token = access_token

    def _get_json(self, url: str, params: dict[str, Any]) -> Any:
        try:
            response = requests.get(url, params=params, timeout=_TIMEOUT)
        except requests.RequestException as e:
            raise TransportError(str(e)) from e

        if response.status_code == 401:
            logger.debug("Family sharing API returned 401, access token likely expired")
            raise FamilySharingUnauthorizedError()

        try:
            response.raise_for_status()
            return response.json()
        except requests.HTTPError as e:
            raise TransportError(str(e)) from e
        except ValueError as e:
            raise TransportError(f"{t('errors.unexpected_response')} ({e})") from e

    def get_family_group_id(self) -> str:
        """Looks up the family group of the token's owner.

        Returns:
            The family group id.

        Raises:
            FamilySharingUnauthorizedError: If the token expired.
            NoFamilyGroupError: If the user is not in any family group.
            TransportError: On other network or response failures.
        """
        data = self._get_json(_FAMILY_GROUP_URL, {"access_token": self.access_token})
        info = data.get("response") if isinstance(data, dict) else None
        if not isinstance(info, dict):
            raise TransportError(t("errors.unexpected_response"))

        group_id = str(info.get("family_groupid") or "")
        if info.get("is_not_member_of_any_group") or not group_id or group_id == "0":
            raise NoFamilyGroupError()

        return group_id

    def get_shared_games(self, steam_id: int) -> list[OwnedGameEntry]:
        """Fetches the apps shared with ``steam_id`` in its family group.

        Games and non-game software are both requested; the caller filters
        by ``app_type``.

        Args:
            steam_id: 64-bit Steam ID of the family member.

        Returns:
            Shared entries in the owned-games schema.
        """
        group_id = self.get_family_group_id()
        logger.info(t("logs.family_sharing.group_found", group_id=group_id))

        params = {
            "access_token": self.access_token,
            "family_groupid": group_id,
            "include_own": "true",
            "include_excluded": "false",
            "include_free": "false",
            "include_non_games": "true",
            "language": "english",
            "steamid": steam_id,
        }
        data = self._get_json(_SHARED_LIBRARY_URL, params)
        games = parse_owned_games(rename_shared_library_fields(data))
        logger.info(t("logs.family_sharing.shared_games", count=len(games)))
        return games
