"""
Steam account data structures.

``LocalSteamUser`` mirrors one entry of config/loginusers.vdf,
``AccountContext`` describes one remote library to query during a sync run.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

__all__ = ["AccountContext", "AuthMode", "LocalSteamUser", "STEAM_ID_BASE"]

# Steam ID conversion constant
STEAM_ID_BASE = 76561197960265728


class AuthMode(str, Enum):
    """How a remote library is reached."""

    PRIVATE_API_KEY = "private"
    PUBLIC_PROFILE = "public"
    FAMILY_TOKEN = "family"


@dataclass(frozen=True)
class AccountContext:
    """One remote source to query.

    Attributes:
        steam_id: 64-bit Steam ID of the account.
        auth_mode: Fetch mode for this account.
        api_key: Web API key (private mode).
        access_token: Web access token (family sharing).
        import_playtime: Whether playtime/last activity are imported.
        include_free_sub: Whether free-subscription titles are requested.
    """

    steam_id: int
    auth_mode: AuthMode = AuthMode.PUBLIC_PROFILE
    api_key: str = ""
    access_token: str = ""
    import_playtime: bool = True
    include_free_sub: bool = False

    def __str__(self) -> str:
        return f"{self.steam_id} ({self.auth_mode.value})"


@dataclass(frozen=True)
class LocalSteamUser:
    """Represents a Steam user that logged in on this machine.

    Attributes:
        steam_id: The 64-bit Steam ID.
        account_name: Login name.
        persona_name: Profile display name.
        recent: True for the most recently logged-in user.
    """

    steam_id: int
    account_name: str
    persona_name: str
    recent: bool = False

    def __str__(self) -> str:
        return f"{self.persona_name} ({self.steam_id})"
