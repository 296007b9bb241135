"""
Steam local account discovery.

Reads config/loginusers.vdf (or, without it, the userdata/ folders) to list
the accounts that logged in on this machine and converts between SteamID64
and the short account id used for userdata/ folder names.
"""

from __future__ import annotations

import logging
from pathlib import Path

from steamlibsync.core.keyvalue import KeyValueParseError, load_file
from steamlibsync.core.steam_account import STEAM_ID_BASE, LocalSteamUser
from steamlibsync.utils.i18n import t

logger = logging.getLogger("steamlibsync.account_scanner")


__all__ = [
    "account_id_to_steam_id_64",
    "get_most_recent_user",
    "get_steam_users",
    "get_userdata_users",
    "steam_id_64_to_account_id",
]


def account_id_to_steam_id_64(account_id: int) -> int:
    """Convert Account ID (32-bit) to SteamID64.

    Args:
        account_id: The short Steam account ID (from userdata folder)

    Returns:
        The 64-bit Steam ID
    """
    return account_id + STEAM_ID_BASE


def steam_id_64_to_account_id(steam_id_64: int) -> int:
    """Convert SteamID64 back to Account ID (32-bit).

    Args:
        steam_id_64: The 64-bit Steam ID

    Returns:
        The short Steam account ID
    """
    return steam_id_64 & 0xFFFFFFFF


def get_steam_users(steam_path: Path) -> list[LocalSteamUser]:
    """Lists accounts from config/loginusers.vdf.

    Entries whose key is not a numeric Steam ID are skipped. A missing or
    unreadable file yields an empty list.

    Args:
        steam_path: Steam installation directory.

    Returns:
        Local users in file order.
    """
    login_users = steam_path / "config" / "loginusers.vdf"
    users: list[LocalSteamUser] = []
    if not login_users.is_file():
        return users

    try:
        root = load_file(login_users)
    except (OSError, KeyValueParseError) as e:
        logger.error(t("logs.scanner.login_users_error", path=login_users, error=e))
        return users

    for entry in root:
        if not entry.name or not entry.name.isdigit():
            logger.debug("Skipping non-numeric loginusers entry %r", entry.name)
            continue
        users.append(
            LocalSteamUser(
                steam_id=int(entry.name),
                account_name=entry["AccountName"].as_str(),
                persona_name=entry["PersonaName"].as_str(),
                recent=entry["MostRecent"].as_bool(),
            )
        )

    return users


def get_userdata_users(steam_path: Path) -> list[LocalSteamUser]:
    """Lists accounts from their userdata/<account id> folders.

    Used when loginusers.vdf is missing or empty. Names are unknown here,
    so both name fields are left empty.

    Args:
        steam_path: Steam installation directory.

    Returns:
        Users sorted by account id.
    """
    userdata_path = steam_path / "userdata"
    if not userdata_path.is_dir():
        return []

    account_ids = sorted(int(d.name) for d in userdata_path.iterdir() if d.is_dir() and d.name.isdigit())
    # Folder "0" belongs to no account
    return [
        LocalSteamUser(steam_id=account_id_to_steam_id_64(account_id), account_name="", persona_name="")
        for account_id in account_ids
        if account_id > 0
    ]


def get_most_recent_user(steam_path: Path) -> LocalSteamUser | None:
    """Returns the most recently logged-in user, or the first one listed.

    Falls back to the userdata folders when loginusers.vdf lists nobody.
    """
    users = get_steam_users(steam_path)
    for user in users:
        if user.recent:
            return user
    if not users:
        users = get_userdata_users(steam_path)
    return users[0] if users else None
