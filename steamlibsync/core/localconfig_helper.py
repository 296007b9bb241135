# steamlibsync/core/localconfig_helper.py

"""
LocalConfig Helper - per-user activity from Steam's localconfig.vdf

Only handles the ``apps`` section under
UserLocalConfigStore -> Software -> Valve -> Steam, which records when each
app (or mod, keyed ``"<appId>_<modId>"``) was last launched and how long it
was played locally.
"""

from __future__ import annotations

import logging
from pathlib import Path

from steamlibsync.core.app_state import GameID
from steamlibsync.core.game import ActivityRecord, epoch_to_datetime
from steamlibsync.core.keyvalue import load_file
from steamlibsync.core.steam_account_scanner import steam_id_64_to_account_id

logger = logging.getLogger("steamlibsync.localconfig")

__all__ = ["LocalConfigHelper"]

_APPS_PATH: tuple[str, ...] = ("Software", "Valve", "Steam", "apps")


class LocalConfigHelper:
    """Reads last-played data for one Steam account."""

    def __init__(self, steam_path: Path, steam_id_64: int):
        """Initialize the helper.

        Args:
            steam_path: Steam installation directory.
            steam_id_64: Account whose userdata folder is read.
        """
        self.steam_path = steam_path
        self.account_id = steam_id_64_to_account_id(steam_id_64)

    @property
    def config_path(self) -> Path:
        return self.steam_path / "userdata" / str(self.account_id) / "config" / "localconfig.vdf"

    def get_games_activity(self) -> dict[str, ActivityRecord]:
        """Collects activity for every app listed in localconfig.vdf.

        Empty app entries and malformed mod keys are skipped silently.
        Last-played values in 1970 or earlier are left out of the record.
        A missing file is not an error.

        Returns:
            Activity keyed by game id (packed id for mods).

        Raises:
            OSError: If the file exists but cannot be read.
            KeyValueParseError: If the file is malformed.
        """
        result: dict[str, ActivityRecord] = {}
        if not self.config_path.is_file():
            logger.debug("No localconfig.vdf for account %s", self.account_id)
            return result

        apps = load_file(self.config_path).get_path(*_APPS_PATH)
        for app in apps:
            if not app.has_children or not app.name:
                continue

            game_id = GameID.parse_activity_key(app.name)
            if game_id is None:
                logger.debug("Skipping malformed app key %r", app.name)
                continue

            result[str(game_id)] = ActivityRecord(
                last_played=epoch_to_datetime(app["LastPlayed"].as_int()),
                playtime_minutes=max(app["Playtime"].as_int(), 0),
            )

        return result

