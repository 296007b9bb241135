"""Service reconciling installed and owned Steam games into one library.

This module provides the LibrarySyncService class which runs one import:
scan the installed games, fetch the owned libraries of every connected
account, enrich them with local activity and merge the lot so every game
appears exactly once.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from steamlibsync.config import Config
from steamlibsync.core.errors import StageResult
from steamlibsync.core.game import (
    PC_PLATFORM,
    SOURCE_STEAM,
    SOURCE_STEAM_FAMILY,
    ActivityRecord,
    GameRecord,
    OwnedGameEntry,
    epoch_to_datetime,
)
from steamlibsync.core.keyvalue import KeyValueParseError
from steamlibsync.core.local_games_loader import LocalGamesLoader
from steamlibsync.core.localconfig_helper import LocalConfigHelper
from steamlibsync.core.steam_account import AccountContext, AuthMode
from steamlibsync.integrations.family_sharing import FamilySharingClient
from steamlibsync.integrations.steam_profile_scraper import SteamProfileScraper
from steamlibsync.integrations.steam_web_api import SteamWebAPI
from steamlibsync.utils.i18n import t
from steamlibsync.utils.name_utils import normalize_game_name

logger = logging.getLogger("steamlibsync.sync_service")

__all__ = ["LibrarySyncService", "ReconciliationResult"]

# Family library app types from 3 upward are tools, videos and the like
_MAX_APP_TYPE = 3


@dataclass
class ReconciliationResult:
    """Outcome of one reconciliation run.

    Attributes:
        games: Merged library, installed games first.
        errors: Every stage failure, in the order they happened.
    """

    games: list[GameRecord] = field(default_factory=list)
    errors: list[Exception] = field(default_factory=list)

    @property
    def error(self) -> Exception | None:
        """The last failure of the run, which is what gets surfaced to the user."""
        return self.errors[-1] if self.errors else None


class LibrarySyncService:
    """Runs library reconciliations for one configuration.

    Attributes:
        config: Paths, accounts and import toggles.
        profile_scraper: Reader used for public-mode accounts.
    """

    def __init__(self, config: Config, profile_scraper: SteamProfileScraper | None = None):
        """Initializes the LibrarySyncService.

        Args:
            config: Configuration of the run.
            profile_scraper: Optional scraper instance, one is created lazily.
        """
        self.config = config
        self.profile_scraper = profile_scraper

    def get_games(self) -> ReconciliationResult:
        """Runs one full reconciliation.

        Each stage (installed scan, primary account, family library, every
        additional account) fails on its own; its error is recorded and the
        run continues with the games the other stages found.

        Returns:
            The merged games and the collected errors.
        """
        cfg = self.config
        result = ReconciliationResult()

        installed: dict[str, GameRecord] = {}
        if cfg.IMPORT_INSTALLED_GAMES:
            stage = StageResult.capture("installed", self.get_installed_games)
            if stage.ok:
                installed = stage.value
            else:
                result.errors.append(stage.error)

        library: dict[str, GameRecord] = {}
        primary_ok = False
        if cfg.CONNECT_ACCOUNT:
            stage = StageResult.capture("library", self.get_account_games)
            if stage.ok:
                primary_ok = True
                self._merge_new(library, stage.value)
            else:
                result.errors.append(stage.error)

            if cfg.IMPORT_FAMILY_SHARED_GAMES:
                stage = StageResult.capture("family", self.get_family_shared_games)
                if stage.ok:
                    self._merge_new(library, stage.value)
                else:
                    result.errors.append(stage.error)

            for account in cfg.additional_account_contexts():
                stage = StageResult.capture(f"account {account.steam_id}", self.get_library_games, account)
                if stage.ok:
                    self._merge_new(library, stage.value)
                else:
                    result.errors.append(stage.error)

            # Without a primary library every installed game would look foreign
            if cfg.IGNORE_OTHER_INSTALLED and cfg.ADDITIONAL_ACCOUNTS and primary_ok:
                installed = self.remove_other_installed(installed, library)

            if not cfg.IMPORT_UNINSTALLED_GAMES:
                library = {game_id: game for game_id, game in library.items() if game_id in installed}

        result.games = self.merge(installed, library)

        if result.error is not None:
            logger.error(t("logs.sync.import_error", error=result.error))
        logger.info(t("logs.sync.finished", count=len(result.games), errors=len(result.errors)))
        return result

    def get_installed_games(self) -> dict[str, GameRecord]:
        """Scans the local Steam installation (and the mod folders if enabled)."""
        cfg = self.config
        loader = LocalGamesLoader(cfg.STEAM_PATH, cfg.mod_install_path, cfg.source_mod_install_path)
        return loader.get_installed_games(include_mods=cfg.IMPORT_INSTALLED_MODS)

    def get_account_games(self) -> list[GameRecord]:
        """Owned games of the connected account, private or public mode."""
        return self.get_library_games(self.config.primary_account())

    def get_library_games(self, account: AccountContext) -> list[GameRecord]:
        """Fetches and normalizes the owned games of one account.

        Args:
            account: The account, its auth mode selects the fetcher.

        Returns:
            Normalized games.
        """
        if account.auth_mode is AuthMode.PUBLIC_PROFILE:
            if self.profile_scraper is None:
                self.profile_scraper = SteamProfileScraper()
            entries = self.profile_scraper.fetch_games(account.steam_id)
        else:
            entries = SteamWebAPI(account.api_key).get_owned_games(account.steam_id, account.include_free_sub)

        return self.build_library_games(account, entries)

    def get_family_shared_games(self) -> list[GameRecord]:
        """Games shared with the connected account through Steam Families."""
        account = self.config.family_account()
        client = FamilySharingClient(account.access_token)
        entries = client.get_shared_games(account.steam_id)
        return self.build_library_games(account, entries, source=SOURCE_STEAM_FAMILY)

    def build_library_games(
        self,
        account: AccountContext,
        entries: list[OwnedGameEntry],
        source: str = SOURCE_STEAM,
    ) -> list[GameRecord]:
        """Filters owned entries and turns them into game records.

        Entries without a name and family entries with ``app_type >= 3`` are
        dropped. With playtime import on, remote minutes become seconds and
        the local activity of the account fills the gaps: last activity only
        for games with playtime, local playtime only where the remote value
        is zero.

        Args:
            account: Owner of the entries.
            entries: Raw owned entries.
            source: Source tag of the produced records.

        Returns:
            Games in entry order.
        """
        activity = self.get_activity(account) if account.import_playtime else {}

        games: list[GameRecord] = []
        for entry in entries:
            name = normalize_game_name(entry.name)
            if not name:
                logger.debug("Skipping app %s without a name", entry.app_id)
                continue
            if entry.app_type >= _MAX_APP_TYPE:
                continue

            game = GameRecord(
                source=source,
                game_id=str(entry.app_id),
                name=name,
                platform=PC_PLATFORM,
                sorting_name=entry.sort_as,
            )

            if account.import_playtime:
                local = activity.get(game.game_id)
                game.playtime = entry.playtime_forever * 60
                if game.playtime == 0 and local is not None:
                    game.playtime = local.playtime_minutes * 60
                game.last_activity = epoch_to_datetime(entry.rtime_last_played)
                if game.playtime > 0 and local is not None and local.last_played is not None:
                    game.last_activity = local.last_played

            games.append(game)

        return games

    def get_activity(self, account: AccountContext) -> dict[str, ActivityRecord]:
        """Local activity of one account, empty when it cannot be read.

        Args:
            account: The account whose localconfig.vdf is read.

        Returns:
            Activity keyed by game id.
        """
        if not self.config.STEAM_PATH:
            return {}

        helper = LocalConfigHelper(Path(self.config.STEAM_PATH), account.steam_id)
        try:
            return helper.get_games_activity()
        except (OSError, KeyValueParseError) as e:
            logger.warning(t("logs.sync.activity_error", path=helper.config_path, error=e))
            return {}

    @staticmethod
    def remove_other_installed(installed: dict[str, GameRecord], library: dict[str, GameRecord]) -> dict[str, GameRecord]:
        """Drops installed games none of the accounts own. Mods always stay."""
        kept: dict[str, GameRecord] = {}
        for game_id, game in installed.items():
            if game.is_mod or game_id in library:
                kept[game_id] = game
            else:
                logger.debug("Ignoring %s, not owned by any account", game.name)
        return kept

    @staticmethod
    def merge(installed: dict[str, GameRecord], library: dict[str, GameRecord]) -> list[GameRecord]:
        """Merges owned games into the installed ones.

        An owned game that is installed only copies its playtime and last
        activity onto the installed record; every other owned game is
        appended.

        Args:
            installed: Installed games keyed by id.
            library: Owned games keyed by id.

        Returns:
            Installed games first, then the owned-only games.
        """
        merged = list(installed.values())
        for game_id, game in library.items():
            installed_game = installed.get(game_id)
            if installed_game is None:
                merged.append(game)
                continue
            installed_game.playtime = game.playtime
            installed_game.last_activity = game.last_activity
        return merged

    @staticmethod
    def _merge_new(library: dict[str, GameRecord], games: list[GameRecord]) -> None:
        # First account to report a game owns the record
        for game in games:
            library.setdefault(game.game_id, game)
