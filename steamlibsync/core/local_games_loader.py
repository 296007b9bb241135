# steamlibsync/core/local_games_loader.py

"""
Scans local Steam library folders to find installed games.

This module reads Steam's appmanifest_*.acf files across all library roots
and checks the GoldSrc/Source mod folders. Scanning is best effort per unit:
a broken manifest or mod folder is logged and skipped, the rest of the tree
is still scanned.
"""

from __future__ import annotations

import logging
from pathlib import Path

from steamlibsync.core.app_state import AppStateFlags, GameID, parse_state_flags
from steamlibsync.core.errors import SteamNotInstalledError
from steamlibsync.core.game import PC_PLATFORM, SOURCE_STEAM, GameRecord, ModRecord
from steamlibsync.core.keyvalue import KeyValueParseError, load_file
from steamlibsync.core.library_folders import get_library_folders
from steamlibsync.core.mod_info import ModDescriptorError, ModType, read_mod_info
from steamlibsync.utils.i18n import t
from steamlibsync.utils.name_utils import normalize_game_name

logger = logging.getLogger("steamlibsync.local_loader")

__all__ = ["FIRST_PARTY_MOD_PREFIXES", "REDIST_APP_ID", "LocalGamesLoader"]

# Steamworks Common Redistributables, installed alongside most games
REDIST_APP_ID = "228980"

# Valve's own GoldSrc games live next to third-party mods in the Half-Life folder
FIRST_PARTY_MOD_PREFIXES: tuple[str, ...] = (
    "bshift",
    "cstrike",
    "czero",
    "dmc",
    "dod",
    "gearbox",
    "ricochet",
    "tfc",
    "valve",
)

_MANIFEST_GLOB = "appmanifest_*"
_TEMP_SUFFIX = "tmp"


class LocalGamesLoader:
    """
    Loads installed games from local Steam files without requiring API access.

    Attributes:
        steam_path: Primary Steam installation directory.
        mod_install_path: GoldSrc mod folder (usually the Half-Life install).
        source_mod_install_path: Source mod folder (steamapps/sourcemods).
    """

    def __init__(
        self,
        steam_path: Path,
        mod_install_path: Path | None = None,
        source_mod_install_path: Path | None = None,
    ):
        self.steam_path = steam_path
        self.mod_install_path = mod_install_path
        self.source_mod_install_path = source_mod_install_path

    def get_installed_games(self, include_mods: bool = True) -> dict[str, GameRecord]:
        """
        Scans every library root (and optionally the mod folders).

        Args:
            include_mods: Whether GoldSrc/Source mods are scanned too.

        Returns:
            Installed games keyed by game id, first occurrence wins.

        Raises:
            SteamNotInstalledError: If the Steam installation directory is missing.
        """
        if not self.steam_path or not self.steam_path.is_dir():
            raise SteamNotInstalledError()

        games: dict[str, GameRecord] = {}

        library_folders = get_library_folders(self.steam_path)
        logger.info(t("logs.local_loader.scanning_libraries", count=len(library_folders)))

        for folder in library_folders:
            steamapps = folder / "steamapps"
            if not steamapps.is_dir():
                logger.warning(t("logs.local_loader.library_missing", path=steamapps))
                continue

            for game in self.get_installed_games_from_folder(steamapps):
                if game.game_id == REDIST_APP_ID:
                    continue
                games.setdefault(game.game_id, game)

        if include_mods:
            try:
                for mod in self.get_installed_mods():
                    games.setdefault(mod.game_id, mod)
            except OSError as e:
                logger.error(t("logs.local_loader.mods_failed", error=e))

        logger.info(t("logs.local_loader.loaded_total", count=len(games)))
        return games

    def get_installed_games_from_folder(self, steamapps: Path) -> list[GameRecord]:
        """
        Parses all appmanifest files of one steamapps folder.

        Args:
            steamapps: A library's steamapps directory.

        Returns:
            Fully installed games with a resolvable install directory.
        """
        games: list[GameRecord] = []

        for manifest in sorted(steamapps.glob(_MANIFEST_GLOB)):
            if manifest.name.lower().endswith(_TEMP_SUFFIX) or not manifest.is_file():
                continue

            try:
                game = self.parse_manifest(manifest)
            except (OSError, KeyValueParseError) as e:
                # Steam can leave invalid or half-written acf files behind
                logger.error(t("logs.local_loader.manifest_error", path=manifest, error=e))
                continue

            if game is None:
                continue

            if not game.install_directory or (steamapps / "music") in Path(game.install_directory).parents:
                logger.info(t("logs.local_loader.not_installed_or_soundtrack", name=game.name))
                continue

            games.append(game)

        return games

    @staticmethod
    def parse_manifest(manifest_path: Path) -> GameRecord | None:
        """
        Parses a single appmanifest_*.acf file.

        The install directory is looked up under ``common/`` first, then
        ``music/``; it stays empty when neither exists.

        Args:
            manifest_path: Path to the appmanifest file.

        Returns:
            The game, or ``None`` when it is not fully installed.

        Raises:
            OSError: If the file cannot be read.
            KeyValueParseError: If the file is malformed.
        """
        kv = load_file(manifest_path)

        state = parse_state_flags(kv["StateFlags"].value)
        if state is None or not state.has_all(AppStateFlags.FULLY_INSTALLED):
            return None

        raw_name = kv["name"].as_str()
        if not raw_name:
            raw_name = kv["UserConfig"]["name"].as_str()

        app_id = kv["appid"].as_int(-1)
        if app_id < 0:
            raise KeyValueParseError(f"{manifest_path.name}: missing appid")

        install_dir = ""
        dir_name = kv["installdir"].as_str()
        if dir_name:
            for subfolder in ("common", "music"):
                candidate = manifest_path.parent / subfolder / dir_name
                if candidate.is_dir():
                    install_dir = str(candidate)
                    break

        return GameRecord(
            source=SOURCE_STEAM,
            game_id=str(GameID.for_app(app_id)),
            name=normalize_game_name(raw_name),
            install_directory=install_dir,
            is_installed=True,
            platform=PC_PLATFORM,
        )

    def get_installed_mods(self) -> list[GameRecord]:
        """Scans the GoldSrc and Source mod folders that exist."""
        mods: list[GameRecord] = []

        if self.mod_install_path and self.mod_install_path.is_dir():
            mods.extend(self.get_installed_goldsrc_mods(self.mod_install_path))

        if self.source_mod_install_path and self.source_mod_install_path.is_dir():
            mods.extend(self.get_installed_source_mods(self.source_mod_install_path))

        return mods

    def get_installed_goldsrc_mods(self, path: Path) -> list[GameRecord]:
        """GoldSrc mods, skipping Valve's own game folders (case-sensitive prefix)."""
        folders = [
            folder
            for folder in sorted(path.iterdir())
            if folder.is_dir() and not folder.name.startswith(FIRST_PARTY_MOD_PREFIXES)
        ]
        return self._read_mod_folders(folders, ModType.GOLDSRC)

    def get_installed_source_mods(self, path: Path) -> list[GameRecord]:
        """Source mods, every subfolder is a candidate."""
        folders = [folder for folder in sorted(path.iterdir()) if folder.is_dir()]
        return self._read_mod_folders(folders, ModType.SOURCE)

    def _read_mod_folders(self, folders: list[Path], mod_type: ModType) -> list[GameRecord]:
        games: list[GameRecord] = []
        for folder in folders:
            try:
                mod = read_mod_info(folder, mod_type)
            except (OSError, ModDescriptorError) as e:
                logger.error(t("logs.local_loader.mod_error", path=folder, error=e))
                continue

            if mod is None:
                logger.debug("No %s in %s, not a mod folder", mod_type.value, folder)
                continue

            games.append(self._mod_to_game(mod))
        return games

    @staticmethod
    def _mod_to_game(mod: ModRecord) -> GameRecord:
        return GameRecord(
            source=SOURCE_STEAM,
            game_id=mod.game_id,
            name=normalize_game_name(mod.name),
            install_directory=str(mod.install_directory),
            is_installed=True,
            platform=PC_PLATFORM,
            is_mod=True,
            developers=[mod.developer] if mod.developer else [],
            tags=list(mod.categories),
            links=list(mod.links),
            icon_path=str(mod.icon_path) if mod.icon_path else "",
        )
