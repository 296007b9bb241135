"""
Configuration - Windows & Linux Auto-Detection
Holds the Steam path, account credentials and the import toggles of a sync run.
"""

from __future__ import annotations

import json
import logging
import os
import platform
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from dotenv import find_dotenv, load_dotenv

from steamlibsync.core.errors import NotLoggedInError
from steamlibsync.core.steam_account import AccountContext, AuthMode
from steamlibsync.utils.i18n import t

logger = logging.getLogger("steamlibsync.config")


__all__ = ["AdditionalAccount", "Config", "default_settings_file"]


def default_settings_file() -> Path:
    """Per-user settings location (``~/.config/steamlibsync/settings.json``)."""
    base = os.getenv("XDG_CONFIG_HOME") or os.getenv("APPDATA") or str(Path.home() / ".config")
    return Path(base) / "steamlibsync" / "settings.json"


@dataclass
class AdditionalAccount:
    """An extra Steam account whose library is merged into the primary one.

    Attributes:
        ACCOUNT_ID: SteamID64 as entered by the user (validated at sync time).
        API_KEY: Web API key of that account.
        IMPORT_PLAYTIME: Whether its playtime is imported.
    """

    ACCOUNT_ID: str = ""
    API_KEY: str = ""
    IMPORT_PLAYTIME: bool = True

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AdditionalAccount:
        return cls(
            ACCOUNT_ID=str(data.get("account_id", "")),
            API_KEY=str(data.get("api_key", "")),
            IMPORT_PLAYTIME=bool(data.get("import_playtime", True)),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"account_id": self.ACCOUNT_ID, "api_key": self.API_KEY, "import_playtime": self.IMPORT_PLAYTIME}


@dataclass
class Config:
    """
    Central configuration for a library sync.
    Manages paths, account credentials and import toggles.
    """

    SETTINGS_FILE: Path = field(default_factory=default_settings_file)

    UI_LANGUAGE: str = "en"

    STEAM_PATH: Path | None = None
    MOD_INSTALL_PATH: Path | None = None
    SOURCE_MOD_INSTALL_PATH: Path | None = None

    # Account
    STEAM_USER_ID: str | None = None
    IS_PRIVATE_ACCOUNT: bool = False
    STEAM_API_KEY: str | None = None
    STEAM_ACCESS_TOKEN: str | None = None  # Runtime-only, NOT persisted to JSON

    # Import toggles
    IMPORT_INSTALLED_GAMES: bool = True
    IMPORT_INSTALLED_MODS: bool = True
    CONNECT_ACCOUNT: bool = False
    IMPORT_UNINSTALLED_GAMES: bool = False
    IMPORT_FAMILY_SHARED_GAMES: bool = False
    INCLUDE_FREE_SUB_GAMES: bool = False
    IGNORE_OTHER_INSTALLED: bool = False

    ADDITIONAL_ACCOUNTS: list[AdditionalAccount] = field(default_factory=list)

    @classmethod
    def load(cls, settings_file: Path | None = None, detect_paths: bool = True) -> Config:
        """Loads settings from JSON, then the environment, then auto-detection.

        Args:
            settings_file: Settings JSON path (defaults to the per-user file).
            detect_paths: Whether to auto-detect a missing Steam path.

        Returns:
            The configuration.
        """
        cfg = cls(SETTINGS_FILE=settings_file or default_settings_file())
        cfg._load_settings()

        load_dotenv(find_dotenv(usecwd=True))
        cfg.STEAM_API_KEY = cfg.STEAM_API_KEY or os.getenv("STEAM_API_KEY") or None
        cfg.STEAM_ACCESS_TOKEN = cfg.STEAM_ACCESS_TOKEN or os.getenv("STEAM_ACCESS_TOKEN") or None

        if detect_paths and not cfg.STEAM_PATH:
            cfg.STEAM_PATH = cls._find_steam_path()

        return cfg

    def _load_settings(self) -> None:
        """Load settings from JSON file."""
        if not self.SETTINGS_FILE.exists():
            return

        try:
            with open(self.SETTINGS_FILE, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(t("logs.config.load_error", error=e))
            return

        self.UI_LANGUAGE = data.get("ui_language", self.UI_LANGUAGE)

        for key, attr in (
            ("steam_path", "STEAM_PATH"),
            ("mod_install_path", "MOD_INSTALL_PATH"),
            ("source_mod_install_path", "SOURCE_MOD_INSTALL_PATH"),
        ):
            if data.get(key):
                setattr(self, attr, Path(data[key]))

        # SteamID64s are sometimes written as JSON numbers
        if data.get("steam_user_id"):
            self.STEAM_USER_ID = str(data["steam_user_id"])
        self.IS_PRIVATE_ACCOUNT = data.get("is_private_account", self.IS_PRIVATE_ACCOUNT)
        if data.get("steam_api_key"):
            self.STEAM_API_KEY = str(data["steam_api_key"])

        self.IMPORT_INSTALLED_GAMES = data.get("import_installed_games", self.IMPORT_INSTALLED_GAMES)
        self.IMPORT_INSTALLED_MODS = data.get("import_installed_mods", self.IMPORT_INSTALLED_MODS)
        self.CONNECT_ACCOUNT = data.get("connect_account", self.CONNECT_ACCOUNT)
        self.IMPORT_UNINSTALLED_GAMES = data.get("import_uninstalled_games", self.IMPORT_UNINSTALLED_GAMES)
        self.IMPORT_FAMILY_SHARED_GAMES = data.get("import_family_shared_games", self.IMPORT_FAMILY_SHARED_GAMES)
        self.INCLUDE_FREE_SUB_GAMES = data.get("include_free_sub_games", self.INCLUDE_FREE_SUB_GAMES)
        self.IGNORE_OTHER_INSTALLED = data.get("ignore_other_installed", self.IGNORE_OTHER_INSTALLED)

        self.ADDITIONAL_ACCOUNTS = [
            AdditionalAccount.from_dict(item) for item in data.get("additional_accounts", []) if isinstance(item, dict)
        ]

    def save(self) -> None:
        """Save current configuration to JSON file (the access token is never written)."""
        data = {
            "ui_language": self.UI_LANGUAGE,
            "steam_path": str(self.STEAM_PATH) if self.STEAM_PATH else "",
            "mod_install_path": str(self.MOD_INSTALL_PATH) if self.MOD_INSTALL_PATH else "",
            "source_mod_install_path": str(self.SOURCE_MOD_INSTALL_PATH) if self.SOURCE_MOD_INSTALL_PATH else "",
            "steam_user_id": self.STEAM_USER_ID,
            "is_private_account": self.IS_PRIVATE_ACCOUNT,
            "steam_api_key": self.STEAM_API_KEY,
            "import_installed_games": self.IMPORT_INSTALLED_GAMES,
            "import_installed_mods": self.IMPORT_INSTALLED_MODS,
            "connect_account": self.CONNECT_ACCOUNT,
            "import_uninstalled_games": self.IMPORT_UNINSTALLED_GAMES,
            "import_family_shared_games": self.IMPORT_FAMILY_SHARED_GAMES,
            "include_free_sub_games": self.INCLUDE_FREE_SUB_GAMES,
            "ignore_other_installed": self.IGNORE_OTHER_INSTALLED,
            "additional_accounts": [account.to_dict() for account in self.ADDITIONAL_ACCOUNTS],
        }

        try:
            self.SETTINGS_FILE.parent.mkdir(parents=True, exist_ok=True)
            with open(self.SETTINGS_FILE, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
        except OSError as e:
            logger.error(t("logs.config.save_error", error=e))

    @property
    def mod_install_path(self) -> Path | None:
        """GoldSrc mod folder, defaults to the Half-Life install."""
        if self.MOD_INSTALL_PATH:
            return self.MOD_INSTALL_PATH
        if self.STEAM_PATH:
            return self.STEAM_PATH / "steamapps" / "common" / "Half-Life"
        return None

    @property
    def source_mod_install_path(self) -> Path | None:
        """Source mod folder, defaults to steamapps/sourcemods."""
        if self.SOURCE_MOD_INSTALL_PATH:
            return self.SOURCE_MOD_INSTALL_PATH
        if self.STEAM_PATH:
            return self.STEAM_PATH / "steamapps" / "sourcemods"
        return None

    def primary_account(self) -> AccountContext:
        """Account context of the connected user.

        Raises:
            NotLoggedInError: If no valid user id is configured.
        """
        user_id = str(self.STEAM_USER_ID or "").strip()
        if not user_id.isdigit():
            raise NotLoggedInError()

        return AccountContext(
            steam_id=int(user_id),
            auth_mode=AuthMode.PRIVATE_API_KEY if self.IS_PRIVATE_ACCOUNT else AuthMode.PUBLIC_PROFILE,
            api_key=self.STEAM_API_KEY or "",
            access_token=self.STEAM_ACCESS_TOKEN or "",
            include_free_sub=self.INCLUDE_FREE_SUB_GAMES,
        )

    def family_account(self) -> AccountContext:
        """Context for the family shared library of the connected user."""
        primary = self.primary_account()
        return AccountContext(
            steam_id=primary.steam_id,
            auth_mode=AuthMode.FAMILY_TOKEN,
            access_token=primary.access_token,
        )

    def additional_account_contexts(self) -> list[AccountContext]:
        """Contexts for the additional accounts, invalid ids dropped with a log line."""
        contexts: list[AccountContext] = []
        for account in self.ADDITIONAL_ACCOUNTS:
            account_id = account.ACCOUNT_ID.strip()
            if not account_id.isdigit():
                logger.error(t("logs.config.invalid_account_id", account_id=account.ACCOUNT_ID))
                continue
            contexts.append(
                AccountContext(
                    steam_id=int(account_id),
                    auth_mode=AuthMode.PRIVATE_API_KEY,
                    api_key=account.API_KEY,
                    import_playtime=account.IMPORT_PLAYTIME,
                    include_free_sub=self.INCLUDE_FREE_SUB_GAMES,
                )
            )
        return contexts

    @staticmethod
    def _find_steam_path() -> Path | None:
        """Auto-detect Steam path on Linux and Windows."""
        system = platform.system()

        if system == "Windows":
            try:
                import winreg

                key = winreg.OpenKey(winreg.HKEY_CURRENT_USER, r"Software\Valve\Steam")
                path_str, _ = winreg.QueryValueEx(key, "SteamPath")
                path = Path(path_str)
                if path.exists():
                    return path
            except OSError:
                # Fallback to standard paths if registry fails
                common_paths = [Path(r"C:\Program Files (x86)\Steam"), Path(r"C:\Program Files\Steam")]
                for p in common_paths:
                    if p.exists():
                        return p

        else:
            paths = [
                Path.home() / ".steam" / "steam",
                Path.home() / ".local" / "share" / "Steam",
            ]
            for p in paths:
                if p.exists():
                    return p.resolve() if p.is_symlink() else p

        return None
