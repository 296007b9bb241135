"""Tests for Config loading, saving and account contexts."""

from __future__ import annotations

import json
import os
from pathlib import Path
from unittest.mock import patch

import pytest

from steamlibsync.config import AdditionalAccount, Config
from steamlibsync.core.errors import NotLoggedInError
from steamlibsync.core.steam_account import AuthMode


@pytest.fixture(autouse=True)
def no_env_secrets(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Keep real environment secrets and .env files out of the tests."""
    monkeypatch.delenv("STEAM_API_KEY", raising=False)
    monkeypatch.delenv("STEAM_ACCESS_TOKEN", raising=False)
    monkeypatch.chdir(tmp_path)


class TestLoadSave:
    """Tests for the settings file."""

    def test_round_trip_without_access_token(self, tmp_path: Path) -> None:
        """Saved settings load back; the access token is never written."""
        settings = tmp_path / "cfg" / "settings.json"
        config = Config(
            SETTINGS_FILE=settings,
            STEAM_PATH=tmp_path / "Steam",
            STEAM_USER_ID="76561197960287930",
            IS_PRIVATE_ACCOUNT=True,
            STEAM_API_KEY="key",
            STEAM_ACCESS_TOKEN="secret-token",
            IMPORT_FAMILY_SHARED_GAMES=True,
            ADDITIONAL_ACCOUNTS=[AdditionalAccount("76561198000000001", "key2", IMPORT_PLAYTIME=False)],
        )
        config.save()

        assert "secret-token" not in settings.read_text(encoding="utf-8")

        loaded = Config.load(settings, detect_paths=False)
        assert loaded.STEAM_PATH == tmp_path / "Steam"
        assert loaded.STEAM_USER_ID == "76561197960287930"
        assert loaded.IS_PRIVATE_ACCOUNT is True
        assert loaded.IMPORT_FAMILY_SHARED_GAMES is True
        assert loaded.STEAM_ACCESS_TOKEN is None
        assert loaded.ADDITIONAL_ACCOUNTS == [AdditionalAccount("76561198000000001", "key2", IMPORT_PLAYTIME=False)]

    def test_broken_settings_file_keeps_defaults(self, tmp_path: Path) -> None:
        """Invalid JSON is logged and ignored."""
        settings = tmp_path / "settings.json"
        settings.write_text("{not json", encoding="utf-8")
        config = Config.load(settings, detect_paths=False)
        assert config.IMPORT_INSTALLED_GAMES is True
        assert config.CONNECT_ACCOUNT is False

    def test_numeric_user_id_is_read_as_string(self, tmp_path: Path) -> None:
        """A SteamID64 written as a JSON number still yields an account."""
        settings = tmp_path / "settings.json"
        settings.write_text(json.dumps({"steam_user_id": 76561197960287930}), encoding="utf-8")

        config = Config.load(settings, detect_paths=False)

        assert config.STEAM_USER_ID == "76561197960287930"
        assert config.primary_account().steam_id == 76561197960287930

    def test_secrets_from_environment(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Empty settings are filled from STEAM_API_KEY / STEAM_ACCESS_TOKEN."""
        monkeypatch.setenv("STEAM_API_KEY", "env-key")
        monkeypatch.setenv("STEAM_ACCESS_TOKEN", "env-token")
        config = Config.load(tmp_path / "missing.json", detect_paths=False)
        assert config.STEAM_API_KEY == "env-key"
        assert config.STEAM_ACCESS_TOKEN == "env-token"

    def test_secrets_from_dotenv(self, tmp_path: Path) -> None:
        """A .env file in the working directory is read."""
        (tmp_path / ".env").write_text("STEAM_API_KEY=dotenv-key\n", encoding="utf-8")
        # load_dotenv writes into os.environ
        with patch.dict(os.environ):
            config = Config.load(tmp_path / "missing.json", detect_paths=False)
        assert config.STEAM_API_KEY == "dotenv-key"


class TestModPaths:
    """Tests for the default mod folders."""

    def test_defaults_under_steam(self, tmp_path: Path) -> None:
        """GoldSrc mods live in Half-Life, Source mods in sourcemods."""
        config = Config(SETTINGS_FILE=tmp_path / "s.json", STEAM_PATH=tmp_path)
        assert config.mod_install_path == tmp_path / "steamapps" / "common" / "Half-Life"
        assert config.source_mod_install_path == tmp_path / "steamapps" / "sourcemods"

    def test_explicit_paths_win(self, tmp_path: Path) -> None:
        """Configured folders override the defaults."""
        config = Config(SETTINGS_FILE=tmp_path / "s.json", STEAM_PATH=tmp_path, MOD_INSTALL_PATH=tmp_path / "hl")
        assert config.mod_install_path == tmp_path / "hl"

    def test_no_steam_path(self, tmp_path: Path) -> None:
        """Without Steam there is no default."""
        assert Config(SETTINGS_FILE=tmp_path / "s.json").source_mod_install_path is None


class TestAccountContexts:
    """Tests for deriving account contexts."""

    def test_primary_private(self, tmp_path: Path) -> None:
        """Private accounts use the API key."""
        config = Config(
            SETTINGS_FILE=tmp_path / "s.json",
            STEAM_USER_ID="76561197960287930",
            IS_PRIVATE_ACCOUNT=True,
            STEAM_API_KEY="key",
            INCLUDE_FREE_SUB_GAMES=True,
        )
        account = config.primary_account()
        assert account.auth_mode is AuthMode.PRIVATE_API_KEY
        assert account.api_key == "key"
        assert account.include_free_sub is True

    def test_primary_public_and_family(self, tmp_path: Path) -> None:
        """Public accounts scrape; the family context carries the token."""
        config = Config(SETTINGS_FILE=tmp_path / "s.json", STEAM_USER_ID="1", STEAM_ACCESS_TOKEN="tok")
        assert config.primary_account().auth_mode is AuthMode.PUBLIC_PROFILE
        family = config.family_account()
        assert family.auth_mode is AuthMode.FAMILY_TOKEN
        assert family.access_token == "tok"

    @pytest.mark.parametrize("user_id", [None, "", "abc"])
    def test_not_logged_in(self, tmp_path: Path, user_id: str | None) -> None:
        """Missing or invalid user ids raise NotLoggedInError."""
        with pytest.raises(NotLoggedInError):
            Config(SETTINGS_FILE=tmp_path / "s.json", STEAM_USER_ID=user_id).primary_account()

    def test_additional_accounts(self, tmp_path: Path) -> None:
        """Invalid ids are dropped, the rest keep their own playtime toggle."""
        config = Config(
            SETTINGS_FILE=tmp_path / "s.json",
            ADDITIONAL_ACCOUNTS=[
                AdditionalAccount("bad id", "k0"),
                AdditionalAccount(" 76561198000000001 ", "k1", IMPORT_PLAYTIME=False),
            ],
        )
        (account,) = config.additional_account_contexts()
        assert account.steam_id == 76561198000000001
        assert account.auth_mode is AuthMode.PRIVATE_API_KEY
        assert account.import_playtime is False
