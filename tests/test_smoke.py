"""Smoke tests – verify all modules are importable and free of syntax errors.

This is an infrastructure test (not a unit test), so it lives in the tests
root rather than under ``tests/unit/``.
"""

from __future__ import annotations

import importlib
import json
import subprocess
import sys

import pytest

from steamlibsync.utils.paths import get_resources_dir

# ---------------------------------------------------------------------------
# Module lists
# ---------------------------------------------------------------------------

CORE_MODULES: list[str] = [
    "steamlibsync.core.app_state",
    "steamlibsync.core.errors",
    "steamlibsync.core.game",
    "steamlibsync.core.keyvalue",
    "steamlibsync.core.library_folders",
    "steamlibsync.core.local_games_loader",
    "steamlibsync.core.localconfig_helper",
    "steamlibsync.core.logging",
    "steamlibsync.core.mod_info",
    "steamlibsync.core.steam_account",
    "steamlibsync.core.steam_account_scanner",
]

INTEGRATION_MODULES: list[str] = [
    "steamlibsync.integrations.family_sharing",
    "steamlibsync.integrations.steam_profile_scraper",
    "steamlibsync.integrations.steam_web_api",
]

SERVICE_MODULES: list[str] = [
    "steamlibsync.services.library_sync_service",
]

UTILS_MODULES: list[str] = [
    "steamlibsync.utils.i18n",
    "steamlibsync.utils.name_utils",
    "steamlibsync.utils.paths",
]

TOP_LEVEL_MODULES: list[str] = [
    "steamlibsync.config",
    "steamlibsync.main",
    "steamlibsync.version",
]

ALL_MODULES = CORE_MODULES + INTEGRATION_MODULES + SERVICE_MODULES + UTILS_MODULES + TOP_LEVEL_MODULES


@pytest.mark.parametrize("module_path", ALL_MODULES)
def test_import_modules(module_path: str) -> None:
    """Module must be importable without errors."""
    importlib.import_module(module_path)


def test_no_circular_imports() -> None:
    """All modules can be imported in a fresh subprocess without cycles."""
    import_lines = "; ".join(f"import {m}" for m in ALL_MODULES)
    result = subprocess.run(
        [sys.executable, "-c", import_lines],
        capture_output=True,
        text=True,
        timeout=30,
    )
    assert result.returncode == 0, f"Circular import detected:\nstderr: {result.stderr}"


# ---------------------------------------------------------------------------
# i18n smoke tests
# ---------------------------------------------------------------------------


def test_i18n_loads() -> None:
    """The t() function returns a real translation for a known key."""
    from steamlibsync.utils.i18n import init_i18n, t

    init_i18n("en")
    result = t("errors.api_unreachable")
    assert result
    assert result != "[errors.api_unreachable]"


def test_i18n_missing_key_returns_marker() -> None:
    """Unknown keys come back as '[key]' instead of raising."""
    from steamlibsync.utils.i18n import t

    assert t("logs.does.not_exist") == "[logs.does.not_exist]"


def test_i18n_unknown_locale_falls_back_to_english() -> None:
    """A locale without files still resolves English messages."""
    from steamlibsync.utils.i18n import I18n

    i18n = I18n("xx")
    assert i18n.t("errors.no_family_group") != "[errors.no_family_group]"


def test_i18n_files_are_valid_json() -> None:
    """Every shipped translation file parses."""
    files = list((get_resources_dir() / "i18n").rglob("*.json"))
    assert files
    for path in files:
        with open(path, encoding="utf-8") as f:
            assert isinstance(json.load(f), dict), path.name
