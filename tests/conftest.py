# tests/conftest.py
from pathlib import Path
from typing import Callable
from unittest.mock import MagicMock

import pytest
import requests

from steamlibsync.utils.i18n import init_i18n

# A fully installed Steam app
FULLY_INSTALLED = 4


@pytest.fixture(autouse=True)
def english_i18n():
    """Every test sees the English messages."""
    init_i18n("en")


@pytest.fixture
def steam_root(tmp_path: Path) -> Path:
    """Empty Steam installation with a steamapps/common folder."""
    root = tmp_path / "Steam"
    (root / "steamapps" / "common").mkdir(parents=True)
    return root


@pytest.fixture
def make_manifest() -> Callable[..., Path]:
    """Factory writing appmanifest_<id>.acf files into a steamapps folder."""

    def _make(
        steamapps: Path,
        app_id: int,
        name: str,
        install_dir: str,
        state_flags: int = FULLY_INSTALLED,
        subfolder: str | None = "common",
    ) -> Path:
        steamapps.mkdir(parents=True, exist_ok=True)
        if subfolder:
            (steamapps / subfolder / install_dir).mkdir(parents=True, exist_ok=True)
        manifest = steamapps / f"appmanifest_{app_id}.acf"
        manifest.write_text(
            f'"AppState"\n{{\n\t"appid"\t\t"{app_id}"\n\t"name"\t\t"{name}"\n'
            f'\t"StateFlags"\t\t"{state_flags}"\n\t"installdir"\t\t"{install_dir}"\n}}\n',
            encoding="utf-8",
        )
        return manifest

    return _make


@pytest.fixture
def make_response() -> Callable[..., MagicMock]:
    """Factory for fake ``requests`` responses."""

    def _make(status_code: int = 200, json_data=None, content: bytes = b"") -> MagicMock:
        response = MagicMock()
        response.status_code = status_code
        response.json.return_value = json_data
        response.content = content
        if status_code >= 400:
            response.raise_for_status.side_effect = requests.HTTPError(f"HTTP {status_code}")
        else:
            response.raise_for_status = MagicMock()
        return response

    return _make
