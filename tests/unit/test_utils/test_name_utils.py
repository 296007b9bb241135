"""Tests for game name cleanup."""

from __future__ import annotations

import pytest

from steamlibsync.utils.name_utils import normalize_game_name, remove_trademarks


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("Team Fortress™ 2", "Team Fortress 2"),
        ("  DOOM®  ", "DOOM"),
        ("Half-Life © Valve", "Half-Life Valve"),
        ("Plain", "Plain"),
        ("™", ""),
        (None, ""),
    ],
)
def test_normalize_game_name(raw: str | None, expected: str) -> None:
    """Trademarks stripped, whitespace collapsed and trimmed."""
    assert normalize_game_name(raw) == expected


def test_remove_trademarks_keeps_spacing() -> None:
    """remove_trademarks() only removes the symbols."""
    assert remove_trademarks(" A™ ") == " A "
