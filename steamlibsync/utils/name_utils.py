# steamlibsync/utils/name_utils.py

"""Game name cleanup shared by the installed scanner and the owned-library import."""

from __future__ import annotations

import re

__all__ = ["normalize_game_name", "remove_trademarks"]

_TRADEMARK_PATTERN = re.compile(r"[™©®]")
_WHITESPACE_PATTERN = re.compile(r"\s{2,}")


def remove_trademarks(name: str) -> str:
    """Strips ™, © and ® symbols from a name.

    Args:
        name: Raw display name.

    Returns:
        The name without trademark symbols (not trimmed).
    """
    return _TRADEMARK_PATTERN.sub("", name)


def normalize_game_name(name: str | None) -> str:
    """Returns the display form of a game name.

    Order: trademarks removed first, then runs of whitespace left behind
    are collapsed and the result is trimmed.

    Args:
        name: Raw name from a manifest, mod descriptor or API payload.

    Returns:
        Cleaned name, empty string for ``None``.
    """
    if not name:
        return ""
    return _WHITESPACE_PATTERN.sub(" ", remove_trademarks(name)).strip()
