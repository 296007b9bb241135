"""
Message catalog for log lines and user-facing sync errors.

``resources/i18n/*.json`` holds the log texts shared by every language,
``resources/i18n/<locale>/*.json`` the error messages a host shows after a
run. English is always loaded underneath the selected locale, so a key
missing from a translation still resolves.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from steamlibsync.utils.paths import get_resources_dir

__all__ = ["I18n", "init_i18n", "t"]

logger = logging.getLogger("steamlibsync.i18n")

FALLBACK_LOCALE = "en"


def _merge_into(target: dict[str, Any], source: dict[str, Any]) -> None:
    for key, value in source.items():
        if isinstance(value, dict) and isinstance(target.get(key), dict):
            _merge_into(target[key], value)
        else:
            target[key] = value


def _read_catalog_dir(directory: Path, into: dict[str, Any]) -> None:
    if not directory.is_dir():
        return
    for path in sorted(directory.glob("*.json")):
        try:
            with open(path, "r", encoding="utf-8") as f:
                _merge_into(into, json.load(f))
        except (OSError, json.JSONDecodeError) as e:
            logger.error("Skipping message catalog %s: %s", path.name, e)


class I18n:
    """Messages of one locale, keyed by dotted path (``errors.no_games_found``)."""

    def __init__(self, locale: str = FALLBACK_LOCALE) -> None:
        self.locale = locale
        root = get_resources_dir() / "i18n"

        self.messages: dict[str, Any] = {}
        _read_catalog_dir(root, self.messages)
        _read_catalog_dir(root / FALLBACK_LOCALE, self.messages)
        if locale != FALLBACK_LOCALE:
            _read_catalog_dir(root / locale, self.messages)

    def t(self, key: str, **kwargs: Any) -> str:
        """Looks up ``key`` and fills in ``kwargs``; ``[key]`` when unknown."""
        node: Any = self.messages
        for part in key.split("."):
            node = node.get(part) if isinstance(node, dict) else None
        if not isinstance(node, str):
            return f"[{key}]"
        if not kwargs:
            return node
        try:
            return node.format(**kwargs)
        except (KeyError, IndexError, ValueError):
            return node


_current: I18n | None = None


def init_i18n(locale: str = FALLBACK_LOCALE) -> I18n:
    """Selects the locale used by :func:`t`."""
    global _current
    _current = I18n(locale)
    return _current


def t(key: str, **kwargs: Any) -> str:
    """Translates ``key`` with the current locale, English until init_i18n() ran."""
    if _current is None:
        init_i18n()
    return _current.t(key, **kwargs)
