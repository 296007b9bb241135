# steamlibsync/core/library_folders.py

"""
Resolves the Steam library roots that may contain installed games.

The primary installation is always a root. Additional roots come from
steamapps/libraryfolders.vdf, which exists in two shapes:

    legacy:  "LibraryFolders" { "1" "D:\\SteamLibrary" }
    modern:  "libraryfolders" { "0" { "path" "D:\\SteamLibrary" ... } }

Non-numeric children (``TimeNextStatsReport``, ``contentstatsid``) are ignored.
"""

from __future__ import annotations

import logging
from pathlib import Path

from steamlibsync.core.keyvalue import KeyValueNode, KeyValueParseError, load_file
from steamlibsync.utils.i18n import t

logger = logging.getLogger("steamlibsync.library_folders")

__all__ = ["get_library_folders", "parse_library_folders"]


def parse_library_folders(folders_data: KeyValueNode) -> list[str]:
    """Extracts folder paths from a parsed libraryfolders.vdf root.

    Args:
        folders_data: Root node of the registry file.

    Returns:
        Paths in file order, legacy and modern entries alike.
    """
    paths: list[str] = []
    for child in folders_data:
        if not child.name or not child.name.isdigit():
            continue

        if child.value:
            paths.append(child.value)
        elif child.has_children:
            path = child["path"].as_str()
            if path:
                paths.append(path)

    return paths


def get_library_folders(steam_path: Path) -> list[Path]:
    """Returns the primary path plus every existing registry path.

    Registry entries pointing at missing directories are dropped with a
    warning. Duplicates are collapsed case-insensitively.

    Args:
        steam_path: Primary Steam installation directory.

    Returns:
        Library roots (each expected to hold a ``steamapps`` folder).
    """
    folders: dict[str, Path] = {str(steam_path).casefold(): steam_path}

    registry = steam_path / "steamapps" / "libraryfolders.vdf"
    if not registry.is_file():
        logger.info(t("logs.library_folders.no_registry", path=registry))
        return list(folders.values())

    try:
        folders_data = load_file(registry)
    except (OSError, KeyValueParseError) as e:
        logger.error(t("logs.library_folders.registry_error", error=e))
        return list(folders.values())

    for raw_path in parse_library_folders(folders_data):
        path = Path(raw_path)
        if not path.is_dir():
            logger.warning(t("logs.library_folders.path_not_exists", path=raw_path))
            continue
        folders.setdefault(str(path).casefold(), path)

    return list(folders.values())
