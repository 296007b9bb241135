# steamlibsync/core/mod_info.py

"""
Reads GoldSrc and Source mod descriptors.

GoldSrc mods (Half-Life engine) describe themselves in ``liblist.gam``, a flat
``key "value"`` file; Source mods in ``gameinfo.txt``, a KeyValues document
rooted at ``GameInfo``. Both expose the same handful of fields.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from steamlibsync.core.app_state import GameID
from steamlibsync.core.game import GameLink, ModRecord
from steamlibsync.core.keyvalue import KeyValueNode, KeyValueParseError, load_file, parse_document

__all__ = ["ModDescriptorError", "ModType", "read_mod_info"]


class ModType(Enum):
    """Mod engine family, valued by descriptor file name."""

    GOLDSRC = "liblist.gam"
    SOURCE = "gameinfo.txt"

    @property
    def base_app_id(self) -> int:
        """App the mod is launched through (Half-Life or Source SDK Base 2006)."""
        return 70 if self is ModType.GOLDSRC else 215


class ModDescriptorError(ValueError):
    """Descriptor present but unusable (unparsable or nameless)."""


_SINGLE_PLAYER = "Single-Player"
_MULTI_PLAYER = "Multi-Player"


def _read_descriptor(path: Path, mod_type: ModType) -> KeyValueNode:
    if mod_type is ModType.GOLDSRC:
        with open(path, "r", encoding="utf-8-sig", errors="replace") as f:
            return parse_document(f.read())
    return load_file(path)


def _categories(mod_kind: str) -> tuple[str, ...]:
    mod_kind = mod_kind.strip().lower()
    if mod_kind == "singleplayer_only":
        return (_SINGLE_PLAYER,)
    if mod_kind == "multiplayer_only":
        return (_MULTI_PLAYER,)
    return (_SINGLE_PLAYER, _MULTI_PLAYER)


def read_mod_info(folder: Path, mod_type: ModType) -> ModRecord | None:
    """Reads the descriptor of one mod folder.

    Args:
        folder: Mod directory.
        mod_type: Which descriptor layout to expect.

    Returns:
        The mod, or ``None`` when the folder has no descriptor file.

    Raises:
        ModDescriptorError: If the descriptor is malformed or has no name.
        OSError: If the descriptor cannot be read.
    """
    descriptor = folder / mod_type.value
    if not descriptor.is_file():
        return None

    try:
        kv = _read_descriptor(descriptor, mod_type)
    except KeyValueParseError as e:
        raise ModDescriptorError(f"{descriptor}: {e}") from e

    name = kv["game"].as_str().strip()
    if not name:
        raise ModDescriptorError(f"{descriptor}: missing game name")

    links: list[GameLink] = []
    homepage = kv["developer_url"].as_str().strip()
    if homepage:
        links.append(GameLink("Homepage", homepage))
    manual = kv["manual"].as_str().strip()
    if manual:
        links.append(GameLink("Manual", manual))

    icon_path: Path | None = None
    icon = kv["icon"].as_str().strip()
    if icon:
        candidate = folder / f"{icon}.tga"
        if candidate.is_file():
            icon_path = candidate

    return ModRecord(
        game_id=str(GameID.for_mod_folder(mod_type.base_app_id, folder.name)),
        name=name,
        developer=kv["developer"].as_str().strip(),
        install_directory=folder,
        icon_path=icon_path,
        categories=_categories(kv["type"].as_str()),
        links=tuple(links),
    )
