# steamlibsync/core/app_state.py

"""App state bitmask and 64-bit game identifiers.

``StateFlags`` in appmanifest_*.acf is a bitmask whose bit positions are
fixed by the Steam client, so the values below must not be renumbered.

Game ids follow the Steam client layout: the low 24 bits hold the app id,
bits 24-31 the game type and the high 32 bits the mod id. Plain apps
therefore print as their app id ("440"), mods as one large decimal number.
"""

from __future__ import annotations

import zlib
from dataclasses import dataclass
from enum import IntEnum, IntFlag

__all__ = ["AppStateFlags", "GameID", "GameType", "parse_state_flags"]


class AppStateFlags(IntFlag):
    """Installation state bits of an app manifest."""

    INVALID = 0
    UNINSTALLED = 1
    UPDATE_REQUIRED = 2
    FULLY_INSTALLED = 4
    ENCRYPTED = 8
    LOCKED = 16
    FILES_MISSING = 32
    APP_RUNNING = 64
    FILES_CORRUPT = 128
    UPDATE_RUNNING = 256
    UPDATE_PAUSED = 512
    UPDATE_STARTED = 1024
    UNINSTALLING = 2048
    BACKUP_RUNNING = 4096
    RECONFIGURING = 65536
    VALIDATING = 131072
    ADDING_FILES = 262144
    PREALLOCATING = 524288
    DOWNLOADING = 1048576
    STAGING = 2097152
    COMMITTING = 4194304
    UPDATE_STOPPING = 8388608

    def has_all(self, flags: AppStateFlags) -> bool:
        """True when every bit of ``flags`` is set."""
        return (self & flags) == flags


def parse_state_flags(raw: str | None) -> AppStateFlags | None:
    """Parses the raw ``StateFlags`` string of a manifest.

    Args:
        raw: Decimal bitmask as stored in the manifest.

    Returns:
        The flags, or ``None`` when the field is absent or not a number.
    """
    if raw is None or not raw.strip():
        return None
    try:
        value = int(raw.strip())
    except ValueError:
        return None
    if value < 0:
        return None
    # Unknown high bits are kept as-is, IntFlag accepts them.
    return AppStateFlags(value)


class GameType(IntEnum):
    APP = 0
    GAME_MOD = 1
    SHORTCUT = 2
    P2P = 3


_APP_ID_MASK = 0xFFFFFF
_MOD_ID_HIGH_BIT = 0x80000000


@dataclass(frozen=True)
class GameID:
    """Tagged game identifier: a plain app id or an (app id, mod id) pair.

    Attributes:
        app_id: Steam application id (24 bits).
        mod_id: Mod id for ``GAME_MOD`` ids, 0 otherwise.
        game_type: Kind of id.
    """

    app_id: int
    mod_id: int = 0
    game_type: GameType = GameType.APP

    @classmethod
    def for_app(cls, app_id: int) -> GameID:
        return cls(app_id=app_id)

    @classmethod
    def for_mod(cls, app_id: int, mod_id: int) -> GameID:
        return cls(app_id=app_id, mod_id=mod_id, game_type=GameType.GAME_MOD)

    @classmethod
    def for_mod_folder(cls, app_id: int, folder_name: str) -> GameID:
        """Mod id derived from the mod's folder name, as the Steam client does.

        Args:
            app_id: Base game the mod runs on (70 for GoldSrc, 215 for Source).
            folder_name: Name of the mod directory.
        """
        mod_id = zlib.crc32(folder_name.encode("utf-8")) | _MOD_ID_HIGH_BIT
        return cls.for_mod(app_id, mod_id)

    @classmethod
    def parse_activity_key(cls, key: str) -> GameID | None:
        """Parses an app key from localconfig.vdf.

        Keys are either ``"<appId>"`` or ``"<appId>_<modId>"`` for mods.

        Args:
            key: Child name under the ``apps`` section.

        Returns:
            The id, or ``None`` when any part is not an unsigned integer.
        """
        parts = key.split("_")
        if len(parts) > 2 or not all(part.isascii() and part.isdigit() for part in parts):
            return None
        numbers = [int(part) for part in parts]
        if any(number > 0xFFFFFFFF for number in numbers):
            return None
        if len(numbers) == 2:
            return cls.for_mod(numbers[0], numbers[1])
        return cls.for_app(numbers[0])

    @property
    def is_mod(self) -> bool:
        return self.game_type == GameType.GAME_MOD

    def to_int(self) -> int:
        return (self.mod_id << 32) | (int(self.game_type) << 24) | (self.app_id & _APP_ID_MASK)

    def __str__(self) -> str:
        return str(self.to_int())
