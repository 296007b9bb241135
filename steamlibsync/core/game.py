# steamlibsync/core/game.py

"""Record types flowing through a library sync run.

``OwnedGameEntry`` is the raw remote shape (Web API, profile page, family
library), ``ModRecord`` a locally discovered GoldSrc/Source mod and
``GameRecord`` the canonical output unit handed to the host importer.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Mapping

__all__ = [
    "ActivityRecord",
    "GameLink",
    "GameRecord",
    "ModRecord",
    "OwnedGameEntry",
    "PC_PLATFORM",
    "SOURCE_STEAM",
    "SOURCE_STEAM_FAMILY",
    "epoch_to_datetime",
]

SOURCE_STEAM = "Steam"
SOURCE_STEAM_FAMILY = "Steam Family"
PC_PLATFORM = "pc_windows"


def epoch_to_datetime(seconds: int | None) -> datetime | None:
    """Converts a Unix timestamp to a local datetime.

    Steam writes 0 (or small garbage) for never-played apps, so anything
    that lands in 1970 or earlier is treated as missing.

    Args:
        seconds: Unix timestamp in seconds.

    Returns:
        Local, timezone-aware datetime, or ``None`` for "never played".
    """
    if not seconds or seconds <= 0:
        return None
    try:
        moment = datetime.fromtimestamp(seconds, tz=timezone.utc).astimezone()
    except (OverflowError, OSError, ValueError):
        return None
    if moment.year <= 1970:
        return None
    return moment


@dataclass(frozen=True)
class GameLink:
    name: str
    url: str


@dataclass
class GameRecord:
    """One game in the reconciled library.

    Attributes:
        source: Origin library name ("Steam" or "Steam Family").
        game_id: String form of the numeric app id or packed mod id.
        name: Display name, trademarks stripped.
        install_directory: Install location, empty when not installed.
        is_installed: Whether the game was found installed on disk.
        platform: Platform tag, always the PC platform here.
        playtime: Total playtime in seconds.
        last_activity: Last time played, ``None`` if never.
        sorting_name: Optional sort key from the profile page.
        is_mod: True for GoldSrc/Source mods.
        developers: Mod developers.
        tags: Mod categories.
        links: Mod links (homepage, manual).
        icon_path: Mod icon file, if present.
    """

    source: str
    game_id: str
    name: str
    install_directory: str = ""
    is_installed: bool = False
    platform: str = PC_PLATFORM
    playtime: int = 0
    last_activity: datetime | None = None
    sorting_name: str = ""
    is_mod: bool = False
    developers: list[str] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)
    links: list[GameLink] = field(default_factory=list)
    icon_path: str = ""

    def to_dict(self) -> dict[str, Any]:
        """JSON-friendly representation used by the command line export."""
        return {
            "source": self.source,
            "game_id": self.game_id,
            "name": self.name,
            "install_directory": self.install_directory,
            "is_installed": self.is_installed,
            "platform": self.platform,
            "playtime": self.playtime,
            "last_activity": self.last_activity.isoformat() if self.last_activity else None,
            "sorting_name": self.sorting_name,
            "is_mod": self.is_mod,
            "developers": list(self.developers),
            "tags": list(self.tags),
            "links": [{"name": link.name, "url": link.url} for link in self.links],
            "icon_path": self.icon_path,
        }


@dataclass(frozen=True)
class ModRecord:
    """A mod discovered through its descriptor file.

    Attributes:
        game_id: Packed mod id (see ``GameID.for_mod_folder``).
        name: Mod name from the descriptor.
        developer: Developer name, may be empty.
        install_directory: Mod folder.
        icon_path: Icon file when it exists on disk.
        categories: Single/multi-player categories.
        links: Homepage/manual links.
    """

    game_id: str
    name: str
    developer: str
    install_directory: Path
    icon_path: Path | None = None
    categories: tuple[str, ...] = ()
    links: tuple[GameLink, ...] = ()


@dataclass(frozen=True)
class OwnedGameEntry:
    """Remote owned-games record before normalization.

    Profile page entries carry ``sort_as`` and ``rtime_last_played`` but no
    ``app_type``; Web API entries the reverse. Do not assume parity.

    Attributes:
        app_id: Steam application id.
        name: Raw name as returned by the source.
        app_type: Family-library classifier (1 game, 2 software, 3+ other).
        playtime_forever: Playtime in minutes.
        rtime_last_played: Last played, Unix seconds (0 when unknown).
        sort_as: Optional sort name.
    """

    app_id: int
    name: str = ""
    app_type: int = 0
    playtime_forever: int = 0
    rtime_last_played: int = 0
    sort_as: str = ""

    @classmethod
    def from_json(cls, raw: Mapping[str, Any]) -> OwnedGameEntry:
        """Builds an entry from one item of a ``games`` array.

        Args:
            raw: Decoded JSON object with at least ``appid``.

        Returns:
            The entry.

        Raises:
            KeyError: If ``appid`` is missing.
            ValueError: If a numeric field is not numeric.
            TypeError: If a numeric field has an unexpected JSON type.
        """
        return cls(
            app_id=int(raw["appid"]),
            name=str(raw.get("name") or ""),
            app_type=int(raw.get("app_type") or 0),
            playtime_forever=int(raw.get("playtime_forever") or 0),
            rtime_last_played=int(raw.get("rtime_last_played") or 0),
            sort_as=str(raw.get("sort_as") or ""),
        )


@dataclass(frozen=True)
class ActivityRecord:
    """Local activity from localconfig.vdf for one app.

    Attributes:
        last_played: Last launch time, ``None`` when never played.
        playtime_minutes: Locally recorded playtime in minutes.
    """

    last_played: datetime | None = None
    playtime_minutes: int = 0
