# tests/unit/test_core/test_game.py

"""Tests for the record types and epoch conversion."""

from datetime import datetime, timezone

import pytest

from steamlibsync.core.game import GameLink, GameRecord, OwnedGameEntry, SOURCE_STEAM, epoch_to_datetime


class TestEpochToDatetime:
    """Tests for epoch_to_datetime()."""

    @pytest.mark.parametrize("seconds", [None, 0, -5, 86400])
    def test_never_played(self, seconds):
        """Zero, negative and 1970 timestamps mean never played."""
        assert epoch_to_datetime(seconds) is None

    def test_real_timestamp(self):
        """Real timestamps become aware datetimes."""
        moment = epoch_to_datetime(1700000000)
        assert moment is not None
        assert moment.tzinfo is not None
        assert moment == datetime.fromtimestamp(1700000000, tz=timezone.utc)


class TestOwnedGameEntry:
    """Tests for OwnedGameEntry.from_json()."""

    def test_profile_shape(self):
        """Profile entries carry sort_as and rtime_last_played."""
        entry = OwnedGameEntry.from_json(
            {"appid": "440", "name": "TF2", "sort_as": "Team Fortress", "rtime_last_played": 1700000000}
        )
        assert entry.app_id == 440
        assert entry.sort_as == "Team Fortress"
        assert entry.rtime_last_played == 1700000000
        assert entry.app_type == 0

    def test_nulls_default(self):
        """Null fields fall back to defaults."""
        entry = OwnedGameEntry.from_json({"appid": 10, "name": None, "playtime_forever": None})
        assert entry.name == ""
        assert entry.playtime_forever == 0

    def test_missing_appid(self):
        """An entry without appid is rejected."""
        with pytest.raises(KeyError):
            OwnedGameEntry.from_json({"name": "x"})


class TestGameRecord:
    """Tests for GameRecord."""

    def test_defaults(self):
        """New records are uninstalled PC games without activity."""
        record = GameRecord(source=SOURCE_STEAM, game_id="440", name="TF2")
        assert record.is_installed is False
        assert record.platform == "pc_windows"
        assert record.last_activity is None
        assert record.developers == []

    def test_to_dict(self):
        """Export flattens links and formats the last activity."""
        played = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
        record = GameRecord(
            source=SOURCE_STEAM,
            game_id="1",
            name="Mod",
            last_activity=played,
            links=[GameLink("Homepage", "https://example.org")],
        )
        data = record.to_dict()
        assert data["last_activity"] == played.isoformat()
        assert data["links"] == [{"name": "Homepage", "url": "https://example.org"}]
