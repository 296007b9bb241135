# steamlibsync/core/errors.py

"""Error classification and per-stage results for a library sync run.

Every stage of a run (installed scan, primary account, family sharing, each
additional account) produces a :class:`StageResult`. Failures are carried as
values and aggregated by the sync service instead of propagating, so one
broken source never discards the games found by the others.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Generic, TypeVar

import requests

from steamlibsync.core.keyvalue import KeyValueParseError
from steamlibsync.utils.i18n import t

__all__ = [
    "ApiKeyRejectedError",
    "ApiUnreachableError",
    "ErrorCategory",
    "FamilySharingUnauthorizedError",
    "NoFamilyGroupError",
    "NoGamesFoundError",
    "NotLoggedInError",
    "ProfileDeserializeError",
    "ProfileFetchError",
    "StageResult",
    "SteamNotInstalledError",
    "SyncError",
    "TransportError",
]

logger = logging.getLogger("steamlibsync.errors")

T = TypeVar("T")


class ErrorCategory(str, Enum):
    SOURCE_UNREADABLE = "source_unreadable"
    AUTH = "auth"
    RATE_LIMITED = "rate_limited"
    TRANSPORT = "transport"


class SyncError(Exception):
    """Base class for classified sync failures.

    The exception message is the localized, user-facing text.
    """

    category: ErrorCategory = ErrorCategory.TRANSPORT


class SteamNotInstalledError(SyncError):
    category = ErrorCategory.SOURCE_UNREADABLE

    def __init__(self) -> None:
        super().__init__(t("errors.steam_not_installed"))


class NotLoggedInError(SyncError):
    category = ErrorCategory.AUTH

    def __init__(self) -> None:
        super().__init__(t("errors.not_logged_in"))


class ApiUnreachableError(SyncError):
    """GetOwnedGames kept answering 429."""

    category = ErrorCategory.RATE_LIMITED

    def __init__(self) -> None:
        super().__init__(t("errors.api_unreachable"))


class ApiKeyRejectedError(SyncError):
    """GetOwnedGames refused the Web API key (HTTP 401/403)."""

    category = ErrorCategory.AUTH

    def __init__(self) -> None:
        super().__init__(t("errors.api_key_rejected"))


class FamilySharingUnauthorizedError(SyncError):
    """The family sharing access token expired (HTTP 401)."""

    category = ErrorCategory.AUTH

    def __init__(self) -> None:
        super().__init__(t("errors.family_unauthorized"))


class NoFamilyGroupError(SyncError):
    category = ErrorCategory.AUTH

    def __init__(self) -> None:
        super().__init__(t("errors.no_family_group"))


class NoGamesFoundError(SyncError):
    """The account answered without a games list (private or empty library)."""

    category = ErrorCategory.SOURCE_UNREADABLE

    def __init__(self) -> None:
        super().__init__(t("errors.no_games_found"))


class ProfileFetchError(SyncError):
    """The public profile page did not yield the games payload."""

    def __init__(self, detail: str = "") -> None:
        super().__init__(t("errors.profile_fetch_failed", detail=detail))
        self.detail = detail


class ProfileDeserializeError(SyncError):
    """The profile payload was found but is not the expected JSON shape."""

    def __init__(self, detail: str = "") -> None:
        super().__init__(t("errors.profile_deserialize_failed", detail=detail))
        self.detail = detail


class TransportError(SyncError):
    """Network failure or unexpected response shape, never retried."""

    def __init__(self, detail: str) -> None:
        super().__init__(t("errors.transport", detail=detail))
        self.detail = detail


@dataclass(frozen=True)
class StageResult(Generic[T]):
    """Outcome of one sync stage: a value or a failure, never both.

    Attributes:
        value: Stage output, ``None`` on failure.
        error: The failure, ``None`` on success.
    """

    value: T | None = None
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T) -> StageResult[T]:
        return cls(value=value)

    @classmethod
    def failure(cls, error: Exception) -> StageResult[T]:
        return cls(error=error)

    @classmethod
    def capture(cls, stage: str, func: Callable[..., T], *args, **kwargs) -> StageResult[T]:
        """Runs ``func`` and converts expected failures into a failed result.

        Args:
            stage: Stage name for the log line.
            func: Callable producing the stage value.
            *args: Positional arguments for ``func``.
            **kwargs: Keyword arguments for ``func``.

        Returns:
            Successful result with the return value, or failed result with
            the classified error. Programming errors still propagate.
        """
        try:
            return cls.success(func(*args, **kwargs))
        except SyncError as e:
            logger.error(t("logs.sync.stage_failed", stage=stage, error=e), exc_info=True)
            return cls.failure(e)
        except requests.RequestException as e:
            logger.error(t("logs.sync.stage_failed", stage=stage, error=e), exc_info=True)
            return cls.failure(TransportError(str(e)))
        except (OSError, KeyValueParseError, ValueError) as e:
            # ValueError covers a missing API key and malformed manifests
            logger.error(t("logs.sync.stage_failed", stage=stage, error=e), exc_info=True)
            return cls.failure(e)
