"""Steam Library Sync - reconciles installed and owned Steam games into one list."""

from __future__ import annotations

from steamlibsync.version import __version__

__all__ = ["__version__"]
