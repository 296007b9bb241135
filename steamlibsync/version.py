"""
Central version management for Steam Library Sync.
"""

from __future__ import annotations

__all__ = ["__app_name__", "__version__", "__release_date__", "__author__", "__license__"]

__app_name__ = "Steam Library Sync"
__version__ = "0.4.0"
__release_date__ = "2026-10-19"
__author__ = "SwitchBros"
__license__ = "MIT"
