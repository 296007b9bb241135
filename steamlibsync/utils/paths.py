"""Resource path resolution.

The i18n JSON files ship inside the package (``steamlibsync/resources``) so a
plain ``pip install`` and a source checkout resolve to the same place.
"""

from __future__ import annotations

import sys
from pathlib import Path

__all__ = ["get_resources_dir"]

_resources_dir: Path | None = None


def get_resources_dir() -> Path:
    """Get the path to the resources directory.

    Checks the package directory first, then ``sys.prefix`` for bundled
    installs that relocate data files.

    Returns:
        Path to the resources directory.

    Raises:
        FileNotFoundError: If the resources directory cannot be found.
    """
    global _resources_dir
    if _resources_dir is not None:
        return _resources_dir

    # paths.py is at steamlibsync/utils/paths.py -> parent.parent = steamlibsync/
    candidates = (
        Path(__file__).resolve().parent.parent / "resources",
        Path(sys.prefix) / "share" / "steamlibsync" / "resources",
    )
    for candidate in candidates:
        if candidate.is_dir():
            _resources_dir = candidate
            return _resources_dir

    raise FileNotFoundError(
        "Could not locate resources directory. Searched: " + ", ".join(str(c) for c in candidates)
    )
