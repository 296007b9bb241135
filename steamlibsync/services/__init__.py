from __future__ import annotations

from steamlibsync.services.library_sync_service import LibrarySyncService, ReconciliationResult

__all__: list[str] = [
    "LibrarySyncService",
    "ReconciliationResult",
]
