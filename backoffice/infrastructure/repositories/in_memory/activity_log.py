"""
In-memory Activity Log (append-only).

Para tests y desarrollo local; los datos se pierden al reiniciar.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timezone
from threading import Lock
from typing import Callable, List
from uuid import UUID

from ....domain.entities import ActivityLogEntry


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class InMemoryActivityLogRepository:
    def __init__(self, *, clock: Callable[[], datetime] | None = None) -> None:
        self._lock = Lock()
        self._entries: List[ActivityLogEntry] = []
        self._clock = clock or _utcnow

    def append(self, entry: ActivityLogEntry) -> None:
        if entry.created_at is None:
            entry = replace(entry, created_at=self._clock())
        with self._lock:
            self._entries.append(entry)

    def count_since(self, start: datetime) -> int:
        with self._lock:
            return sum(1 for e in self._entries if e.created_at >= start)

    def detach_user(self, user_id: UUID) -> None:
        """Emula ON DELETE SET NULL: la entrada se conserva sin actor."""
        with self._lock:
            self._entries = [
                replace(e, user_id=None) if e.user_id == user_id else e
                for e in self._entries
            ]

    def all(self) -> list[ActivityLogEntry]:
        """Snapshot en orden de inserción (tests / debugging)."""
        with self._lock:
            return list(self._entries)
