"""
============================================================
TARJETA CRC — infrastructure/sessions/in_memory.py
============================================================
Class: InMemorySessionStore

Responsibilities:
  - Guardar SessionRecord por key derivada (nunca el token).
  - Thread-safety con Lock (los handlers corren en el threadpool).

Constraints / Notes:
  - Una sola instancia de proceso: las sesiones se pierden al reiniciar y
    no se comparten entre workers. Para eso existe RedisSessionStore.
  - La expiración la decide SessionManager; acá solo hay get/put/delete.
============================================================
"""

from __future__ import annotations

from threading import Lock
from typing import Dict

from ...domain.entities import SessionRecord


class InMemorySessionStore:
    def __init__(self) -> None:
        self._lock = Lock()
        self._records: Dict[str, SessionRecord] = {}

    def get(self, key: str) -> SessionRecord | None:
        with self._lock:
            return self._records.get(key)

    def put(self, key: str, record: SessionRecord) -> None:
        with self._lock:
            self._records[key] = record

    def delete(self, key: str) -> None:
        with self._lock:
            self._records.pop(key, None)

    def ping(self) -> bool:
        return True

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)
