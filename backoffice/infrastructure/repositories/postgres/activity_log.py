"""
============================================================
TARJETA CRC — infrastructure/repositories/postgres/activity_log.py
============================================================
Class: PostgresActivityLogRepository

Responsibilities:
  - Persistir entradas de auditoría (tabla activity_log, append-only).
  - Contar actividad desde un instante (dashboard: "hoy").

Collaborators:
  - psycopg_pool.ConnectionPool
  - domain.entities.ActivityLogEntry / ActivityAction
  - crosscutting.exceptions.DatabaseError

Constraints / Notes:
  - Repo puro: NO decide qué se audita ni traga errores
    (eso es application.activity_log.record_activity).
  - user_id queda en NULL si el actor se elimina (FK ON DELETE SET NULL).
============================================================
"""

from __future__ import annotations

from datetime import datetime
from typing import Iterable

from psycopg_pool import ConnectionPool

from ....crosscutting.exceptions import DatabaseError
from ....crosscutting.logger import logger
from ....domain.entities import ActivityLogEntry


class PostgresActivityLogRepository:
    """Repositorio PostgreSQL para el log de actividad."""

    def __init__(self, pool: ConnectionPool | None = None):
        self._pool = pool

    def _get_pool(self) -> ConnectionPool:
        if self._pool is not None:
            return self._pool

        from ...db.pool import get_pool

        return get_pool()

    def _fetchall(
        self,
        *,
        query: str,
        params: Iterable[object],
        error_message: str,
        extra: dict[str, object],
    ) -> list[tuple]:
        try:
            pool = self._get_pool()
            with pool.connection() as conn:
                return conn.execute(query, tuple(params)).fetchall()
        except Exception as exc:
            logger.exception(error_message, extra={**extra, "error": str(exc)})
            raise DatabaseError(f"{error_message}: {exc}") from exc

    def append(self, entry: ActivityLogEntry) -> None:
        try:
            pool = self._get_pool()
            with pool.connection() as conn:
                conn.execute(
                    """
                    INSERT INTO activity_log (id, user_id, action, details, ip_address)
                    VALUES (%s, %s, %s, %s, %s)
                    """,
                    (
                        entry.id,
                        entry.user_id,
                        entry.action.value,
                        entry.details,
                        entry.ip_address,
                    ),
                )
        except Exception as exc:
            logger.exception(
                "PostgresActivityLogRepository: Failed to append activity",
                extra={
                    "entry_id": str(entry.id),
                    "action": entry.action.value,
                    "error": str(exc),
                },
            )
            raise DatabaseError(f"Failed to append activity: {exc}") from exc

    def count_since(self, start: datetime) -> int:
        rows = self._fetchall(
            query="SELECT COUNT(*) FROM activity_log WHERE created_at >= %s",
            params=(start,),
            error_message="PostgresActivityLogRepository: count_since failed",
            extra={"start": start.isoformat()},
        )
        return int(rows[0][0]) if rows else 0
