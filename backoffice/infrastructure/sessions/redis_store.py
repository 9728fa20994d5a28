"""
============================================================
TARJETA CRC — infrastructure/sessions/redis_store.py
============================================================
Class: RedisSessionStore

Responsibilities:
  - Persistir sesiones en Redis (compartidas entre workers, sobreviven
    reinicios del proceso).
  - TTL nativo por clave = vida restante de la sesión (SET ... EX).
  - Serializar SessionRecord como JSON.

Collaborators:
  - redis-py (cliente sync)
  - crosscutting.exceptions.SessionStoreError

Policy:
  - A diferencia de una caché, acá los fallos NO se degradan a miss:
    se levanta SessionStoreError y el request responde 503 (fail closed).
============================================================
"""

from __future__ import annotations

import json
import math
from datetime import datetime, timezone
from uuid import UUID

from redis import Redis
from redis.exceptions import RedisError

from ...crosscutting.exceptions import SessionStoreError
from ...crosscutting.logger import logger
from ...domain.entities import SessionRecord, UserRole


def _encode(record: SessionRecord) -> str:
    return json.dumps(
        {
            "user_id": str(record.user_id),
            "user_name": record.user_name,
            "user_role": record.user_role.value,
            "created_at": record.created_at.isoformat(),
            "expires_at": record.expires_at.isoformat(),
        }
    )


def _decode(raw: str | bytes) -> SessionRecord:
    data = json.loads(raw)
    return SessionRecord(
        user_id=UUID(data["user_id"]),
        user_name=data["user_name"],
        user_role=UserRole(data["user_role"]),
        created_at=datetime.fromisoformat(data["created_at"]),
        expires_at=datetime.fromisoformat(data["expires_at"]),
    )


def _unavailable(exc: Exception) -> SessionStoreError:
    return SessionStoreError("Session store unavailable", original_error=exc)


class RedisSessionStore:
    """Sesiones en Redis, namespaced bajo KEY_PREFIX."""

    KEY_PREFIX = "backoffice:session:"

    def __init__(self, client: Redis) -> None:
        self._client = client

    @classmethod
    def from_url(cls, redis_url: str) -> "RedisSessionStore":
        if not redis_url:
            raise ValueError("redis_url is required")
        client = Redis.from_url(
            redis_url,
            decode_responses=True,
            socket_connect_timeout=2,
            socket_timeout=5,
            health_check_interval=30,
        )
        return cls(client)

    def _k(self, key: str) -> str:
        return f"{self.KEY_PREFIX}{key}"

    def get(self, key: str) -> SessionRecord | None:
        try:
            raw = self._client.get(self._k(key))
        except RedisError as exc:
            logger.exception("RedisSessionStore: get failed", extra={"error": str(exc)})
            raise _unavailable(exc) from exc

        if raw is None:
            return None

        try:
            return _decode(raw)
        except (ValueError, KeyError, TypeError) as exc:
            # Payload corrupto: se descarta y la sesión cuenta como inexistente.
            logger.warning(
                "RedisSessionStore: payload inválido, se descarta",
                extra={"error": str(exc)},
            )
            self.delete(key)
            return None

    def put(self, key: str, record: SessionRecord) -> None:
        remaining = (record.expires_at - datetime.now(timezone.utc)).total_seconds()
        ttl = max(1, math.ceil(remaining))
        try:
            self._client.set(self._k(key), _encode(record), ex=ttl)
        except RedisError as exc:
            logger.exception("RedisSessionStore: put failed", extra={"error": str(exc)})
            raise _unavailable(exc) from exc

    def delete(self, key: str) -> None:
        try:
            self._client.delete(self._k(key))
        except RedisError as exc:
            logger.exception(
                "RedisSessionStore: delete failed", extra={"error": str(exc)}
            )
            raise _unavailable(exc) from exc

    def ping(self) -> bool:
        try:
            return bool(self._client.ping())
        except RedisError as exc:
            logger.warning("RedisSessionStore: ping failed", extra={"error": str(exc)})
            return False

    def close(self) -> None:
        self._client.close()
