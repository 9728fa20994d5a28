"""
===============================================================================
TARJETA CRC — identity/sessions.py
===============================================================================

Módulo:
    Session Manager (tokens opacos server-side)

Responsabilidades:
    - Emitir tokens opacos aleatorios (>= 256 bits).
    - Mapear token -> {user_id, user_name, user_role, created_at, expires_at}.
    - Validar sesiones con expiración absoluta (no deslizante).
    - Destruir sesiones (logout / revocación inmediata, idempotente).

Colaboradores:
    - domain.repositories.SessionStore (in-memory o Redis)
    - domain.entities.SessionRecord / SessionIdentity
    - crosscutting.logger

Decisiones:
    - La key del store es HMAC-SHA256(session_secret, token): un dump del store
      no permite reconstruir cookies válidas.
    - Reloj inyectable (tests de expiración sin dormir 24h).
    - Una sesión expirada se borra apenas se detecta.
===============================================================================
"""

from __future__ import annotations

import hashlib
import hmac
import secrets
from datetime import datetime, timedelta, timezone
from typing import Callable
from uuid import UUID

from ..crosscutting.logger import logger
from ..domain.entities import SessionIdentity, SessionRecord, UserRole
from ..domain.repositories import SessionStore
from .errors import SessionExpiredError, SessionMissingError

# 32 bytes = 256 bits de entropía.
TOKEN_BYTES: int = 32
DEFAULT_TTL_SECONDS: int = 24 * 60 * 60

Clock = Callable[[], datetime]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SessionManager:
    """
    ----------------------------------------------------------------------------
    CRC (Class Card)
    ----------------------------------------------------------------------------
    Clase:
      SessionManager

    Responsabilidades:
      - create / validate / destroy
      - Derivar la key de store a partir del token

    Colaboradores:
      - SessionStore
    ----------------------------------------------------------------------------
    """

    def __init__(
        self,
        store: SessionStore,
        *,
        secret: str,
        ttl_seconds: int = DEFAULT_TTL_SECONDS,
        clock: Clock | None = None,
    ) -> None:
        if not secret:
            raise ValueError("session secret must not be empty")
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be greater than 0")
        self._store = store
        self._secret = secret.encode("utf-8")
        self._ttl = timedelta(seconds=ttl_seconds)
        self._clock = clock or _utcnow

    @property
    def ttl_seconds(self) -> int:
        return int(self._ttl.total_seconds())

    def create(self, user_id: UUID, user_name: str, user_role: UserRole) -> str:
        """Emite un token nuevo. Sesiones previas del usuario siguen vigentes."""
        token = secrets.token_urlsafe(TOKEN_BYTES)
        now = self._clock()
        record = SessionRecord(
            user_id=user_id,
            user_name=user_name,
            user_role=user_role,
            created_at=now,
            expires_at=now + self._ttl,
        )
        self._store.put(self._key(token), record)
        return token

    def validate(self, token: str | None) -> SessionIdentity:
        """
        Raises:
            SessionMissingError: token vacío o desconocido.
            SessionExpiredError: pasó el TTL absoluto (la entrada se borra).
        """
        if not token:
            raise SessionMissingError()

        key = self._key(token)
        record = self._store.get(key)
        if record is None:
            raise SessionMissingError()

        if record.is_expired(self._clock()):
            self._store.delete(key)
            logger.info("Sesión expirada", extra={"user_id": str(record.user_id)})
            raise SessionExpiredError()

        return record.identity()

    def destroy(self, token: str | None) -> None:
        if not token:
            return
        self._store.delete(self._key(token))

    def ping(self) -> bool:
        return self._store.ping()

    def _key(self, token: str) -> str:
        return hmac.new(self._secret, token.encode("utf-8"), hashlib.sha256).hexdigest()
