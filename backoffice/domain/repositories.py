"""
===============================================================================
TARJETA CRC — domain/repositories.py
===============================================================================

Módulo:
    Puertos de persistencia (Protocols)

Responsabilidades:
    - Definir el contrato del store de usuarios (UserRepository).
    - Definir el contrato del log de actividad (ActivityLogRepository).
    - Definir el contrato del store de sesiones (SessionStore).

Colaboradores:
    - infrastructure.repositories.postgres.*: implementaciones reales.
    - infrastructure.repositories.in_memory.*: implementaciones para dev/tests.
    - infrastructure.sessions.*: InMemorySessionStore / RedisSessionStore.

Notas:
    - "Not found" se expresa con None/False, nunca con excepción.
    - Email duplicado SÍ es excepción (DuplicateEmailError): lo decide el
      índice único del storage, no un chequeo previo.
===============================================================================
"""

from __future__ import annotations

from datetime import datetime
from typing import Protocol
from uuid import UUID

from .entities import ActivityLogEntry, SessionRecord, User, UserRole, UserStatus


class UserRepository(Protocol):
    def get_user_by_id(self, user_id: UUID) -> User | None: ...

    def get_user_by_email(self, email: str) -> User | None: ...

    def create_user(
        self,
        *,
        name: str,
        email: str,
        password_hash: str,
        role: UserRole,
        status: UserStatus = UserStatus.ACTIVE,
        created_by: UUID | None = None,
    ) -> User:
        """Inserta el usuario. Raises DuplicateEmailError."""
        ...

    def update_user(
        self,
        user_id: UUID,
        *,
        name: str,
        email: str,
        role: UserRole,
        status: UserStatus,
    ) -> User | None:
        """Actualiza campos administrables. Raises DuplicateEmailError."""
        ...

    def delete_user(self, user_id: UUID) -> bool: ...

    def count_users(self) -> int: ...

    def ping(self) -> bool: ...

    def list_users(self, *, limit: int | None = None) -> list[User]:
        """Orden: created_at DESC, desempate estable."""
        ...


class ActivityLogRepository(Protocol):
    def append(self, entry: ActivityLogEntry) -> None: ...

    def count_since(self, start: datetime) -> int: ...


class SessionStore(Protocol):
    """Tabla key -> SessionRecord. La key ya viene derivada (nunca el token)."""

    def get(self, key: str) -> SessionRecord | None: ...

    def put(self, key: str, record: SessionRecord) -> None: ...

    def delete(self, key: str) -> None: ...

    def ping(self) -> bool: ...
