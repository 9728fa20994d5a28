"""
============================================================
TARJETA CRC — infrastructure/repositories/in_memory/user.py
============================================================
Class: InMemoryUserRepository

Responsibilities:
  - Almacenar usuarios en memoria (tests / local dev).
  - Replicar las garantías del esquema Postgres:
      - email único case-insensitive (check + insert atómico bajo lock)
      - created_by / activity_log.user_id -> NULL al eliminar (SET NULL)
      - updated_at refrescado en cada update
  - Ordering determinístico alineado con Postgres:
      created_at DESC, desempate por orden de inserción (más nuevo primero)

Collaborators:
  - domain.entities.User
  - domain.repositories.UserRepository (contrato)
  - in_memory.activity_log.InMemoryActivityLogRepository (SET NULL)

Constraints / Notes:
  - Thread-safe: acceso protegido por Lock.
  - Datos perdidos al reiniciar el proceso. NO para producción.
============================================================
"""

from __future__ import annotations

import itertools
from dataclasses import replace
from datetime import datetime, timezone
from threading import Lock
from typing import Callable, Dict
from uuid import UUID, uuid4

from ....domain.entities import User, UserRole, UserStatus
from ....domain.errors import DuplicateEmailError
from .activity_log import InMemoryActivityLogRepository


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class InMemoryUserRepository:
    """
    Modelo mental:
    - _users es la "tabla" (UUID -> User).
    - _email_index emula el índice único sobre lower(email).
    - _seq guarda el orden de inserción para desempatar created_at.
    """

    def __init__(
        self,
        *,
        activity_log: InMemoryActivityLogRepository | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._lock = Lock()
        self._users: Dict[UUID, User] = {}
        self._email_index: Dict[str, UUID] = {}
        self._seq: Dict[UUID, int] = {}
        self._counter = itertools.count()
        self._activity_log = activity_log
        self._clock = clock or _utcnow

    @staticmethod
    def _email_key(email: str) -> str:
        return email.strip().lower()

    def _sorted(self, users: list[User]) -> list[User]:
        return sorted(
            users,
            key=lambda u: (u.created_at, self._seq[u.id]),
            reverse=True,
        )

    # =========================================================
    # Lectura
    # =========================================================
    def get_user_by_id(self, user_id: UUID) -> User | None:
        with self._lock:
            return self._users.get(user_id)

    def get_user_by_email(self, email: str) -> User | None:
        with self._lock:
            user_id = self._email_index.get(self._email_key(email))
            return self._users.get(user_id) if user_id else None

    def count_users(self) -> int:
        with self._lock:
            return len(self._users)

    def list_users(self, *, limit: int | None = None) -> list[User]:
        if limit is not None and limit <= 0:
            return []
        with self._lock:
            ordered = self._sorted(list(self._users.values()))
        return ordered if limit is None else ordered[:limit]

    # =========================================================
    # Escritura
    # =========================================================
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
        key = self._email_key(email)
        now = self._clock()
        user = User(
            id=uuid4(),
            name=name,
            email=email,
            password_hash=password_hash,
            role=role,
            status=status,
            created_by=created_by,
            created_at=now,
            updated_at=now,
        )

        with self._lock:
            if key in self._email_index:
                raise DuplicateEmailError(email)
            self._users[user.id] = user
            self._email_index[key] = user.id
            self._seq[user.id] = next(self._counter)

        return user

    def update_user(
        self,
        user_id: UUID,
        *,
        name: str,
        email: str,
        role: UserRole,
        status: UserStatus,
    ) -> User | None:
        key = self._email_key(email)

        with self._lock:
            current = self._users.get(user_id)
            if current is None:
                return None

            owner = self._email_index.get(key)
            if owner is not None and owner != user_id:
                raise DuplicateEmailError(email)

            updated = replace(
                current,
                name=name,
                email=email,
                role=role,
                status=status,
                updated_at=self._clock(),
            )
            self._email_index.pop(self._email_key(current.email), None)
            self._email_index[key] = user_id
            self._users[user_id] = updated

        return updated

    def delete_user(self, user_id: UUID) -> bool:
        with self._lock:
            user = self._users.pop(user_id, None)
            if user is None:
                return False
            self._email_index.pop(self._email_key(user.email), None)
            self._seq.pop(user_id, None)

            for other_id, other in list(self._users.items()):
                if other.created_by == user_id:
                    self._users[other_id] = replace(other, created_by=None)

        if self._activity_log is not None:
            self._activity_log.detach_user(user_id)
        return True

    def ping(self) -> bool:
        return True
