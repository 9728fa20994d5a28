"""
===============================================================================
TARJETA CRC — identity/credentials.py
===============================================================================

Módulo:
    Credential Store (usuarios + passwords)

Responsabilidades:
    - Crear usuarios hasheando el password (nunca se guarda en claro).
    - Verificar credenciales de forma uniforme (email desconocido, usuario
      inactivo y password incorrecto son indistinguibles para el caller).
    - Actualizar / eliminar usuarios con errores explícitos
      (UserNotFoundError, DuplicateEmailError).
    - Normalizar emails (trim + lower) antes de tocar el repositorio.

Colaboradores:
    - domain.repositories.UserRepository (Postgres o in-memory)
    - identity.passwords (Argon2id)
    - crosscutting.logger

Decisiones:
    - La unicidad del email la decide el índice único del storage; acá no hay
      "check then insert".
    - Con email desconocido igual se ejecuta un verify Argon2 contra un hash
      fijo para no filtrar por timing qué emails están registrados.
===============================================================================
"""

from __future__ import annotations

from uuid import UUID

from argon2 import PasswordHasher

from ..crosscutting.logger import logger
from ..domain.entities import User, UserRole, UserStatus
from ..domain.errors import UserNotFoundError
from ..domain.repositories import UserRepository
from .errors import InvalidCredentialsError
from .passwords import get_password_hasher, hash_password, verify_password

_DUMMY_PASSWORD = "backoffice-timing-equalizer"


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


class CredentialStore:
    """
    ----------------------------------------------------------------------------
    CRC (Class Card)
    ----------------------------------------------------------------------------
    Clase:
      CredentialStore

    Responsabilidades:
      - Hash/verify de passwords
      - Delegar persistencia al UserRepository
      - Traducir "no existe" a UserNotFoundError en update/delete

    Colaboradores:
      - UserRepository
      - argon2.PasswordHasher
    ----------------------------------------------------------------------------
    """

    def __init__(
        self, users: UserRepository, hasher: PasswordHasher | None = None
    ) -> None:
        self._users = users
        self._hasher = hasher or get_password_hasher()
        self._dummy_hash: str | None = None

    def create(
        self,
        name: str,
        email: str,
        password: str,
        role: UserRole,
        created_by: UUID | None = None,
    ) -> User:
        """Raises DuplicateEmailError si el email ya existe (case-insensitive)."""
        password_hash = hash_password(password, self._hasher)
        return self._users.create_user(
            name=name.strip(),
            email=normalize_email(email),
            password_hash=password_hash,
            role=role,
            status=UserStatus.ACTIVE,
            created_by=created_by,
        )

    def verify(self, email: str, password: str) -> User:
        """
        Devuelve el usuario si las credenciales son válidas y está activo.

        Raises:
            InvalidCredentialsError: en cualquier otro caso (mismo mensaje).
        """
        normalized = normalize_email(email)
        user = self._users.get_user_by_email(normalized) if normalized else None

        if user is None:
            self._burn_verification(password)
            raise InvalidCredentialsError()

        password_ok = verify_password(password, user.password_hash, self._hasher)
        if not password_ok or not user.is_active:
            # El motivo queda solo en logs; el caller no lo ve.
            logger.info(
                "Credenciales rechazadas",
                extra={
                    "user_id": str(user.id),
                    "reason": "inactive" if password_ok else "bad_password",
                },
            )
            raise InvalidCredentialsError()

        return user

    def update(
        self,
        user_id: UUID,
        name: str,
        email: str,
        role: UserRole,
        status: UserStatus,
    ) -> User:
        updated = self._users.update_user(
            user_id,
            name=name.strip(),
            email=normalize_email(email),
            role=role,
            status=status,
        )
        if updated is None:
            raise UserNotFoundError(user_id)
        return updated

    def delete(self, user_id: UUID) -> None:
        if not self._users.delete_user(user_id):
            raise UserNotFoundError(user_id)

    def get(self, user_id: UUID) -> User | None:
        return self._users.get_user_by_id(user_id)

    def count(self) -> int:
        return self._users.count_users()

    def list(self) -> list[User]:
        return self._users.list_users()

    def list_recent(self, limit: int) -> list[User]:
        return self._users.list_users(limit=limit)

    def _burn_verification(self, password: str) -> None:
        if self._dummy_hash is None:
            self._dummy_hash = hash_password(_DUMMY_PASSWORD, self._hasher)
        verify_password(password, self._dummy_hash, self._hasher)
