"""
============================================================
TARJETA CRC — infrastructure/repositories/postgres/user.py
============================================================
Class: PostgresUserRepository

Responsibilities:
  - Cargar usuarios por email (login) y por id (re-check de sesión).
  - Crear, actualizar y eliminar usuarios (tabla `users`).
  - Mapear filas crudas -> entidad de dominio `User` validando enums.
  - Traducir la violación de uq_users_email_lower -> DuplicateEmailError.
  - Exponer fallos de infraestructura vía `DatabaseError` con logging.

Collaborators:
  - psycopg_pool.ConnectionPool (pool de conexiones)
  - infrastructure.db.pool.get_pool (pool global si no se inyecta)
  - domain.entities.User / UserRole / UserStatus
  - crosscutting.exceptions.DatabaseError

Constraints / Notes:
  - Repositorio puro: NO define reglas de negocio (quién puede qué).
  - Retorna None / False cuando no existe el recurso.
  - El email llega normalizado (lower) desde CredentialStore; el índice
    único sobre lower(email) es la fuente de verdad ante carreras.
  - Orden estable en listados: created_at DESC, id DESC.
============================================================
"""

from __future__ import annotations

from typing import Iterable
from uuid import UUID, uuid4

from psycopg import errors as pg_errors
from psycopg_pool import ConnectionPool

from ....crosscutting.exceptions import DatabaseError
from ....crosscutting.logger import logger
from ....domain.entities import User, UserRole, UserStatus
from ....domain.errors import DuplicateEmailError

# R: Lista explícita de columnas (contrato con migraciones).
_USER_COLUMNS = (
    "id, name, email, password_hash, role, status, created_by, created_at, updated_at"
)

_USER_ORDER_BY = "created_at DESC, id DESC"


def _row_to_user(row: tuple) -> User:
    """
    Convierte una fila de `users` a `User`.

    Role/status inválidos en la base -> DatabaseError (drift de esquema).
    """
    try:
        role = UserRole(row[4])
        status = UserStatus(row[5])
    except ValueError as exc:
        raise DatabaseError(
            f"Invalid user role/status in database: {row[4]}/{row[5]}"
        ) from exc

    return User(
        id=row[0],
        name=row[1],
        email=row[2],
        password_hash=row[3],
        role=role,
        status=status,
        created_by=row[6],
        created_at=row[7],
        updated_at=row[8],
    )


class PostgresUserRepository:
    """Repositorio PostgreSQL de usuarios."""

    def __init__(self, pool: ConnectionPool | None = None) -> None:
        # Pool inyectable: tests pasan un doble; prod usa el pool global.
        self._pool = pool

    def _get_pool(self) -> ConnectionPool:
        if self._pool is not None:
            return self._pool

        from ...db.pool import get_pool

        return get_pool()

    # ------------------------------------------------------------
    # Helpers internos (errores/logging consistentes)
    # ------------------------------------------------------------
    def _fetchone(
        self,
        *,
        query: str,
        params: Iterable[object],
        log_msg: str,
        log_extra: dict[str, object],
        email: str | None = None,
    ) -> tuple | None:
        try:
            pool = self._get_pool()
            with pool.connection() as conn:
                return conn.execute(query, tuple(params)).fetchone()
        except pg_errors.UniqueViolation as exc:
            logger.info("Email duplicado rechazado por índice único", extra=log_extra)
            raise DuplicateEmailError(email or "") from exc
        except Exception as exc:
            logger.exception(log_msg, extra={**log_extra, "error": str(exc)})
            raise DatabaseError(f"{log_msg}: {exc}") from exc

    def _fetchall(
        self,
        *,
        query: str,
        params: Iterable[object] = (),
        log_msg: str,
        log_extra: dict[str, object],
    ) -> list[tuple]:
        try:
            pool = self._get_pool()
            with pool.connection() as conn:
                return conn.execute(query, tuple(params)).fetchall()
        except Exception as exc:
            logger.exception(log_msg, extra={**log_extra, "error": str(exc)})
            raise DatabaseError(f"{log_msg}: {exc}") from exc

    # ------------------------------------------------------------
    # Lectura
    # ------------------------------------------------------------
    def get_user_by_email(self, email: str) -> User | None:
        row = self._fetchone(
            query=f"SELECT {_USER_COLUMNS} FROM users WHERE lower(email) = lower(%s)",
            params=(email,),
            log_msg="PostgresUserRepository: get_user_by_email failed",
            log_extra={"email": email},
        )
        return _row_to_user(row) if row else None

    def get_user_by_id(self, user_id: UUID) -> User | None:
        row = self._fetchone(
            query=f"SELECT {_USER_COLUMNS} FROM users WHERE id = %s",
            params=(user_id,),
            log_msg="PostgresUserRepository: get_user_by_id failed",
            log_extra={"user_id": str(user_id)},
        )
        return _row_to_user(row) if row else None

    def count_users(self) -> int:
        row = self._fetchone(
            query="SELECT COUNT(*) FROM users",
            params=(),
            log_msg="PostgresUserRepository: count_users failed",
            log_extra={},
        )
        return int(row[0]) if row else 0

    def list_users(self, *, limit: int | None = None) -> list[User]:
        if limit is not None and limit <= 0:
            return []

        query = f"SELECT {_USER_COLUMNS} FROM users ORDER BY {_USER_ORDER_BY}"
        params: tuple[object, ...] = ()
        if limit is not None:
            query += " LIMIT %s"
            params = (limit,)

        rows = self._fetchall(
            query=query,
            params=params,
            log_msg="PostgresUserRepository: list_users failed",
            log_extra={"limit": limit},
        )
        return [_row_to_user(r) for r in rows]

    # ------------------------------------------------------------
    # Escritura
    # ------------------------------------------------------------
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
        user_id = uuid4()

        row = self._fetchone(
            query=f"""
                INSERT INTO users (id, name, email, password_hash, role, status, created_by)
                VALUES (%s, %s, %s, %s, %s, %s, %s)
                RETURNING {_USER_COLUMNS}
            """,
            params=(
                user_id,
                name,
                email,
                password_hash,
                role.value,
                status.value,
                created_by,
            ),
            log_msg="PostgresUserRepository: create_user failed",
            log_extra={"user_id": str(user_id), "email": email, "role": role.value},
            email=email,
        )

        if not row:
            raise DatabaseError(
                "PostgresUserRepository: create_user failed (no row returned)"
            )

        return _row_to_user(row)

    def update_user(
        self,
        user_id: UUID,
        *,
        name: str,
        email: str,
        role: UserRole,
        status: UserStatus,
    ) -> User | None:
        row = self._fetchone(
            query=f"""
                UPDATE users
                SET name = %s, email = %s, role = %s, status = %s, updated_at = now()
                WHERE id = %s
                RETURNING {_USER_COLUMNS}
            """,
            params=(name, email, role.value, status.value, user_id),
            log_msg="PostgresUserRepository: update_user failed",
            log_extra={"user_id": str(user_id), "email": email},
            email=email,
        )
        return _row_to_user(row) if row else None

    def delete_user(self, user_id: UUID) -> bool:
        # created_by y activity_log.user_id quedan en NULL (ON DELETE SET NULL).
        row = self._fetchone(
            query="DELETE FROM users WHERE id = %s RETURNING id",
            params=(user_id,),
            log_msg="PostgresUserRepository: delete_user failed",
            log_extra={"user_id": str(user_id)},
        )
        return row is not None

    def ping(self) -> bool:
        """Health check: SELECT 1 (no levanta; loguea y devuelve False)."""
        try:
            pool = self._get_pool()
            with pool.connection() as conn:
                conn.execute("SELECT 1").fetchone()
            return True
        except Exception as exc:
            logger.warning(
                "PostgresUserRepository: ping failed", extra={"error": str(exc)}
            )
            return False
