"""
===============================================================================
TARJETA CRC — domain/entities.py
===============================================================================

Módulo:
    Entidades del dominio (cuentas, sesiones, auditoría)

Responsabilidades:
    - Definir los enums cerrados de rol, estado y acción auditada.
    - Definir User (registro completo, incluye password_hash) y AccountView
      (proyección de lectura SIN hash).
    - Definir SessionIdentity (lo que una sesión prueba) y SessionRecord
      (lo que guarda el store de sesiones).
    - Definir ActivityLogEntry (hecho de auditoría append-only).

Colaboradores:
    - domain.repositories: contratos que persisten estas entidades.
    - identity.*: credenciales, sesiones y guardas.
    - application.usecases.accounts: orquestación.

Notas:
    - Este módulo NO contiene lógica de negocio: solo "shapes" de datos.
    - Los roles privilegiados son admin y manager (is_privileged).
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from uuid import UUID


class UserRole(str, Enum):
    """Roles globales del panel (conjunto cerrado)."""

    ADMIN = "admin"
    MANAGER = "manager"
    USER = "user"

    @property
    def is_privileged(self) -> bool:
        return self in _PRIVILEGED_ROLES


_PRIVILEGED_ROLES = frozenset({UserRole.ADMIN, UserRole.MANAGER})


class UserStatus(str, Enum):
    """Solo ACTIVE puede autenticarse."""

    ACTIVE = "active"
    INACTIVE = "inactive"


class ActivityAction(str, Enum):
    """Vocabulario cerrado de acciones auditadas."""

    LOGIN = "Login"
    LOGOUT = "Logout"
    CREATE_USER = "Create User"
    UPDATE_USER = "Update User"
    DELETE_USER = "Delete User"


@dataclass(frozen=True, slots=True)
class User:
    """Registro de usuario tal como lo guarda el Credential Store."""

    id: UUID
    name: str
    email: str
    password_hash: str
    role: UserRole
    status: UserStatus
    created_by: UUID | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def is_active(self) -> bool:
        return self.status == UserStatus.ACTIVE

    def to_view(self) -> "AccountView":
        return AccountView(
            id=self.id,
            name=self.name,
            email=self.email,
            role=self.role,
            status=self.status,
            created_by=self.created_by,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )


@dataclass(frozen=True, slots=True)
class AccountView:
    """Proyección de lectura de User. No existe campo para el hash."""

    id: UUID
    name: str
    email: str
    role: UserRole
    status: UserStatus
    created_by: UUID | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True, slots=True)
class SessionIdentity:
    """Identidad probada por una sesión válida."""

    user_id: UUID
    user_name: str
    user_role: UserRole

    @property
    def is_privileged(self) -> bool:
        return self.user_role.is_privileged


@dataclass(frozen=True, slots=True)
class SessionRecord:
    """Entrada del store de sesiones (clave = HMAC del token, nunca el token)."""

    user_id: UUID
    user_name: str
    user_role: UserRole
    created_at: datetime
    expires_at: datetime

    def identity(self) -> SessionIdentity:
        return SessionIdentity(
            user_id=self.user_id, user_name=self.user_name, user_role=self.user_role
        )

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at


@dataclass(frozen=True, slots=True)
class ActivityLogEntry:
    """
    Evento de auditoría (append-only).

    user_id es el actor al momento de escribir; queda en None si luego el
    actor se elimina (la entrada se conserva).
    """

    id: UUID
    user_id: UUID | None
    action: ActivityAction
    details: str | None = None
    ip_address: str | None = None
    created_at: datetime | None = None
