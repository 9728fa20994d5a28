"""
===============================================================================
TASK: Bootstrap Admin (store vacío)
===============================================================================

Qué es:
    Si el store de usuarios está vacío al arrancar, crea exactamente una
    cuenta admin/active para poder entrar al panel por primera vez.

Seguridad:
    - Solo corre con el store vacío: nunca pisa usuarios existentes.
    - Siempre deja un warning para rotar el password inicial.

Concurrencia:
    - Dos procesos arrancando a la vez pueden ver el store vacío; el índice
      único decide y el perdedor recibe DuplicateEmailError, que se loguea
      y se ignora.

CRC:
    Component: ensure_bootstrap_admin
    Responsibilities:
      - Chequear flag + store vacío
      - Crear admin vía CredentialStore
    Collaborators:
      - CredentialStore
      - Settings
===============================================================================
"""

from __future__ import annotations

from typing import Protocol
from uuid import UUID

from ..crosscutting.config import Settings
from ..crosscutting.logger import logger
from ..domain.entities import User, UserRole
from ..domain.errors import DuplicateEmailError


class CredentialPort(Protocol):
    """Subset del CredentialStore que usa este task."""

    def count(self) -> int: ...

    def create(
        self,
        name: str,
        email: str,
        password: str,
        role: UserRole,
        created_by: UUID | None = None,
    ) -> User: ...


def ensure_bootstrap_admin(
    settings: Settings, *, credentials: CredentialPort
) -> User | None:
    """
    Devuelve el admin creado, o None si no hizo falta (o perdió la carrera).
    """
    if not settings.bootstrap_admin_enabled:
        return None

    if credentials.count() > 0:
        logger.info("Bootstrap admin: store con usuarios; skipping")
        return None

    email = (settings.bootstrap_admin_email or "").strip()
    password = settings.bootstrap_admin_password or ""
    if not email or not password:
        raise ValueError("Bootstrap admin is enabled but email/password are empty")

    try:
        admin = credentials.create(
            settings.bootstrap_admin_name, email, password, UserRole.ADMIN
        )
    except DuplicateEmailError:
        logger.info(
            "Bootstrap admin: otra instancia ya lo creó; skipping",
            extra={"email": email},
        )
        return None

    logger.info(
        "Bootstrap admin: usuario creado",
        extra={"user_id": str(admin.id), "email": admin.email},
    )
    logger.warning(
        "Bootstrap admin creado con password inicial: rotarlo cuanto antes",
        extra={"email": admin.email},
    )
    return admin
