"""
===============================================================================
TARJETA CRC — identity/guards.py
===============================================================================

Módulo:
    Authorization Guard

Responsabilidades:
    - require_authenticated: hay identidad o UnauthenticatedError.
    - require_privileged: además el rol es admin/manager o ForbiddenError.
    - refresh_identity: re-leer el usuario para que rol/estado actuales
      prevalezcan sobre lo que quedó grabado en la sesión.

Colaboradores:
    - domain.entities.SessionIdentity
    - identity.credentials.CredentialStore (refresh_identity)
    - identity.sessions.SessionManager (destroy al invalidar)

Notas:
    - Unauthenticated y Forbidden son distintos: el primero vuelve a /login,
      el segundo es 403 y nunca redirige.
===============================================================================
"""

from __future__ import annotations

from ..domain.entities import SessionIdentity
from .credentials import CredentialStore
from .errors import ForbiddenError, UnauthenticatedError
from .sessions import SessionManager


def require_authenticated(identity: SessionIdentity | None) -> SessionIdentity:
    if identity is None:
        raise UnauthenticatedError()
    return identity


def require_privileged(identity: SessionIdentity | None) -> SessionIdentity:
    identity = require_authenticated(identity)
    if not identity.is_privileged:
        raise ForbiddenError()
    return identity


def refresh_identity(
    identity: SessionIdentity,
    *,
    token: str,
    credentials: CredentialStore,
    sessions: SessionManager,
    trust_session_role: bool = False,
) -> SessionIdentity:
    """
    Devuelve la identidad con nombre/rol actuales.

    Si el usuario ya no existe o está inactivo, la sesión se destruye y se
    levanta UnauthenticatedError. Con trust_session_role se conserva el rol
    grabado en la sesión; el chequeo de existencia/estado se hace igual.
    """
    user = credentials.get(identity.user_id)
    if user is None or not user.is_active:
        sessions.destroy(token)
        raise UnauthenticatedError("Session user is no longer active")

    if trust_session_role:
        return identity
    if user.role == identity.user_role and user.name == identity.user_name:
        return identity
    return SessionIdentity(user_id=user.id, user_name=user.name, user_role=user.role)
