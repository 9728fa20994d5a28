"""
===============================================================================
USE CASE: Logout
===============================================================================

Business Goal:
    Destruir la sesión del token recibido (revocación inmediata).

Reglas:
    - Idempotente: sin token, con token desconocido o expirado no falla.
    - Solo si la sesión era válida se registra {user, "Logout"}.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass

from ....domain.entities import ActivityAction, SessionIdentity
from ....domain.repositories import ActivityLogRepository
from ....identity.errors import UnauthenticatedError
from ....identity.sessions import SessionManager
from ...activity_log import record_activity


@dataclass(frozen=True)
class LogoutInput:
    token: str | None
    ip_address: str | None = None


class LogoutUseCase:
    def __init__(
        self,
        sessions: SessionManager,
        activity_log: ActivityLogRepository | None,
    ) -> None:
        self._sessions = sessions
        self._activity_log = activity_log

    def execute(self, input_data: LogoutInput) -> SessionIdentity | None:
        """Devuelve la identidad que cerró sesión, o None si no había."""
        try:
            identity = self._sessions.validate(input_data.token)
        except UnauthenticatedError:
            identity = None

        self._sessions.destroy(input_data.token)

        if identity is not None:
            record_activity(
                self._activity_log,
                identity.user_id,
                ActivityAction.LOGOUT,
                ip_address=input_data.ip_address,
            )
        return identity
