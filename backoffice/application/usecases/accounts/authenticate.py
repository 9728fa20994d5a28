"""
===============================================================================
USE CASE: Authenticate (login)
===============================================================================

Business Goal:
    Canjear email + password por una sesión nueva.

Reglas:
    - No requiere autenticación previa.
    - Cualquier fallo (email desconocido, usuario inactivo, password
      incorrecto, inputs vacíos) es INVALID_CREDENTIALS con UN solo mensaje.
    - En éxito se registra {user, "Login", ip} antes de devolver el token.
    - Se loguea el email del intento, nunca el password ni el token.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass

from ....crosscutting.logger import logger
from ....domain.entities import ActivityAction
from ....domain.repositories import ActivityLogRepository
from ....identity.credentials import CredentialStore, normalize_email
from ....identity.errors import InvalidCredentialsError
from ....identity.sessions import SessionManager
from ...activity_log import record_activity
from .account_results import AccountError, AccountErrorCode, LoginResult

INVALID_CREDENTIALS_MESSAGE = "Invalid credentials"


@dataclass(frozen=True)
class AuthenticateInput:
    email: str
    password: str
    ip_address: str | None = None


class AuthenticateUseCase:
    def __init__(
        self,
        credentials: CredentialStore,
        sessions: SessionManager,
        activity_log: ActivityLogRepository | None,
    ) -> None:
        self._credentials = credentials
        self._sessions = sessions
        self._activity_log = activity_log

    def execute(self, input_data: AuthenticateInput) -> LoginResult:
        email = normalize_email(input_data.email)
        logger.info("Intento de login", extra={"email": email})

        try:
            user = self._credentials.verify(email, input_data.password or "")
        except InvalidCredentialsError:
            logger.info("Login rechazado", extra={"email": email})
            return LoginResult(
                error=AccountError(
                    code=AccountErrorCode.INVALID_CREDENTIALS,
                    message=INVALID_CREDENTIALS_MESSAGE,
                )
            )

        token = self._sessions.create(user.id, user.name, user.role)

        record_activity(
            self._activity_log,
            user.id,
            ActivityAction.LOGIN,
            ip_address=input_data.ip_address,
        )

        logger.info(
            "Login exitoso",
            extra={"user_id": str(user.id), "role": user.role.value},
        )
        return LoginResult(
            token=token,
            message="Login successful",
        )
