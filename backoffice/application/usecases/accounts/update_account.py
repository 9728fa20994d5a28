"""
===============================================================================
USE CASE: Update Account
===============================================================================

Business Goal:
    Actualizar nombre, email, rol y estado de una cuenta existente.
    updated_at se refresca en el store; la auditoría registra el id afectado.

Error Mapping:
    - FORBIDDEN: actor ausente o sin privilegio.
    - VALIDATION_ERROR: inputs inválidos (incluye rol/estado fuera del enum).
    - NOT_FOUND: la cuenta no existe.
    - DUPLICATE_EMAIL: el email nuevo pertenece a otra cuenta.

Notas:
    - Desactivar una cuenta no destruye sus sesiones activas en el momento:
      la próxima validación con re-check las invalida.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID

from ....domain.entities import ActivityAction, SessionIdentity, UserRole, UserStatus
from ....domain.errors import DuplicateEmailError, UserNotFoundError
from ....domain.repositories import ActivityLogRepository
from ....identity.credentials import CredentialStore
from ....identity.errors import ForbiddenError, UnauthenticatedError
from ....identity.guards import require_privileged
from ...activity_log import record_activity
from .account_results import AccountError, AccountErrorCode, AccountResult
from .account_validation import parse_role, parse_status, validate_email, validate_name


@dataclass(frozen=True)
class UpdateAccountInput:
    actor: SessionIdentity | None
    user_id: UUID
    name: str
    email: str
    role: UserRole | str
    status: UserStatus | str
    ip_address: str | None = None


class UpdateAccountUseCase:
    def __init__(
        self,
        credentials: CredentialStore,
        activity_log: ActivityLogRepository | None,
    ) -> None:
        self._credentials = credentials
        self._activity_log = activity_log

    def execute(self, input_data: UpdateAccountInput) -> AccountResult:
        try:
            actor = require_privileged(input_data.actor)
        except (UnauthenticatedError, ForbiddenError):
            return self._error(
                AccountErrorCode.FORBIDDEN,
                "Only admins and managers can update accounts.",
            )

        name = validate_name(input_data.name)
        if isinstance(name, AccountError):
            return AccountResult(error=name)
        email = validate_email(input_data.email)
        if isinstance(email, AccountError):
            return AccountResult(error=email)
        role = parse_role(input_data.role)
        if isinstance(role, AccountError):
            return AccountResult(error=role)
        status = parse_status(input_data.status)
        if isinstance(status, AccountError):
            return AccountResult(error=status)

        try:
            updated = self._credentials.update(
                input_data.user_id, name, email, role, status
            )
        except UserNotFoundError:
            return self._error(AccountErrorCode.NOT_FOUND, "User not found.")
        except DuplicateEmailError:
            return self._error(
                AccountErrorCode.DUPLICATE_EMAIL, "Email is already registered."
            )

        record_activity(
            self._activity_log,
            actor.user_id,
            ActivityAction.UPDATE_USER,
            details=f"Updated user ID: {updated.id}",
            ip_address=input_data.ip_address,
        )

        return AccountResult(
            account=updated.to_view(), message="User updated successfully"
        )

    @staticmethod
    def _error(code: AccountErrorCode, message: str) -> AccountResult:
        return AccountResult(error=AccountError(code=code, message=message))
