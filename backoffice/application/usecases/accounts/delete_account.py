"""
===============================================================================
USE CASE: Delete Account
===============================================================================

Business Goal:
    Eliminar una cuenta. Regla de auto-protección: nadie puede eliminar su
    propia cuenta, sin importar el rol. Ese chequeo corre ANTES del chequeo
    de privilegio y antes de tocar el store.

Efectos colaterales (los aplica el store):
    - created_by de las cuentas que creó el eliminado -> NULL.
    - activity_log.user_id de sus entradas -> NULL (se conservan).

Error Mapping:
    - SELF_DELETION: target == actor.
    - FORBIDDEN: actor ausente o sin privilegio.
    - NOT_FOUND: la cuenta no existe.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID

from ....domain.entities import ActivityAction, SessionIdentity
from ....domain.errors import UserNotFoundError
from ....domain.repositories import ActivityLogRepository
from ....identity.credentials import CredentialStore
from ....identity.errors import ForbiddenError, UnauthenticatedError
from ....identity.guards import require_privileged
from ...activity_log import record_activity
from .account_results import AccountError, AccountErrorCode, DeleteAccountResult


@dataclass(frozen=True)
class DeleteAccountInput:
    actor: SessionIdentity | None
    user_id: UUID
    ip_address: str | None = None


class DeleteAccountUseCase:
    def __init__(
        self,
        credentials: CredentialStore,
        activity_log: ActivityLogRepository | None,
    ) -> None:
        self._credentials = credentials
        self._activity_log = activity_log

    def execute(self, input_data: DeleteAccountInput) -> DeleteAccountResult:
        actor = input_data.actor

        # 1) Auto-protección (sin consultar el store).
        if actor is not None and input_data.user_id == actor.user_id:
            return self._error(
                AccountErrorCode.SELF_DELETION, "Cannot delete your own account"
            )

        # 2) Privilegio.
        try:
            actor = require_privileged(actor)
        except (UnauthenticatedError, ForbiddenError):
            return self._error(
                AccountErrorCode.FORBIDDEN,
                "Only admins and managers can delete accounts.",
            )

        # 3) Eliminar.
        try:
            self._credentials.delete(input_data.user_id)
        except UserNotFoundError:
            return self._error(AccountErrorCode.NOT_FOUND, "User not found.")

        # 4) Auditoría.
        record_activity(
            self._activity_log,
            actor.user_id,
            ActivityAction.DELETE_USER,
            details=f"Deleted user ID: {input_data.user_id}",
            ip_address=input_data.ip_address,
        )

        return DeleteAccountResult(deleted=True, message="User deleted successfully")

    @staticmethod
    def _error(code: AccountErrorCode, message: str) -> DeleteAccountResult:
        return DeleteAccountResult(
            deleted=False, error=AccountError(code=code, message=message)
        )
