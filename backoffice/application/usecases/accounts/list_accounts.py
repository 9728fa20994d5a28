"""
===============================================================================
USE CASE: List Accounts
===============================================================================

Business Goal:
    Devolver el roster completo de cuentas (sin hash de password), más nuevas
    primero, solo a actores privilegiados.

Error Mapping:
    - FORBIDDEN: actor ausente o sin rol admin/manager.
===============================================================================
"""

from __future__ import annotations

from ....domain.entities import SessionIdentity
from ....identity.credentials import CredentialStore
from ....identity.errors import ForbiddenError, UnauthenticatedError
from ....identity.guards import require_privileged
from .account_results import AccountError, AccountErrorCode, AccountListResult


class ListAccountsUseCase:
    def __init__(self, credentials: CredentialStore) -> None:
        self._credentials = credentials

    def execute(self, actor: SessionIdentity | None) -> AccountListResult:
        try:
            require_privileged(actor)
        except (UnauthenticatedError, ForbiddenError):
            return AccountListResult(
                accounts=[],
                error=AccountError(
                    code=AccountErrorCode.FORBIDDEN,
                    message="Only admins and managers can list accounts.",
                ),
            )

        # to_view() descarta password_hash antes de salir del store.
        return AccountListResult(
            accounts=[user.to_view() for user in self._credentials.list()]
        )
