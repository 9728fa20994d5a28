"""
===============================================================================
USE CASE: Create Account
===============================================================================

Business Goal:
    Crear una cuenta nueva desde el panel, garantizando:
      - solo actores privilegiados (admin/manager)
      - inputs válidos (nombre, email, password, rol del enum cerrado)
      - email único (lo decide el índice único del store)
      - created_by = actor
      - exactamente una entrada de auditoría "Create User" en éxito

-------------------------------------------------------------------------------
CRC CARD
-------------------------------------------------------------------------------
Class:
    CreateAccountUseCase

Responsibilities:
    - Validar actor y privilegio.
    - Validar/normalizar inputs.
    - Persistir vía CredentialStore.create.
    - Registrar actividad (best-effort).

Collaborators:
    - CredentialStore
    - ActivityLogRepository (vía record_activity)
    - account_results / account_validation

Error Mapping:
    - FORBIDDEN: actor ausente o sin privilegio.
    - VALIDATION_ERROR: inputs inválidos.
    - DUPLICATE_EMAIL: email ya registrado.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass

from ....domain.entities import ActivityAction, SessionIdentity, UserRole
from ....domain.errors import DuplicateEmailError
from ....domain.repositories import ActivityLogRepository
from ....identity.credentials import CredentialStore
from ....identity.errors import ForbiddenError, UnauthenticatedError
from ....identity.guards import require_privileged
from ...activity_log import record_activity
from .account_results import AccountError, AccountErrorCode, AccountResult
from .account_validation import (
    parse_role,
    validate_email,
    validate_name,
    validate_password,
)


@dataclass(frozen=True)
class CreateAccountInput:
    actor: SessionIdentity | None
    name: str
    email: str
    password: str
    role: UserRole | str
    ip_address: str | None = None


class CreateAccountUseCase:
    def __init__(
        self,
        credentials: CredentialStore,
        activity_log: ActivityLogRepository | None,
    ) -> None:
        self._credentials = credentials
        self._activity_log = activity_log

    def execute(self, input_data: CreateAccountInput) -> AccountResult:
        # ---------------------------------------------------------------------
        # 1) Privilegio del actor.
        # ---------------------------------------------------------------------
        try:
            actor = require_privileged(input_data.actor)
        except (UnauthenticatedError, ForbiddenError):
            return self._forbidden("Only admins and managers can create accounts.")

        # ---------------------------------------------------------------------
        # 2) Validar inputs (primer error gana).
        # ---------------------------------------------------------------------
        name = validate_name(input_data.name)
        if isinstance(name, AccountError):
            return AccountResult(error=name)
        email = validate_email(input_data.email)
        if isinstance(email, AccountError):
            return AccountResult(error=email)
        password = validate_password(input_data.password)
        if isinstance(password, AccountError):
            return AccountResult(error=password)
        role = parse_role(input_data.role)
        if isinstance(role, AccountError):
            return AccountResult(error=role)

        # ---------------------------------------------------------------------
        # 3) Persistir (unicidad decidida por el store).
        # ---------------------------------------------------------------------
        try:
            created = self._credentials.create(
                name, email, password, role, created_by=actor.user_id
            )
        except DuplicateEmailError:
            return self._duplicate_email()

        # ---------------------------------------------------------------------
        # 4) Auditoría.
        # ---------------------------------------------------------------------
        record_activity(
            self._activity_log,
            actor.user_id,
            ActivityAction.CREATE_USER,
            details=f"Created user: {created.email}",
            ip_address=input_data.ip_address,
        )

        return AccountResult(
            account=created.to_view(), message="User created successfully"
        )

    @staticmethod
    def _forbidden(message: str) -> AccountResult:
        return AccountResult(
            error=AccountError(code=AccountErrorCode.FORBIDDEN, message=message)
        )

    @staticmethod
    def _duplicate_email() -> AccountResult:
        return AccountResult(
            error=AccountError(
                code=AccountErrorCode.DUPLICATE_EMAIL,
                message="Email is already registered.",
            )
        )
