"""
===============================================================================
TARJETA CRC — api/dependencies.py (Dependencias FastAPI)
===============================================================================

Responsabilidades:
  - Resolver la identidad del request a partir de la cookie de sesión.
  - Re-chequear siempre existencia/estado del usuario; SESSION_RECHECK_USER
    decide si vale el rol actual o el grabado en la sesión.
  - Exponer guardas por tipo de endpoint:
      * páginas: sin sesión -> redirect a /login; sin privilegio -> 403
      * acciones JSON: sin sesión -> 401; sin privilegio -> 403
  - Construir casos de uso por request (factories para Depends).
  - Resolver IP del cliente para auditoría.

Patrones aplicados:
  - DI vía Depends sobre las factories del container: los tests reemplazan
    stores con app.dependency_overrides.

Colaboradores:
  - backoffice.container (stores / managers)
  - identity.guards / identity.sessions
  - crosscutting.error_responses (LoginRedirect, unauthorized, forbidden)
===============================================================================
"""

from __future__ import annotations

from fastapi import Depends, Request

from ..application.usecases.accounts import (
    AuthenticateUseCase,
    CreateAccountUseCase,
    DeleteAccountUseCase,
    GetDashboardStatsUseCase,
    ListAccountsUseCase,
    LogoutUseCase,
    UpdateAccountUseCase,
)
from ..container import (
    get_activity_log_repository,
    get_credential_store,
    get_session_manager,
)
from ..crosscutting.config import Settings, get_settings
from ..crosscutting.error_responses import LoginRedirect, forbidden, unauthorized
from ..crosscutting.logger import logger
from ..domain.entities import SessionIdentity
from ..domain.repositories import ActivityLogRepository
from ..identity.credentials import CredentialStore
from ..identity.errors import ForbiddenError, UnauthenticatedError
from ..identity.guards import refresh_identity, require_authenticated, require_privileged
from ..identity.sessions import SessionManager


# -----------------------------------------------------------------------------
# Request helpers
# -----------------------------------------------------------------------------
def get_session_token(
    request: Request, settings: Settings = Depends(get_settings)
) -> str | None:
    return request.cookies.get(settings.session_cookie_name) or None


def get_client_ip(
    request: Request, settings: Settings = Depends(get_settings)
) -> str | None:
    """IP para auditoría. X-Forwarded-For solo si se confía en el proxy."""
    if settings.trust_proxy_headers:
        forwarded = (request.headers.get("x-forwarded-for") or "").strip()
        if forwarded:
            return forwarded.split(",")[0].strip()
    return request.client.host if request.client else None


# -----------------------------------------------------------------------------
# Identidad
# -----------------------------------------------------------------------------
def get_current_identity(
    request: Request,
    token: str | None = Depends(get_session_token),
    settings: Settings = Depends(get_settings),
    sessions: SessionManager = Depends(get_session_manager),
    credentials: CredentialStore = Depends(get_credential_store),
) -> SessionIdentity | None:
    """None si no hay sesión válida (falta, expiró o el usuario ya no está activo)."""
    if not token:
        return None

    try:
        identity = sessions.validate(token)
        # Existencia/estado siempre; el flag solo decide qué rol vale.
        identity = refresh_identity(
            identity,
            token=token,
            credentials=credentials,
            sessions=sessions,
            trust_session_role=not settings.session_recheck_user,
        )
    except UnauthenticatedError as exc:
        logger.info("Sesión rechazada", extra={"reason": type(exc).__name__})
        return None

    request.state.identity = identity
    return identity


def require_page_user(
    identity: SessionIdentity | None = Depends(get_current_identity),
) -> SessionIdentity:
    try:
        return require_authenticated(identity)
    except UnauthenticatedError as exc:
        raise LoginRedirect() from exc


def require_page_privileged(
    identity: SessionIdentity = Depends(require_page_user),
) -> SessionIdentity:
    try:
        return require_privileged(identity)
    except ForbiddenError as exc:
        raise forbidden() from exc


def require_api_user(
    identity: SessionIdentity | None = Depends(get_current_identity),
) -> SessionIdentity:
    try:
        return require_authenticated(identity)
    except UnauthenticatedError as exc:
        raise unauthorized() from exc


def require_api_privileged(
    identity: SessionIdentity = Depends(require_api_user),
) -> SessionIdentity:
    try:
        return require_privileged(identity)
    except ForbiddenError as exc:
        raise forbidden() from exc


# -----------------------------------------------------------------------------
# Casos de uso (factory por request)
# -----------------------------------------------------------------------------
def get_authenticate_use_case(
    credentials: CredentialStore = Depends(get_credential_store),
    sessions: SessionManager = Depends(get_session_manager),
    activity_log: ActivityLogRepository = Depends(get_activity_log_repository),
) -> AuthenticateUseCase:
    return AuthenticateUseCase(credentials, sessions, activity_log)


def get_logout_use_case(
    sessions: SessionManager = Depends(get_session_manager),
    activity_log: ActivityLogRepository = Depends(get_activity_log_repository),
) -> LogoutUseCase:
    return LogoutUseCase(sessions, activity_log)


def get_list_accounts_use_case(
    credentials: CredentialStore = Depends(get_credential_store),
) -> ListAccountsUseCase:
    return ListAccountsUseCase(credentials)


def get_create_account_use_case(
    credentials: CredentialStore = Depends(get_credential_store),
    activity_log: ActivityLogRepository = Depends(get_activity_log_repository),
) -> CreateAccountUseCase:
    return CreateAccountUseCase(credentials, activity_log)


def get_update_account_use_case(
    credentials: CredentialStore = Depends(get_credential_store),
    activity_log: ActivityLogRepository = Depends(get_activity_log_repository),
) -> UpdateAccountUseCase:
    return UpdateAccountUseCase(credentials, activity_log)


def get_delete_account_use_case(
    credentials: CredentialStore = Depends(get_credential_store),
    activity_log: ActivityLogRepository = Depends(get_activity_log_repository),
) -> DeleteAccountUseCase:
    return DeleteAccountUseCase(credentials, activity_log)


def get_dashboard_stats_use_case(
    credentials: CredentialStore = Depends(get_credential_store),
    activity_log: ActivityLogRepository = Depends(get_activity_log_repository),
) -> GetDashboardStatsUseCase:
    return GetDashboardStatsUseCase(credentials, activity_log)
