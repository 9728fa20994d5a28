"""
===============================================================================
TARJETA CRC — api/user_routes.py (Dashboard + Directorio de cuentas)
===============================================================================

Responsabilidades:
  - GET  /dashboard     -> stats (requiere sesión; sin sesión redirect).
  - GET  /users         -> roster (privilegiado; sin sesión redirect, sin
                           privilegio 403 JSON).
  - POST /users/create  -> alta (privilegiado; 401/403 JSON). 201 en éxito.
  - POST /users/update  -> modificación (privilegiado).
  - POST /users/delete  -> baja (privilegiado; nunca la propia cuenta).

Colaboradores:
  - application.usecases.accounts
  - api.dependencies (guardas + factories)
  - api.error_mapping (AccountError -> HTTP)
===============================================================================
"""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import HTMLResponse
from pydantic import BaseModel

from ..application.usecases.accounts import (
    CreateAccountInput,
    CreateAccountUseCase,
    DeleteAccountInput,
    DeleteAccountUseCase,
    GetDashboardStatsUseCase,
    ListAccountsUseCase,
    UpdateAccountInput,
    UpdateAccountUseCase,
)
from ..crosscutting.error_responses import ActionResponse
from ..domain.entities import SessionIdentity
from .dependencies import (
    get_client_ip,
    get_create_account_use_case,
    get_dashboard_stats_use_case,
    get_delete_account_use_case,
    get_list_accounts_use_case,
    get_update_account_use_case,
    require_api_privileged,
    require_api_user,
    require_page_privileged,
    require_page_user,
)
from .error_mapping import raise_account_error
from .templates import templates

router = APIRouter(tags=["users"])


# -----------------------------------------------------------------------------
# Modelos HTTP (DTOs)
# -----------------------------------------------------------------------------
# La validación de negocio (largos, formato, enums) vive en los use cases;
# acá solo se fija la forma del body.
class CreateUserRequest(BaseModel):
    name: str = ""
    email: str = ""
    password: str = ""
    role: str = ""


class UpdateUserRequest(BaseModel):
    id: UUID
    name: str = ""
    email: str = ""
    role: str = ""
    status: str = ""


class DeleteUserRequest(BaseModel):
    id: UUID


def _user_context(identity: SessionIdentity) -> dict[str, object]:
    return {
        "name": identity.user_name,
        "role": identity.user_role.value,
        "is_privileged": identity.is_privileged,
    }


# -----------------------------------------------------------------------------
# Páginas
# -----------------------------------------------------------------------------
@router.get("/dashboard", response_class=HTMLResponse)
def dashboard_page(
    request: Request,
    identity: SessionIdentity = Depends(require_page_user),
    use_case: GetDashboardStatsUseCase = Depends(get_dashboard_stats_use_case),
):
    result = use_case.execute(identity)
    if result.error is not None:
        raise_account_error(result.error)

    return templates.TemplateResponse(
        request,
        "dashboard.html",
        {
            "user": _user_context(identity),
            "stats": {
                "total_users": result.total_users,
                "today_activity": result.today_activity,
            },
            "recent_users": result.recent_users,
        },
    )


@router.get("/users", response_class=HTMLResponse)
def users_page(
    request: Request,
    identity: SessionIdentity = Depends(require_page_privileged),
    use_case: ListAccountsUseCase = Depends(get_list_accounts_use_case),
):
    result = use_case.execute(identity)
    if result.error is not None:
        raise_account_error(result.error)

    return templates.TemplateResponse(
        request,
        "users.html",
        {"user": _user_context(identity), "users": result.accounts},
    )


# -----------------------------------------------------------------------------
# Acciones JSON
# -----------------------------------------------------------------------------
@router.post(
    "/users/create",
    response_model=ActionResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
def create_user(
    payload: CreateUserRequest,
    actor: SessionIdentity = Depends(require_api_privileged),
    ip_address: str | None = Depends(get_client_ip),
    use_case: CreateAccountUseCase = Depends(get_create_account_use_case),
) -> ActionResponse:
    result = use_case.execute(
        CreateAccountInput(
            actor=actor,
            name=payload.name,
            email=payload.email,
            password=payload.password,
            role=payload.role,
            ip_address=ip_address,
        )
    )
    if result.error is not None:
        raise_account_error(result.error)
    return ActionResponse(success=True, message=result.message)


@router.post(
    "/users/update", response_model=ActionResponse, response_model_exclude_none=True
)
def update_user(
    payload: UpdateUserRequest,
    actor: SessionIdentity = Depends(require_api_privileged),
    ip_address: str | None = Depends(get_client_ip),
    use_case: UpdateAccountUseCase = Depends(get_update_account_use_case),
) -> ActionResponse:
    result = use_case.execute(
        UpdateAccountInput(
            actor=actor,
            user_id=payload.id,
            name=payload.name,
            email=payload.email,
            role=payload.role,
            status=payload.status,
            ip_address=ip_address,
        )
    )
    if result.error is not None:
        raise_account_error(result.error)
    return ActionResponse(success=True, message=result.message)


@router.post(
    "/users/delete", response_model=ActionResponse, response_model_exclude_none=True
)
def delete_user(
    payload: DeleteUserRequest,
    # Solo sesión: SELF_DELETION se decide antes que el privilegio (use case).
    actor: SessionIdentity = Depends(require_api_user),
    ip_address: str | None = Depends(get_client_ip),
    use_case: DeleteAccountUseCase = Depends(get_delete_account_use_case),
) -> ActionResponse:
    result = use_case.execute(
        DeleteAccountInput(actor=actor, user_id=payload.id, ip_address=ip_address)
    )
    if result.error is not None:
        raise_account_error(result.error)
    return ActionResponse(success=True, message=result.message)
