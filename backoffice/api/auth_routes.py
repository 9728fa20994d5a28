"""
===============================================================================
TARJETA CRC — api/auth_routes.py (Login / Logout)
===============================================================================

Responsabilidades:
  - GET  /        -> redirect a /dashboard (con sesión) o /login.
  - GET  /login   -> página de login (redirect a /dashboard si ya hay sesión).
  - POST /login   -> canje de credenciales por cookie de sesión.
  - GET  /logout  -> destruir sesión, borrar cookie, redirect a /login.

Patrones aplicados:
  - Presentation Layer: traduce HTTP <-> caso de uso.
  - Cookie httpOnly + SameSite=Lax; Secure según settings.

Colaboradores:
  - application.usecases.accounts (AuthenticateUseCase, LogoutUseCase)
  - api.dependencies
  - crosscutting.error_responses
===============================================================================
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import HTMLResponse, RedirectResponse
from pydantic import BaseModel, Field, field_validator

from ..application.usecases.accounts import (
    AuthenticateInput,
    AuthenticateUseCase,
    LogoutInput,
    LogoutUseCase,
)
from ..crosscutting.config import Settings, get_settings
from ..crosscutting.error_responses import LOGIN_PATH, ActionResponse
from ..domain.entities import SessionIdentity
from .dependencies import (
    get_authenticate_use_case,
    get_client_ip,
    get_current_identity,
    get_logout_use_case,
    get_session_token,
)
from .error_mapping import raise_account_error
from .templates import templates

DASHBOARD_PATH = "/dashboard"

router = APIRouter(tags=["auth"])


# -----------------------------------------------------------------------------
# Modelos HTTP (DTOs)
# -----------------------------------------------------------------------------
class LoginRequest(BaseModel):
    email: str = Field(default="", max_length=320)
    password: str = Field(default="", max_length=512)

    @field_validator("email")
    @classmethod
    def normalizar_email(cls, v: str) -> str:
        return v.strip().lower()


# -----------------------------------------------------------------------------
# Helpers
# -----------------------------------------------------------------------------
def _set_session_cookie(response: Response, token: str, settings: Settings) -> None:
    response.set_cookie(
        key=settings.session_cookie_name,
        value=token,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="lax",
        max_age=settings.session_ttl_seconds,
        path="/",
    )


def _clear_session_cookie(response: Response, settings: Settings) -> None:
    response.delete_cookie(
        key=settings.session_cookie_name,
        path="/",
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="lax",
    )


# -----------------------------------------------------------------------------
# Endpoints
# -----------------------------------------------------------------------------
@router.get("/", include_in_schema=False)
def root(identity: SessionIdentity | None = Depends(get_current_identity)):
    target = DASHBOARD_PATH if identity is not None else LOGIN_PATH
    return RedirectResponse(url=target, status_code=303)


@router.get("/login", response_class=HTMLResponse)
def login_page(
    request: Request,
    identity: SessionIdentity | None = Depends(get_current_identity),
):
    if identity is not None:
        return RedirectResponse(url=DASHBOARD_PATH, status_code=303)
    return templates.TemplateResponse(request, "login.html", {})


@router.post("/login", response_model=ActionResponse, response_model_exclude_none=True)
def login(
    payload: LoginRequest,
    response: Response,
    ip_address: str | None = Depends(get_client_ip),
    settings: Settings = Depends(get_settings),
    use_case: AuthenticateUseCase = Depends(get_authenticate_use_case),
) -> ActionResponse:
    result = use_case.execute(
        AuthenticateInput(
            email=payload.email, password=payload.password, ip_address=ip_address
        )
    )
    if result.error is not None:
        raise_account_error(result.error)

    _set_session_cookie(response, result.token, settings)
    return ActionResponse(success=True, message=result.message)


@router.get("/logout", include_in_schema=False)
def logout(
    token: str | None = Depends(get_session_token),
    ip_address: str | None = Depends(get_client_ip),
    settings: Settings = Depends(get_settings),
    use_case: LogoutUseCase = Depends(get_logout_use_case),
):
    use_case.execute(LogoutInput(token=token, ip_address=ip_address))

    response = RedirectResponse(url=LOGIN_PATH, status_code=303)
    _clear_session_cookie(response, settings)
    return response
