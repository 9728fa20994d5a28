# backoffice/crosscutting/error_responses.py
"""
===============================================================================
MÓDULO: Respuestas de error estándar ({success, message, code})
===============================================================================

Objetivo
--------
Uniformar TODOS los errores HTTP para que:
- El frontend maneje por "success" / "code" sin parsear texto
- El backend correlacione por request_id
- Ningún detalle interno (SQL, stacktrace) llegue al body

-------------------------------------------------------------------------------
CRC (Component Card)
-------------------------------------------------------------------------------
Componente:
  AppHTTPException + LoginRedirect + handlers

Responsabilidades:
  - Definir catálogo de códigos de error (ErrorCode)
  - Construir payload ActionResponse (success=false)
  - Proveer factories de errores frecuentes
  - Redirigir a /login cuando una página requiere sesión

Colaboradores:
  - crosscutting/middleware.py (request_id)
  - api/exception_handlers.py (mapea errores internos)
===============================================================================
"""

from __future__ import annotations

from enum import Enum

from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse, RedirectResponse
from pydantic import BaseModel

LOGIN_PATH = "/login"


class ErrorCode(str, Enum):
    # 4xx
    BAD_REQUEST = "BAD_REQUEST"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"
    DUPLICATE_EMAIL = "DUPLICATE_EMAIL"
    SELF_DELETION = "SELF_DELETION"

    # 5xx
    INTERNAL_ERROR = "INTERNAL_ERROR"
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"


class ActionResponse(BaseModel):
    """
    Contrato de respuesta de las acciones JSON del panel.

    - success: resultado de la operación (el cliente decide por este flag)
    - message: texto para mostrar al operador
    - code: código estable (solo en errores)
    - request_id: correlación con logs (solo en errores)
    """

    success: bool
    message: str
    code: ErrorCode | None = None
    request_id: str | None = None


class AppHTTPException(HTTPException):
    """
    ----------------------------------------------------------------------------
    CRC (Class Card)
    ----------------------------------------------------------------------------
    Clase:
      AppHTTPException

    Responsabilidades:
      - Adjuntar un ErrorCode estable
      - Permitir headers custom

    Colaboradores:
      - app_exception_handler()
    ----------------------------------------------------------------------------
    """

    def __init__(
        self,
        status_code: int,
        code: ErrorCode,
        detail: str,
        headers: dict[str, str] | None = None,
    ):
        super().__init__(status_code=status_code, detail=detail, headers=headers)
        self.code = code


class LoginRedirect(Exception):
    """Señal para páginas HTML: no hay sesión válida, volver a /login."""


# ---------------------------------------------------------------------------
# Factories de error (helpers)
# ---------------------------------------------------------------------------
def validation_error(detail: str) -> AppHTTPException:
    return AppHTTPException(422, ErrorCode.VALIDATION_ERROR, detail)


def invalid_credentials(detail: str = "Invalid credentials") -> AppHTTPException:
    return AppHTTPException(401, ErrorCode.INVALID_CREDENTIALS, detail)


def unauthorized(detail: str = "Authentication required.") -> AppHTTPException:
    return AppHTTPException(401, ErrorCode.UNAUTHORIZED, detail)


def forbidden(detail: str = "Access denied.") -> AppHTTPException:
    return AppHTTPException(403, ErrorCode.FORBIDDEN, detail)


def not_found(detail: str = "Not found.") -> AppHTTPException:
    return AppHTTPException(404, ErrorCode.NOT_FOUND, detail)


def duplicate_email(detail: str = "Email is already registered.") -> AppHTTPException:
    return AppHTTPException(409, ErrorCode.DUPLICATE_EMAIL, detail)


def self_deletion(
    detail: str = "Cannot delete your own account",
) -> AppHTTPException:
    return AppHTTPException(400, ErrorCode.SELF_DELETION, detail)


def internal_error(detail: str = "An unexpected error occurred.") -> AppHTTPException:
    return AppHTTPException(500, ErrorCode.INTERNAL_ERROR, detail)


def service_unavailable(
    detail: str = "Service temporarily unavailable.",
) -> AppHTTPException:
    return AppHTTPException(503, ErrorCode.SERVICE_UNAVAILABLE, detail)


# ---------------------------------------------------------------------------
# Handlers FastAPI
# ---------------------------------------------------------------------------
def request_id_from(request: Request) -> str | None:
    return getattr(getattr(request, "state", None), "request_id", None)


def error_body(
    request: Request, *, code: ErrorCode, message: str
) -> dict[str, object]:
    """Payload {success:false, ...} común a todos los handlers."""
    body = ActionResponse(
        success=False,
        message=message,
        code=code,
        request_id=request_id_from(request),
    )
    return body.model_dump(mode="json", exclude_none=True)


async def app_exception_handler(
    request: Request, exc: AppHTTPException
) -> JSONResponse:
    """Handler para AppHTTPException (propaga headers opcionales)."""
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(request, code=exc.code, message=str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


async def login_redirect_handler(
    request: Request, exc: LoginRedirect
) -> RedirectResponse:
    """Páginas sin sesión: 303 a /login (nunca para Forbidden)."""
    return RedirectResponse(url=LOGIN_PATH, status_code=303)
