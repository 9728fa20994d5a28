"""
===============================================================================
TARJETA CRC — api/exception_handlers.py (Manejo Centralizado de Excepciones)
===============================================================================

Responsabilidades:
  - Traducir excepciones a respuestas {success:false, message, code, request_id}.
  - Centralizar logging de errores con request_id + error_id.
  - No filtrar NUNCA detalles internos (SQL, stacktrace, texto de excepción).

Patrones aplicados:
  - Exception Mapping (Presentation Layer).
  - Fail-safe: cualquier excepción no tipada -> INTERNAL_ERROR (con logging).

Colaboradores:
  - crosscutting.error_responses
  - crosscutting.exceptions (ConsoleError y derivadas)
  - infrastructure.db.errors (pool no inicializado)
===============================================================================
"""

from __future__ import annotations

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..crosscutting.error_responses import (
    AppHTTPException,
    ErrorCode,
    LoginRedirect,
    app_exception_handler,
    error_body,
    internal_error,
    login_redirect_handler,
    request_id_from,
    service_unavailable,
)
from ..crosscutting.exceptions import ConsoleError
from ..crosscutting.logger import logger
from ..infrastructure.db.errors import DatabasePoolError

_STATUS_CODES: dict[int, ErrorCode] = {
    401: ErrorCode.UNAUTHORIZED,
    403: ErrorCode.FORBIDDEN,
    404: ErrorCode.NOT_FOUND,
    422: ErrorCode.VALIDATION_ERROR,
}


async def console_error_handler(request: Request, exc: ConsoleError) -> JSONResponse:
    """DatabaseError / SessionStoreError -> 503 genérico."""
    logger.error(
        "Error de infraestructura",
        extra={
            "code": exc.error_code,
            "error_id": exc.error_id,
            "request_id": request_id_from(request),
        },
    )
    return await app_exception_handler(request, service_unavailable())


async def pool_error_handler(request: Request, exc: DatabasePoolError) -> JSONResponse:
    logger.error(
        "Pool DB no disponible",
        extra={"error": str(exc), "request_id": request_id_from(request)},
    )
    return await app_exception_handler(request, service_unavailable())


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    # Solo ubicaciones de campo; los valores recibidos no vuelven al cliente.
    fields = [".".join(str(p) for p in err.get("loc", ())) for err in exc.errors()]
    logger.info("Body inválido", extra={"fields": fields})
    return JSONResponse(
        status_code=422,
        content=error_body(
            request, code=ErrorCode.VALIDATION_ERROR, message="Invalid request body."
        ),
    )


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """404 de rutas, 405, etc. con el mismo contrato de body."""
    code = _STATUS_CODES.get(exc.status_code)
    if code is None:
        code = (
            ErrorCode.INTERNAL_ERROR if exc.status_code >= 500 else ErrorCode.BAD_REQUEST
        )
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(request, code=code, message=str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Handler defensivo para excepciones no tipadas.

    - Log completo (stacktrace).
    - Respuesta genérica en todos los entornos.
    """
    logger.error(
        "Excepción no controlada",
        exc_info=exc,
        extra={"request_id": request_id_from(request)},
    )
    return await app_exception_handler(request, internal_error())


def register_exception_handlers(app) -> None:
    """
    Registra handlers en la app FastAPI.

    Importante:
      - AppHTTPException antes que HTTPException genérico (lookup por MRO).
      - Exception genérica se registra al final como fallback.
    """
    app.add_exception_handler(LoginRedirect, login_redirect_handler)
    app.add_exception_handler(ConsoleError, console_error_handler)
    app.add_exception_handler(DatabasePoolError, pool_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(AppHTTPException, app_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)


__all__ = ["register_exception_handlers"]
