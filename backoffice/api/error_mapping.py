"""
===============================================================================
TARJETA CRC — api/error_mapping.py (UseCase Error -> HTTP)
===============================================================================

Responsabilidades:
  - Traducir AccountErrorCode a AppHTTPException ({success:false, ...}).
  - Centralizar el mapeo para evitar duplicación en routers.

Reglas:
  - Los use cases devuelven errores tipados (code + message).
  - La API traduce a status codes estables.
===============================================================================
"""

from __future__ import annotations

from ..application.usecases.accounts import AccountError, AccountErrorCode
from ..crosscutting.error_responses import (
    duplicate_email,
    forbidden,
    invalid_credentials,
    not_found,
    self_deletion,
    validation_error,
)


def raise_account_error(error: AccountError) -> None:
    code = error.code
    if code == AccountErrorCode.FORBIDDEN:
        raise forbidden(error.message)
    if code == AccountErrorCode.DUPLICATE_EMAIL:
        raise duplicate_email(error.message)
    if code == AccountErrorCode.SELF_DELETION:
        raise self_deletion(error.message)
    if code == AccountErrorCode.INVALID_CREDENTIALS:
        raise invalid_credentials(error.message)
    if code == AccountErrorCode.NOT_FOUND:
        raise not_found(error.message)

    # Fallback seguro: VALIDATION_ERROR y cualquier código nuevo -> 422.
    raise validation_error(error.message)
