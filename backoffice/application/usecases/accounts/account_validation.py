"""
Validación de inputs del directorio de cuentas.

Cada helper devuelve el valor normalizado o un AccountError de validación.
Rol y estado se parsean contra enums cerrados: un valor desconocido es
VALIDATION_ERROR, nunca un default silencioso.
"""

from __future__ import annotations

import re
from typing import Final

from ....domain.entities import UserRole, UserStatus
from .account_results import AccountError, AccountErrorCode

MAX_NAME_LENGTH: Final[int] = 100
MAX_EMAIL_LENGTH: Final[int] = 320
MAX_PASSWORD_LENGTH: Final[int] = 512

_EMAIL_RE: Final[re.Pattern[str]] = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def _invalid(message: str) -> AccountError:
    return AccountError(code=AccountErrorCode.VALIDATION_ERROR, message=message)


def validate_name(name: str | None) -> str | AccountError:
    normalized = (name or "").strip()
    if not normalized:
        return _invalid("Name is required.")
    if len(normalized) > MAX_NAME_LENGTH:
        return _invalid(f"Name must be at most {MAX_NAME_LENGTH} characters.")
    return normalized


def validate_email(email: str | None) -> str | AccountError:
    normalized = (email or "").strip().lower()
    if not normalized:
        return _invalid("Email is required.")
    if len(normalized) > MAX_EMAIL_LENGTH or not _EMAIL_RE.match(normalized):
        return _invalid("Email is not valid.")
    return normalized


def validate_password(password: str | None) -> str | AccountError:
    if not password:
        return _invalid("Password is required.")
    if len(password) > MAX_PASSWORD_LENGTH:
        return _invalid(f"Password must be at most {MAX_PASSWORD_LENGTH} characters.")
    return password


def parse_role(role: UserRole | str | None) -> UserRole | AccountError:
    try:
        return UserRole((role or "").strip().lower() if isinstance(role, str) else role)
    except ValueError:
        return _invalid("Role must be one of: admin, manager, user.")


def parse_status(status: UserStatus | str | None) -> UserStatus | AccountError:
    try:
        return UserStatus(
            (status or "").strip().lower() if isinstance(status, str) else status
        )
    except ValueError:
        return _invalid("Status must be one of: active, inactive.")
