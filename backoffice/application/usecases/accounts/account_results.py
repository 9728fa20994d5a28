"""
===============================================================================
ACCOUNT USE CASE RESULTS (Shared Result / Error Models)
===============================================================================

Business Goal:
    Proveer modelos compartidos de resultados y errores para los casos de uso
    del directorio de cuentas, con un contrato estable para:
      - validaciones
      - autorización
      - recursos no encontrados
      - unicidad de email / auto-eliminación / credenciales

Why:
    - Los use cases devuelven resultados tipados en lugar de lanzar
      excepciones de negocio; la capa HTTP mapea code -> status.
    - Errores de infraestructura (DatabaseError, SessionStoreError) NO se
      convierten acá: se propagan y los mapean los exception handlers.

-------------------------------------------------------------------------------
CRC CARD
-------------------------------------------------------------------------------
Component:
    account_results models (module)

Responsibilities:
    - AccountErrorCode: set acotado de códigos estables.
    - AccountError: code + message.
    - Resultados por tipo de operación.

Collaborators:
    - domain.entities.AccountView
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List

from ....domain.entities import AccountView


class AccountErrorCode(str, Enum):
    """
    Códigos:
      - VALIDATION_ERROR: input malformado (incluye rol/estado desconocido).
      - DUPLICATE_EMAIL: otro usuario ya tiene ese email.
      - NOT_FOUND: la cuenta objetivo no existe.
      - SELF_DELETION: el actor intentó eliminar su propia cuenta.
      - FORBIDDEN: el actor no tiene rol privilegiado.
      - INVALID_CREDENTIALS: login fallido (nunca dice por qué).
    """

    VALIDATION_ERROR = "VALIDATION_ERROR"
    DUPLICATE_EMAIL = "DUPLICATE_EMAIL"
    NOT_FOUND = "NOT_FOUND"
    SELF_DELETION = "SELF_DELETION"
    FORBIDDEN = "FORBIDDEN"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"


@dataclass(frozen=True)
class AccountError:
    code: AccountErrorCode
    message: str


@dataclass
class AccountResult:
    """Create / Update: cuenta resultante o error."""

    account: AccountView | None = None
    message: str = ""
    error: AccountError | None = None


@dataclass
class AccountListResult:
    accounts: List[AccountView] = field(default_factory=list)
    error: AccountError | None = None


@dataclass
class DeleteAccountResult:
    deleted: bool
    message: str = ""
    error: AccountError | None = None


@dataclass
class LoginResult:
    """
    En éxito: token opaco (va a la cookie).
    El token nunca se loguea.
    """

    token: str | None = None
    message: str = ""
    error: AccountError | None = None


@dataclass
class DashboardStatsResult:
    total_users: int = 0
    today_activity: int = 0
    recent_users: List[AccountView] = field(default_factory=list)
    error: AccountError | None = None
