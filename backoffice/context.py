"""
===============================================================================
TARJETA CRC — backoffice/context.py (Contexto de log por request)
===============================================================================

Responsabilidades:
  - Guardar los datos de correlación del request en curso
    (request_id, method, path) para que el formatter JSON los agregue.

Colaboradores:
  - crosscutting.middleware: bind_context() al entrar, clear_context() al salir.
  - crosscutting.logger: get_context_dict() en cada línea.

Restricciones:
  - Un único ContextVar con un mapping inmutable: bind_context() reemplaza,
    nunca muta el mapping de otro request.
===============================================================================
"""

from __future__ import annotations

from contextvars import ContextVar
from types import MappingProxyType
from typing import Mapping

CONTEXT_KEYS = ("request_id", "method", "path")

_EMPTY: Mapping[str, str] = MappingProxyType({})
_log_context: ContextVar[Mapping[str, str]] = ContextVar(
    "backoffice_log_context", default=_EMPTY
)


def bind_context(**values: object) -> None:
    """Agrega claves al contexto actual. Vacíos y None se omiten."""
    unknown = set(values) - set(CONTEXT_KEYS)
    if unknown:
        raise ValueError(f"Unknown log context keys: {sorted(unknown)}")

    merged = dict(_log_context.get())
    merged.update({k: str(v) for k, v in values.items() if v})
    _log_context.set(MappingProxyType(merged))


def get_context_dict() -> dict[str, str]:
    return dict(_log_context.get())


def clear_context() -> None:
    _log_context.set(_EMPTY)
