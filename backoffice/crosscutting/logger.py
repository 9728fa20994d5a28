"""
===============================================================================
TARJETA CRC — crosscutting/logger.py (Logger de la consola)
===============================================================================

Responsabilidades:
  - Emitir una línea JSON por evento con el contexto del request.
  - Redactar lo que nunca debe llegar a un log: passwords, hashes,
    tokens/cookies de sesión, secretos y URLs con credenciales.
  - Recortar campos de texto largos (details de auditoría, errores de driver).

Colaboradores:
  - backoffice/context.py (request_id / method / path)
  - crosscutting/config.py (log_level, log_json vía configure_logging)

Notas:
  - El email del login SÍ se loguea; la password nunca.
===============================================================================
"""

from __future__ import annotations

import json
import logging
import sys
import traceback
from datetime import datetime, timezone
from typing import Any

from ..context import get_context_dict

LOGGER_NAME = "backoffice"
REDACTED = "***REDACTADO***"
MAX_FIELD_CHARS = 2_000

SENSITIVE_KEYS = frozenset(
    {
        "password",
        "password_hash",
        "bootstrap_admin_password",
        "token",
        "session_token",
        "sessionid",
        "session_secret",
        "cookie",
        "set-cookie",
        "database_url",
        "redis_url",
    }
)

# Atributos estándar de LogRecord: todo lo demás vino por extra=.
_RECORD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime"}


def redact(value: Any, key: str | None = None) -> Any:
    if key is not None and key.lower() in SENSITIVE_KEYS:
        return REDACTED
    if isinstance(value, str) and len(value) > MAX_FIELD_CHARS:
        return value[:MAX_FIELD_CHARS] + "…(truncado)"
    if isinstance(value, dict):
        return {str(k): redact(v, str(k)) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [redact(v) for v in value]
    return value


class JSONFormatter(logging.Formatter):
    """LogRecord -> JSON con contexto del request y extras redactados."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **get_context_dict(),
        }

        for key, value in vars(record).items():
            if key not in _RECORD_ATTRS:
                payload[key] = redact(value, key)

        if record.exc_info and record.exc_info[0] is not None:
            payload["exception"] = {
                "type": record.exc_info[0].__name__,
                "stacktrace": "".join(traceback.format_exception(*record.exc_info)),
            }

        return json.dumps(payload, ensure_ascii=False, default=str)


def configure_logging(level: str = "INFO", json_output: bool = True) -> logging.Logger:
    """(Re)configura el logger de la consola; idempotente."""
    log = logging.getLogger(LOGGER_NAME)
    log.setLevel(getattr(logging, (level or "INFO").upper(), logging.INFO))

    if not log.handlers:
        log.addHandler(logging.StreamHandler(sys.stdout))
    formatter = (
        JSONFormatter()
        if json_output
        else logging.Formatter("%(levelname)s %(name)s %(message)s")
    )
    for handler in log.handlers:
        handler.setFormatter(formatter)
    return log


logger = configure_logging()
