"""
===============================================================================
TARJETA CRC — application/activity_log.py (Emisión de auditoría)
===============================================================================

Responsabilidades:
  - Construir entradas de actividad con formato consistente
    (actor / acción / detalle / IP).
  - Persistir vía ActivityLogRepository (puerto del dominio).
  - "Best-effort": si falla la persistencia, NO rompe el flujo de negocio.

Colaboradores:
  - domain.entities.ActivityLogEntry / ActivityAction
  - domain.repositories.ActivityLogRepository
  - crosscutting.logger

Decisiones:
  - La escritura se hace ANTES de responder (el caller la espera).
  - Un fallo deja la mutación reportada como exitosa y sin entrada de
    auditoría; queda solo el warning en logs. Riesgo aceptado.
===============================================================================
"""

from __future__ import annotations

from uuid import UUID, uuid4

from ..crosscutting.logger import logger
from ..domain.entities import ActivityAction, ActivityLogEntry
from ..domain.repositories import ActivityLogRepository


def record_activity(
    repository: ActivityLogRepository | None,
    user_id: UUID | None,
    action: ActivityAction,
    details: str | None = None,
    ip_address: str | None = None,
) -> None:
    """
    Registra una acción auditada.

    Regla clave:
      - Si repository es None o falla al escribir, NO se lanza excepción.
    """
    if repository is None:
        return

    entry = ActivityLogEntry(
        id=uuid4(),
        user_id=user_id,
        action=action,
        details=details,
        ip_address=ip_address,
    )

    try:
        repository.append(entry)
    except Exception as exc:
        logger.warning(
            "Falló la escritura del log de actividad",
            extra={
                "action": action.value,
                "user_id": str(user_id) if user_id else None,
                "error": str(exc),
            },
        )
