"""
===============================================================================
USE CASE: Get Dashboard Stats
===============================================================================

Business Goal:
    Read path del dashboard. Requiere solo autenticación (no privilegio):
      - total de usuarios
      - actividad de hoy (desde el inicio del día UTC)
      - cinco cuentas creadas más recientemente

Error Mapping:
    - FORBIDDEN: sin actor (la capa HTTP ya redirige antes de llegar acá).
===============================================================================
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable

from ....domain.entities import SessionIdentity
from ....domain.repositories import ActivityLogRepository
from ....identity.credentials import CredentialStore
from ....identity.errors import UnauthenticatedError
from ....identity.guards import require_authenticated
from .account_results import AccountError, AccountErrorCode, DashboardStatsResult

RECENT_USERS_LIMIT = 5


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def start_of_day(now: datetime) -> datetime:
    return now.astimezone(timezone.utc).replace(
        hour=0, minute=0, second=0, microsecond=0
    )


class GetDashboardStatsUseCase:
    def __init__(
        self,
        credentials: CredentialStore,
        activity_log: ActivityLogRepository,
        *,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._credentials = credentials
        self._activity_log = activity_log
        self._clock = clock or _utcnow

    def execute(self, actor: SessionIdentity | None) -> DashboardStatsResult:
        try:
            require_authenticated(actor)
        except UnauthenticatedError:
            return DashboardStatsResult(
                error=AccountError(
                    code=AccountErrorCode.FORBIDDEN,
                    message="Authentication required.",
                )
            )

        return DashboardStatsResult(
            total_users=self._credentials.count(),
            today_activity=self._activity_log.count_since(start_of_day(self._clock())),
            recent_users=[
                user.to_view()
                for user in self._credentials.list_recent(RECENT_USERS_LIMIT)
            ],
        )
