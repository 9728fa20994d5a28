"""
===============================================================================
TARJETA CRC — backoffice/container.py (Composition Root / DI manual)
===============================================================================

Responsabilidades:
  - Componer dependencias (repositorios, stores, managers) siguiendo DIP.
  - Exponer factories para FastAPI (Depends) y para el bootstrap.
  - Mantener singletons con caching (lru_cache).
  - Seleccionar backends según Settings:
      STORE_BACKEND=postgres|memory, SESSION_BACKEND=memory|redis

Colaboradores:
  - backoffice.crosscutting.config.get_settings
  - backoffice.domain.repositories (puertos)
  - backoffice.infrastructure.* (implementaciones)
  - backoffice.identity.* (CredentialStore, SessionManager)

Notas:
  - Este archivo NO contiene lógica de negocio.
  - Este archivo NO debe depender de FastAPI (solo expone factories).
  - reset_container() limpia los singletons (tests).
===============================================================================
"""

from __future__ import annotations

from functools import lru_cache

from .crosscutting.config import get_settings
from .domain.repositories import ActivityLogRepository, SessionStore, UserRepository
from .identity.credentials import CredentialStore
from .identity.sessions import SessionManager
from .infrastructure.repositories.in_memory import (
    InMemoryActivityLogRepository,
    InMemoryUserRepository,
)
from .infrastructure.repositories.postgres import (
    PostgresActivityLogRepository,
    PostgresUserRepository,
)
from .infrastructure.sessions import InMemorySessionStore, RedisSessionStore


# =============================================================================
# Repositorios
# =============================================================================
@lru_cache(maxsize=1)
def get_activity_log_repository() -> ActivityLogRepository:
    if get_settings().store_backend == "memory":
        return InMemoryActivityLogRepository()
    return PostgresActivityLogRepository()


@lru_cache(maxsize=1)
def get_user_repository() -> UserRepository:
    if get_settings().store_backend == "memory":
        activity_log = get_activity_log_repository()
        # El repo in-memory emula ON DELETE SET NULL sobre el log de actividad.
        return InMemoryUserRepository(
            activity_log=activity_log
            if isinstance(activity_log, InMemoryActivityLogRepository)
            else None
        )
    return PostgresUserRepository()


# =============================================================================
# Identidad
# =============================================================================
@lru_cache(maxsize=1)
def get_session_store() -> SessionStore:
    settings = get_settings()
    if settings.session_backend == "redis":
        return RedisSessionStore.from_url(settings.redis_url)
    return InMemorySessionStore()


@lru_cache(maxsize=1)
def get_session_manager() -> SessionManager:
    settings = get_settings()
    return SessionManager(
        get_session_store(),
        secret=settings.session_secret,
        ttl_seconds=settings.session_ttl_seconds,
    )


@lru_cache(maxsize=1)
def get_credential_store() -> CredentialStore:
    return CredentialStore(get_user_repository())


def reset_container() -> None:
    """Descarta singletons (tests / reload de settings)."""
    for factory in (
        get_credential_store,
        get_session_manager,
        get_session_store,
        get_user_repository,
        get_activity_log_repository,
    ):
        factory.cache_clear()
