"""
Name: Pytest Configuration and Shared Fixtures

Responsibilities:
  - Configure the test environment (memory backends, no .env file)
  - Provide cheap Argon2 hashing for fast credential tests
  - Build in-memory stores, managers and identities for tests
  - Provide a fully wired TestClient with dependency overrides

Collaborators:
  - pytest: Test framework
  - backoffice.container: factories overridden via app.dependency_overrides
  - backoffice.infrastructure.*.in_memory: test doubles with real semantics

Notes:
  - Fixtures are auto-discovered by pytest
  - Use @pytest.fixture(scope="function") for per-test isolation
"""

import os

os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("STORE_BACKEND", "memory")
os.environ.setdefault("SESSION_BACKEND", "memory")
os.environ.setdefault("SESSION_SECRET", "test-session-secret-with-enough-length")
os.environ.setdefault("BOOTSTRAP_ADMIN_ENABLED", "false")
os.environ.setdefault("LOG_JSON", "true")

from datetime import datetime, timedelta, timezone  # noqa: E402
from uuid import uuid4  # noqa: E402

import pytest  # noqa: E402
from argon2 import PasswordHasher  # noqa: E402

from backoffice.crosscutting import config as app_config  # noqa: E402

app_config.Settings.model_config["env_file"] = None

from backoffice.domain.entities import SessionIdentity, UserRole  # noqa: E402
from backoffice.identity.credentials import CredentialStore  # noqa: E402
from backoffice.identity.sessions import SessionManager  # noqa: E402
from backoffice.infrastructure.repositories.in_memory import (  # noqa: E402
    InMemoryActivityLogRepository,
    InMemoryUserRepository,
)
from backoffice.infrastructure.sessions import InMemorySessionStore  # noqa: E402

TEST_SESSION_SECRET = "test-session-secret-with-enough-length"


def pytest_configure(config) -> None:
    config.addinivalue_line(
        "markers", "unit: Unit tests (fast, no external dependencies)"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests (PostgreSQL / Redis required)"
    )


class FakeClock:
    """Reloj controlable: tests de TTL sin dormir."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2026, 3, 10, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


# ============================================================================
# Core fixtures
# ============================================================================


@pytest.fixture(autouse=True)
def _reset_singletons():
    """Settings / container limpios por test."""
    from backoffice.container import reset_container

    app_config.get_settings.cache_clear()
    reset_container()
    yield
    app_config.get_settings.cache_clear()
    reset_container()


@pytest.fixture
def hasher() -> PasswordHasher:
    """Argon2 con parámetros mínimos (tests rápidos, mismo algoritmo)."""
    return PasswordHasher(time_cost=1, memory_cost=8, parallelism=1)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def activity_log() -> InMemoryActivityLogRepository:
    return InMemoryActivityLogRepository()


@pytest.fixture
def user_repo(activity_log) -> InMemoryUserRepository:
    return InMemoryUserRepository(activity_log=activity_log)


@pytest.fixture
def credentials(user_repo, hasher) -> CredentialStore:
    return CredentialStore(user_repo, hasher)


@pytest.fixture
def session_store() -> InMemorySessionStore:
    return InMemorySessionStore()


@pytest.fixture
def sessions(session_store, clock) -> SessionManager:
    return SessionManager(
        session_store, secret=TEST_SESSION_SECRET, ttl_seconds=86400, clock=clock
    )


@pytest.fixture
def admin(credentials):
    return credentials.create("Admin", "admin@example.com", "admin-pass", UserRole.ADMIN)


@pytest.fixture
def admin_identity(admin) -> SessionIdentity:
    return SessionIdentity(
        user_id=admin.id, user_name=admin.name, user_role=admin.role
    )


@pytest.fixture
def plain_identity() -> SessionIdentity:
    return SessionIdentity(user_id=uuid4(), user_name="Plain", user_role=UserRole.USER)


# ============================================================================
# HTTP fixtures
# ============================================================================


@pytest.fixture
def app(credentials, sessions, activity_log, user_repo):
    """App completa con stores in-memory inyectados."""
    from backoffice.api.main import create_app
    from backoffice.container import (
        get_activity_log_repository,
        get_credential_store,
        get_session_manager,
        get_user_repository,
    )

    application = create_app()
    application.dependency_overrides[get_credential_store] = lambda: credentials
    application.dependency_overrides[get_session_manager] = lambda: sessions
    application.dependency_overrides[get_activity_log_repository] = (
        lambda: activity_log
    )
    application.dependency_overrides[get_user_repository] = lambda: user_repo
    return application


@pytest.fixture
def client(app):
    from fastapi.testclient import TestClient

    # Sin context manager: el lifespan (bootstrap admin) no corre.
    return TestClient(app, follow_redirects=False)


@pytest.fixture
def login_as(client):
    """Login por HTTP; la cookie queda en el client."""

    def _login(email: str, password: str):
        return client.post("/login", json={"email": email, "password": password})

    return _login
