"""
Name: Application Configuration (Settings)

Responsibilities:
  - Centralized, typed configuration using pydantic-settings
  - Validate environment variables at startup
  - Provide defaults that match the console's documented behavior

Collaborators:
  - api/main.py: reads settings for pool/session backends and bootstrap
  - container.py: selects store and session backends
  - api/dependencies.py: reads cookie name / recheck policy

Constraints:
  - Lives in the infrastructure edge, NOT in domain/application
  - No business logic: pure configuration

Notes:
  - Uses pydantic-settings for env parsing and validation
  - Singleton via lru_cache
  - Backends: STORE_BACKEND=postgres|memory, SESSION_BACKEND=memory|redis
"""

from functools import lru_cache

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_STORE_BACKENDS = {"postgres", "memory"}
_SESSION_BACKENDS = {"memory", "redis"}
_INSECURE_SECRETS = {"dev-session-secret", "changeme", "change-me", "secret"}


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Attributes:
        app_env: Application environment (development/production/test)
        host: Bind address for the HTTP server
        port: Listening port (default: 3000)
        store_backend: Credential/activity store backend (postgres|memory)
        database_url: PostgreSQL connection string (required for postgres)
        db_pool_min_size: Minimum pooled connections
        db_pool_max_size: Maximum pooled connections (small fixed constant)
        db_statement_timeout_ms: Per-statement timeout applied to pooled connections
        session_backend: Session table backend (memory|redis)
        redis_url: Redis connection string (required for redis sessions)
        session_secret: Key material used to derive session store keys
        session_ttl_hours: Absolute session lifetime (default: 24)
        session_cookie_name: Cookie carrying the opaque session token
        session_cookie_secure: Set Secure on the session cookie
        session_recheck_user: Use the current role instead of the login-time role
        trust_proxy_headers: Use X-Forwarded-For for audit IP addresses
        bootstrap_admin_*: Seed account created when the store is empty
        log_level: Root level for the console logger
        log_json: Emit JSON log lines
    """

    # Environment
    app_env: str = "development"
    host: str = "0.0.0.0"
    port: int = 3000

    # Store
    store_backend: str = "postgres"
    database_url: str = ""
    db_pool_min_size: int = 1
    db_pool_max_size: int = 5
    db_statement_timeout_ms: int = 15000

    # Sessions
    session_backend: str = "memory"
    redis_url: str = ""
    session_secret: str = "dev-session-secret"
    session_ttl_hours: int = 24
    session_cookie_name: str = "sessionId"
    session_cookie_secure: bool = False
    session_recheck_user: bool = True
    trust_proxy_headers: bool = False

    # Bootstrap admin (solo si el store está vacío)
    bootstrap_admin_enabled: bool = True
    bootstrap_admin_name: str = "System Admin"
    bootstrap_admin_email: str = "admin@dashboard.com"
    bootstrap_admin_password: str = "Admin@123"

    # Logging
    log_level: str = "INFO"
    log_json: bool = True

    @field_validator("store_backend")
    @classmethod
    def store_backend_valid(cls, v: str) -> str:
        backend = (v or "").strip().lower()
        if backend not in _STORE_BACKENDS:
            raise ValueError("store_backend must be postgres or memory")
        return backend

    @field_validator("session_backend")
    @classmethod
    def session_backend_valid(cls, v: str) -> str:
        backend = (v or "").strip().lower()
        if backend not in _SESSION_BACKENDS:
            raise ValueError("session_backend must be memory or redis")
        return backend

    @field_validator("session_ttl_hours")
    @classmethod
    def session_ttl_must_be_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("session_ttl_hours must be greater than 0")
        return v

    @field_validator("db_pool_max_size")
    @classmethod
    def pool_max_must_be_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("db_pool_max_size must be greater than 0")
        return v

    @model_validator(mode="after")
    def validate_backend_requirements(self):
        if self.store_backend == "postgres" and not self.database_url.strip():
            raise ValueError("DATABASE_URL is required when STORE_BACKEND=postgres")
        if self.session_backend == "redis" and not self.redis_url.strip():
            raise ValueError("REDIS_URL is required when SESSION_BACKEND=redis")
        if self.db_pool_min_size > self.db_pool_max_size:
            raise ValueError("db_pool_min_size must be <= db_pool_max_size")
        return self

    @model_validator(mode="after")
    def validate_security_requirements(self):
        if not self.is_production():
            return self

        secret = (self.session_secret or "").strip()
        if not secret or secret in _INSECURE_SECRETS:
            raise ValueError(
                "SESSION_SECRET must be set to a strong, non-default value in production"
            )
        if len(secret) < 32:
            raise ValueError("SESSION_SECRET must be at least 32 characters in production")
        if not self.session_cookie_secure:
            raise ValueError("SESSION_COOKIE_SECURE must be true in production")
        return self

    def is_production(self) -> bool:
        return self.app_env.strip().lower() == "production"

    @property
    def session_ttl_seconds(self) -> int:
        return int(self.session_ttl_hours * 3600)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",  # Ignore unknown env vars
    )


@lru_cache
def get_settings() -> Settings:
    """
    Get singleton Settings instance.

    Raises:
        ValidationError: If required env vars are missing or invalid
    """
    return Settings()
