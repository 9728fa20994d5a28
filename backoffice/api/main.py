"""
Name: FastAPI Application Entry Point

Responsibilities:
  - Build the FastAPI application (metadata, middleware, routers, handlers)
  - Initialize the DB pool when the postgres store is active
  - Seed the bootstrap admin when the credential store is empty
  - Expose the health check endpoint

Collaborators:
  - auth_routes.router / user_routes.router: console endpoints
  - RequestContextMiddleware: request id and logging context
  - SecurityHeadersMiddleware: OWASP response headers
  - container: store and session singletons
  - application.bootstrap_admin: first-run admin seeding

Constraints:
  - Settings are validated in the lifespan, not at import time
  - Session store failures fail closed (503), never open

Notes:
  - Middleware order matters: RequestContext -> SecurityHeaders -> routes
  - /healthz follows Kubernetes health check convention
"""

from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request

from ..application.bootstrap_admin import ensure_bootstrap_admin
from ..container import (
    get_credential_store,
    get_session_manager,
    get_session_store,
    get_user_repository,
)
from ..crosscutting.config import get_settings
from ..crosscutting.logger import configure_logging, logger
from ..crosscutting.middleware import RequestContextMiddleware
from ..crosscutting.security import SecurityHeadersMiddleware
from ..domain.repositories import UserRepository
from ..identity.sessions import SessionManager
from ..infrastructure.db.pool import close_pool, init_pool
from .auth_routes import router as auth_router
from .exception_handlers import register_exception_handlers
from .templates import static_files
from .user_routes import router as user_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle. Initializes pool and seeds the admin."""
    settings = get_settings()
    configure_logging(settings.log_level, settings.log_json)

    # Pool antes de cualquier uso de repositorios Postgres
    if settings.store_backend == "postgres":
        init_pool(
            database_url=settings.database_url,
            min_size=settings.db_pool_min_size,
            max_size=settings.db_pool_max_size,
        )

    try:
        try:
            ensure_bootstrap_admin(settings, credentials=get_credential_store())
        except Exception as e:
            logger.error(f"Startup failed: {e}")
            raise

        logger.info(
            "Back-office console starting up",
            extra={
                "app_env": settings.app_env,
                "store_backend": settings.store_backend,
                "session_backend": settings.session_backend,
                "session_ttl_hours": settings.session_ttl_hours,
                "db_pool_max": settings.db_pool_max_size,
            },
        )

        yield

    finally:
        if settings.store_backend == "postgres":
            close_pool()
        if settings.session_backend == "redis":
            store = get_session_store()
            close = getattr(store, "close", None)
            if close is not None:
                close()
        logger.info("Back-office console shutting down")


def healthz(
    request: Request,
    users: UserRepository = Depends(get_user_repository),
    sessions: SessionManager = Depends(get_session_manager),
):
    """
    Health check of the console dependencies.

    Returns:
        ok: True if store and session table respond
        store: "connected" or "disconnected"
        sessions: "connected" or "disconnected"
        request_id: Correlation ID for this request
    """
    store_status = "disconnected"
    try:
        if users.ping():
            store_status = "connected"
    except Exception as e:
        logger.warning("Health check: store unavailable", extra={"error": str(e)})

    session_status = "disconnected"
    try:
        if sessions.ping():
            session_status = "connected"
    except Exception as e:
        logger.warning("Health check: sessions unavailable", extra={"error": str(e)})

    return {
        "ok": store_status == "connected" and session_status == "connected",
        "store": store_status,
        "sessions": session_status,
        "request_id": getattr(request.state, "request_id", None),
    }


def create_app() -> FastAPI:
    app = FastAPI(
        title="Back-office Console",
        version="0.1.0",
        lifespan=lifespan,
        openapi_tags=[
            {"name": "auth", "description": "Login / logout (session cookie)"},
            {"name": "users", "description": "Dashboard and account directory"},
        ],
    )

    # Middleware order (bottom = first to execute)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestContextMiddleware)

    app.include_router(auth_router)
    app.include_router(user_router)
    app.add_api_route("/healthz", healthz, methods=["GET"], include_in_schema=False)
    app.mount("/static", static_files(), name="static")

    register_exception_handlers(app)
    return app


app = create_app()
