"""
Name: Console ASGI Entrypoint (backoffice.main)

Responsibilities:
  - Re-export the FastAPI app for ASGI servers and tooling
  - Provide the `backoffice` console script (uvicorn on settings host/port)

Collaborators:
  - backoffice.api.main: module that constructs and exposes the FastAPI app
  - uvicorn: ASGI server

Notes/Constraints:
  - No configuration or IO at import time; keep it thin and predictable
  - Changing this path is a deployment-breaking change for infra scripts
"""

import uvicorn

from backoffice.api.main import app
from backoffice.crosscutting.config import get_settings


def run() -> None:
    settings = get_settings()
    uvicorn.run(
        "backoffice.main:app",
        host=settings.host,
        port=settings.port,
        log_config=None,
        proxy_headers=settings.trust_proxy_headers,
    )


__all__ = ["app", "run"]
