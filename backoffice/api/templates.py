"""
Jinja2 templates del panel (login, dashboard, roster) y assets estáticos.

Los templates solo renderizan datos que arma el servidor; no contienen
lógica de negocio. Autoescape activado por Jinja2Templates.
"""

from __future__ import annotations

from pathlib import Path

from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates

PACKAGE_DIR = Path(__file__).resolve().parent.parent
TEMPLATES_DIR = PACKAGE_DIR / "templates"
STATIC_DIR = PACKAGE_DIR / "static"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


def static_files() -> StaticFiles:
    return StaticFiles(directory=str(STATIC_DIR))
