"""
============================================================
TARJETA CRC — alembic/env.py (Migraciones de la consola)
============================================================
Responsibilities:
  - Correr las migraciones escritas a mano (users, activity_log).
  - Tomar la URL de la misma fuente que la app (Settings / DATABASE_URL).

Collaborators:
  - backoffice.crosscutting.config.Settings
  - SQLAlchemy (solo como conexión para Alembic, driver psycopg 3)

Policy:
  - Sin ORM ni autogenerate: target_metadata = None.
============================================================
"""

from logging.config import fileConfig

from alembic import context
from sqlalchemy import create_engine, pool

from backoffice.crosscutting.config import Settings

config = context.config

if config.config_file_name is not None:
    # Sin deshabilitar el logger "backoffice" si la app ya lo configuró.
    fileConfig(config.config_file_name, disable_existing_loggers=False)


def database_url() -> str:
    url = Settings().database_url or config.get_main_option("sqlalchemy.url") or ""
    if not url:
        raise RuntimeError("DATABASE_URL is required to run migrations")
    for prefix in ("postgresql://", "postgres://"):
        if url.startswith(prefix):
            return "postgresql+psycopg://" + url[len(prefix) :]
    return url


if context.is_offline_mode():
    context.configure(url=database_url(), target_metadata=None, literal_binds=True)
    with context.begin_transaction():
        context.run_migrations()
else:
    engine = create_engine(database_url(), poolclass=pool.NullPool)
    with engine.connect() as connection:
        context.configure(connection=connection, target_metadata=None)
        with context.begin_transaction():
            context.run_migrations()
