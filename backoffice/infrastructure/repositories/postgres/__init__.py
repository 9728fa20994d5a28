"""PostgreSQL repository implementations (psycopg 3 + psycopg_pool)."""

from .activity_log import PostgresActivityLogRepository
from .user import PostgresUserRepository

__all__ = [
    "PostgresActivityLogRepository",
    "PostgresUserRepository",
]
