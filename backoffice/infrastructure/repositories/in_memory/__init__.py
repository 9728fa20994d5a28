"""
In-Memory Repository Implementations.

For testing and local development. NOT FOR PRODUCTION.
Data is lost on process restart.
"""

from .activity_log import InMemoryActivityLogRepository
from .user import InMemoryUserRepository

__all__ = [
    "InMemoryActivityLogRepository",
    "InMemoryUserRepository",
]
