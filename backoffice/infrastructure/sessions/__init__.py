"""Session store backends (in-memory / Redis)."""

from .in_memory import InMemorySessionStore
from .redis_store import RedisSessionStore

__all__ = ["InMemorySessionStore", "RedisSessionStore"]
