"""Host session storage."""

from .store import InMemorySessionStore, create_fernet

__all__ = ["InMemorySessionStore", "create_fernet"]
