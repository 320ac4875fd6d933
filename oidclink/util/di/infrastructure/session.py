"""Session store provider."""

from datetime import timedelta

from dishka import Scope, provide

from oidclink.adapter.session import InMemorySessionStore, create_fernet
from oidclink.config import Settings
from oidclink.domain.repository import SessionStore
from oidclink.util.di.base import ProviderBase


class SessionProvider(ProviderBase):
    """Session store provider - concrete, shared by all requests."""

    @provide(scope=Scope.APP)
    def get_session_store(self, settings: Settings) -> SessionStore:
        """Provide the session store."""
        return InMemorySessionStore(
            create_fernet(settings.session.secret_key),
            max_age=timedelta(seconds=settings.session.cookie_max_age),
        )
