import secrets
from datetime import timedelta
from uuid import UUID

import structlog

from healthdesk.core.core import Service
from healthdesk.core.modules.session.models import AuthToken, Session
from healthdesk.core.modules.session.store import SessionStore
from healthdesk.errors import NotAuthenticatedError
from healthdesk.utils import now

logger = structlog.get_logger(__name__)


class SessionService(Service):
    """Service for managing user sessions on top of a SessionStore."""

    def __init__(self, store: SessionStore, ttl_seconds: int) -> None:
        self._store = store
        self._ttl = timedelta(seconds=ttl_seconds)

    async def create_session(self, user_id: UUID) -> AuthToken:
        auth_token = AuthToken(secrets.token_urlsafe(32))
        created_at = now()
        session = Session(auth_token=auth_token, user_id=user_id, created_at=created_at, expires_at=created_at + self._ttl)
        await self._store.create(session)
        return auth_token

    async def get_user_id(self, auth_token: AuthToken | None) -> UUID | None:
        """Resolve a token to its user id. Missing, expired and anonymous sessions give None."""
        if not auth_token:
            return None
        session = await self._store.get(auth_token)
        if session is None:
            return None
        return session.user_id

    async def require_user_id(self, auth_token: AuthToken | None) -> UUID:
        """Session guard for protected operations."""
        user_id = await self.get_user_id(auth_token)
        if user_id is None:
            raise NotAuthenticatedError
        return user_id

    async def invalidate_session(self, auth_token: AuthToken | None) -> None:
        """Invalidate a session by removing it from the store."""
        if not auth_token:
            return
        await self._store.delete(auth_token)
