from abc import ABC, abstractmethod
from typing import Any

from pymongo.asynchronous.database import AsyncDatabase
from pymongo.errors import PyMongoError

from healthdesk.core.core import Service
from healthdesk.core.modules.session.models import AuthToken, Session
from healthdesk.errors import DependencyError
from healthdesk.utils import now


class SessionStore(Service, ABC):
    """Keyed storage for sessions: get, set and delete by opaque token."""

    @abstractmethod
    async def create(self, session: Session) -> None: ...

    @abstractmethod
    async def get(self, auth_token: AuthToken) -> Session | None:
        """Return the live session for the token, or None if absent or expired."""

    @abstractmethod
    async def delete(self, auth_token: AuthToken) -> None:
        """Remove the session. Deleting an unknown token is not an error."""


class MongoSessionStore(SessionStore):
    """Sessions in the `sessions` collection, shared by every server process."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        self._collection = database.get_collection("sessions")

    async def on_start(self) -> None:
        """Create indexes on startup."""
        await self._collection.create_index([("auth_token", 1)], unique=True)
        # Mongo drops each document once its expires_at is in the past
        await self._collection.create_index([("expires_at", 1)], expireAfterSeconds=0)

    async def create(self, session: Session) -> None:
        try:
            await self._collection.insert_one(session.to_mongo())
        except PyMongoError as e:
            raise DependencyError("Session insert failed") from e

    async def get(self, auth_token: AuthToken) -> Session | None:
        try:
            session = Session.from_mongo(await self._collection.find_one({"auth_token": auth_token}))
        except PyMongoError as e:
            raise DependencyError("Session lookup failed") from e
        # The TTL monitor runs about once a minute, so expired documents can still be found
        if session is None or session.is_expired():
            return None
        return session

    async def delete(self, auth_token: AuthToken) -> None:
        try:
            await self._collection.delete_one({"auth_token": auth_token})
        except PyMongoError as e:
            raise DependencyError("Session delete failed") from e


class MemorySessionStore(SessionStore):
    """Sessions kept in a dict. Lost on restart and not shared between processes."""

    def __init__(self) -> None:
        self._sessions: dict[str, Session] = {}

    async def create(self, session: Session) -> None:
        # Sessions whose cookie never comes back are only reclaimed here
        self.purge_expired()
        self._sessions[session.auth_token] = session

    async def get(self, auth_token: AuthToken) -> Session | None:
        session = self._sessions.get(auth_token)
        if session is None:
            return None
        if session.is_expired():
            del self._sessions[auth_token]
            return None
        return session

    async def delete(self, auth_token: AuthToken) -> None:
        self._sessions.pop(auth_token, None)

    def purge_expired(self) -> int:
        """Drop every expired session and return how many were removed."""
        current = now()
        expired = [token for token, session in self._sessions.items() if session.is_expired(current)]
        for token in expired:
            del self._sessions[token]
        return len(expired)

    def __len__(self) -> int:
        return len(self._sessions)

    async def on_stop(self) -> None:
        self._sessions.clear()
