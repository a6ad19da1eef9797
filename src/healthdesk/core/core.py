from __future__ import annotations

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any
from urllib.parse import urlparse

import structlog
from pymongo import AsyncMongoClient

from healthdesk.config import Config

if TYPE_CHECKING:
    from healthdesk.core.modules.auth.service import AuthService
    from healthdesk.core.modules.password.hasher import PasswordHasher
    from healthdesk.core.modules.profile.service import ProfileService
    from healthdesk.core.modules.session.service import SessionService
    from healthdesk.core.modules.session.store import SessionStore
    from healthdesk.core.modules.user.store import CredentialStore

logger = structlog.get_logger(__name__)


class Service:
    """Base class for components with startup and shutdown hooks."""

    async def on_start(self) -> None:
        """Initialize service on application startup."""

    async def on_stop(self) -> None:
        """Cleanup service on application shutdown."""


class Services:
    """Service registry wiring stores, hasher and the services built on them."""

    credentials: CredentialStore
    sessions: SessionStore
    hasher: PasswordHasher
    session: SessionService
    auth: AuthService
    profile: ProfileService

    def __init__(self, config: Config, credentials: CredentialStore, sessions: SessionStore) -> None:
        from healthdesk.core.modules.auth.service import AuthService  # noqa: PLC0415
        from healthdesk.core.modules.password.hasher import PasswordHasher  # noqa: PLC0415
        from healthdesk.core.modules.profile.service import ProfileService  # noqa: PLC0415
        from healthdesk.core.modules.session.service import SessionService  # noqa: PLC0415

        self.credentials = credentials
        self.sessions = sessions
        self.hasher = PasswordHasher(config.bcrypt_rounds)
        self.session = SessionService(sessions, config.session_ttl_seconds)
        self.auth = AuthService(credentials, self.hasher, self.session)
        self.profile = ProfileService(credentials)

        # Stores first: services rely on their indexes being in place
        self._services: list[Service] = [credentials, sessions, self.session, self.auth, self.profile]

    async def start_all(self) -> None:
        """Start all services that have startup logic."""
        for service in self._services:
            await service.on_start()

    async def stop_all(self) -> None:
        """Stop all services in reverse order."""
        for service in reversed(self._services):
            await service.on_stop()


class Core:
    """Container providing config, database and all service instances.

    Stores can be passed in explicitly; whatever is missing is built from config,
    and a MongoDB client is only opened when some store needs it.
    """

    config: Config
    mongo_client: AsyncMongoClient[dict[str, Any]] | None
    services: Services

    def __init__(
        self,
        config: Config,
        credentials: CredentialStore | None = None,
        sessions: SessionStore | None = None,
    ) -> None:
        from healthdesk.core.modules.session.store import MemorySessionStore, MongoSessionStore  # noqa: PLC0415
        from healthdesk.core.modules.user.store import MongoCredentialStore  # noqa: PLC0415

        self.config = config
        self.mongo_client = None

        needs_mongo = credentials is None or (sessions is None and config.session_backend == "mongo")
        if needs_mongo:
            self.mongo_client = AsyncMongoClient(config.database_url, uuidRepresentation="standard", tz_aware=True)
            database = self.mongo_client.get_database(urlparse(config.database_url).path[1:] or "healthdesk")
            if credentials is None:
                credentials = MongoCredentialStore(database)
            if sessions is None and config.session_backend == "mongo":
                sessions = MongoSessionStore(database)
        if sessions is None:
            sessions = MemorySessionStore()

        self.services = Services(config, credentials, sessions)

    @asynccontextmanager
    async def lifespan(self) -> AsyncGenerator[None]:
        """Manage application lifecycle - startup and shutdown."""
        await self.on_start()
        try:
            yield
        finally:
            await self.on_stop()

    async def on_start(self) -> None:
        await self.services.start_all()
        logger.info("core_started", session_backend=type(self.services.sessions).__name__)

    async def on_stop(self) -> None:
        """Stop services and close MongoDB connection on shutdown."""
        await self.services.stop_all()
        if self.mongo_client is not None:
            await self.mongo_client.aclose()
