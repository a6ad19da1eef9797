"""Shared pytest fixtures."""

import asyncio
from collections.abc import Iterator
from typing import Any
from uuid import UUID

import pytest
from fastapi.testclient import TestClient

from healthdesk.app import App
from healthdesk.config import Config
from healthdesk.core.modules.auth.service import AuthService
from healthdesk.core.modules.password.hasher import PasswordHasher
from healthdesk.core.modules.session.service import SessionService
from healthdesk.core.modules.session.store import MemorySessionStore
from healthdesk.core.modules.user.models import User
from healthdesk.core.modules.user.store import CredentialStore
from healthdesk.errors import ConflictError
from healthdesk.web.server import create_fastapi_app


class InMemoryCredentialStore(CredentialStore):
    """Credential store backed by a dict, enforcing unique usernames like the Mongo index.

    Every call yields to the event loop first so concurrent requests interleave.
    """

    def __init__(self) -> None:
        self.users: dict[UUID, User] = {}

    async def find_by_username(self, username: str) -> User | None:
        await asyncio.sleep(0)
        user = next((u for u in self.users.values() if u.username == username), None)
        return user.model_copy() if user else None

    async def find_by_id(self, user_id: UUID) -> User | None:
        await asyncio.sleep(0)
        user = self.users.get(user_id)
        return user.model_copy() if user else None

    async def insert(self, user: User) -> User:
        await asyncio.sleep(0)
        if any(u.username == user.username for u in self.users.values()):
            raise ConflictError(f"User '{user.username}' already exists")
        self.users[user.id] = user
        return user

    async def update(self, user_id: UUID, fields: dict[str, Any]) -> bool:
        await asyncio.sleep(0)
        if user_id not in self.users:
            return False
        username = fields.get("username")
        if username is not None and any(u.username == username and u.id != user_id for u in self.users.values()):
            raise ConflictError(f"User '{username}' already exists")
        self.users[user_id] = self.users[user_id].model_copy(update=fields)
        return True

    async def delete(self, user_id: UUID) -> None:
        await asyncio.sleep(0)
        self.users.pop(user_id, None)


@pytest.fixture
def config() -> Config:
    """Config for tests: in-memory sessions and the cheapest bcrypt cost."""
    return Config(
        database_url="mongodb://localhost:27017/healthdesk_test",
        session_backend="memory",
        bcrypt_rounds=4,
        session_ttl_seconds=3600,
    )


@pytest.fixture
def credentials() -> InMemoryCredentialStore:
    return InMemoryCredentialStore()


@pytest.fixture
def session_store() -> MemorySessionStore:
    return MemorySessionStore()


@pytest.fixture
def hasher() -> PasswordHasher:
    return PasswordHasher(rounds=4)


@pytest.fixture
def session_service(session_store: MemorySessionStore) -> SessionService:
    return SessionService(session_store, ttl_seconds=3600)


@pytest.fixture
def auth_service(
    credentials: InMemoryCredentialStore, hasher: PasswordHasher, session_service: SessionService
) -> AuthService:
    return AuthService(credentials, hasher, session_service)


@pytest.fixture
def client(
    config: Config, credentials: InMemoryCredentialStore, session_store: MemorySessionStore
) -> Iterator[TestClient]:
    """HTTP client over https so the Secure session cookie is sent back."""
    app = App(config, credentials=credentials, sessions=session_store)
    with TestClient(create_fastapi_app(app, config), base_url="https://testserver") as test_client:
        yield test_client
