from abc import ABC, abstractmethod
from typing import Any
from uuid import UUID

import structlog
from pymongo.asynchronous.database import AsyncDatabase
from pymongo.errors import DuplicateKeyError, PyMongoError

from healthdesk.core.core import Service
from healthdesk.core.modules.user.models import User
from healthdesk.errors import ConflictError, DependencyError

logger = structlog.get_logger(__name__)


class CredentialStore(Service, ABC):
    """Durable user records keyed by id and by unique username.

    Implementations must reject a second user with the same username on their own;
    callers only pre-check as a shortcut.
    """

    @abstractmethod
    async def find_by_username(self, username: str) -> User | None: ...

    @abstractmethod
    async def find_by_id(self, user_id: UUID) -> User | None: ...

    @abstractmethod
    async def insert(self, user: User) -> User:
        """Persist a new user. Raises ConflictError if the username is taken."""

    @abstractmethod
    async def update(self, user_id: UUID, fields: dict[str, Any]) -> bool:
        """Set fields on a user in one write. Returns False if the user does not exist.

        Raises ConflictError if a new username is taken.
        """

    @abstractmethod
    async def delete(self, user_id: UUID) -> None: ...


class MongoCredentialStore(CredentialStore):
    """Credential store over the `users` collection."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        self._collection = database.get_collection("users")

    async def on_start(self) -> None:
        """Create indexes on startup."""
        # The unique index is what actually prevents duplicate registrations
        await self._collection.create_index([("username", 1)], unique=True)

    async def find_by_username(self, username: str) -> User | None:
        try:
            return User.from_mongo(await self._collection.find_one({"username": username}))
        except PyMongoError as e:
            raise DependencyError("User lookup failed") from e

    async def find_by_id(self, user_id: UUID) -> User | None:
        try:
            return User.from_mongo(await self._collection.find_one({"_id": user_id}))
        except PyMongoError as e:
            raise DependencyError("User lookup failed") from e

    async def insert(self, user: User) -> User:
        try:
            await self._collection.insert_one(user.to_mongo())
        except DuplicateKeyError as e:
            raise ConflictError(f"User '{user.username}' already exists") from e
        except PyMongoError as e:
            raise DependencyError("User insert failed") from e
        return user

    async def update(self, user_id: UUID, fields: dict[str, Any]) -> bool:
        try:
            result = await self._collection.update_one({"_id": user_id}, {"$set": fields})
        except DuplicateKeyError as e:
            raise ConflictError(f"User '{fields.get('username')}' already exists") from e
        except PyMongoError as e:
            raise DependencyError("User update failed") from e
        return result.matched_count > 0

    async def delete(self, user_id: UUID) -> None:
        try:
            await self._collection.delete_one({"_id": user_id})
        except PyMongoError as e:
            raise DependencyError("User delete failed") from e
