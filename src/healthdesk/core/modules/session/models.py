"""Session management models."""

from datetime import datetime
from typing import NewType
from uuid import UUID

from pydantic import Field

from healthdesk.core.db import MongoModel
from healthdesk.utils import now

AuthToken = NewType("AuthToken", str)


class Session(MongoModel):
    """Server-side session addressed by the cookie token.

    Indexed on auth_token - unique, expires_at - TTL.
    A session without user_id is anonymous and grants nothing.
    """

    auth_token: str
    user_id: UUID | None = None
    created_at: datetime = Field(default_factory=now)
    expires_at: datetime

    def is_expired(self, at: datetime | None = None) -> bool:
        return self.expires_at <= (at or now())
