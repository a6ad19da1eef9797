from uuid import UUID

from pydantic import BaseModel, Field

from healthdesk.core.db import MongoModel


class User(MongoModel):
    """User domain model with credentials and profile fields."""

    username: str
    password_hash: str  # bcrypt hash
    first_name: str | None = None
    last_name: str | None = None
    insurer_code: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    address: str | None = None


class UserDetails(BaseModel):
    """User profile information (API representation, no credentials)."""

    id: UUID = Field(..., description="User ID")
    username: str = Field(..., description="Username")
    first_name: str | None = Field(None, description="First name")
    last_name: str | None = Field(None, description="Last name")
    insurer_code: str | None = Field(None, description="Insurance plan code")
    latitude: float | None = Field(None, description="Home latitude")
    longitude: float | None = Field(None, description="Home longitude")
    address: str | None = Field(None, description="Human readable home address")

    @classmethod
    def from_domain(cls, user: User) -> "UserDetails":
        """Create view model from domain model."""
        return cls.model_validate(user.model_dump(exclude={"password_hash"}))
