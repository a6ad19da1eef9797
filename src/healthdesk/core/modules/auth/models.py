"""Outcomes of the credential operations."""

from enum import StrEnum

from pydantic import BaseModel

from healthdesk.core.modules.session.models import AuthToken


class RegisterResult(StrEnum):
    REGISTERED = "registered"
    ALREADY_REGISTERED = "already_registered"


class LoginResult(StrEnum):
    SUCCESS = "success"
    UNAUTHORIZED = "unauthorized"


class ResetResult(StrEnum):
    USERNAME_UPDATED = "username_updated"
    USERNAME_AND_PASSWORD_UPDATED = "username_and_password_updated"
    PASSWORD_UPDATED = "password_updated"
    NO_CHANGE = "no_change"


class RegisterOutcome(BaseModel):
    result: RegisterResult
    auth_token: AuthToken | None = None


class LoginOutcome(BaseModel):
    result: LoginResult
    auth_token: AuthToken | None = None
