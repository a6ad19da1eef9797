from typing import Any
from uuid import UUID

import structlog

from healthdesk.core.core import Service
from healthdesk.core.modules.auth.models import (
    LoginOutcome,
    LoginResult,
    RegisterOutcome,
    RegisterResult,
    ResetResult,
)
from healthdesk.core.modules.password.hasher import PasswordHasher
from healthdesk.core.modules.session.models import AuthToken
from healthdesk.core.modules.session.service import SessionService
from healthdesk.core.modules.user.models import User
from healthdesk.core.modules.user.store import CredentialStore
from healthdesk.core.modules.user.validators import validate_password, validate_username
from healthdesk.errors import ConflictError, NotAuthenticatedError, ValidationError

logger = structlog.get_logger(__name__)


class AuthService(Service):
    """Registration, login, credential reset and logout.

    Holds no locks: duplicate usernames are ultimately rejected by the credential store.
    """

    def __init__(self, credentials: CredentialStore, hasher: PasswordHasher, sessions: SessionService) -> None:
        self._credentials = credentials
        self._hasher = hasher
        self._sessions = sessions

    async def register(self, username: str, password: str) -> RegisterOutcome:
        """Create a user and a session bound to it."""
        validate_username(username)
        validate_password(password)

        if await self._credentials.find_by_username(username) is not None:
            logger.info("register_rejected_existing", username=username)
            return RegisterOutcome(result=RegisterResult.ALREADY_REGISTERED)

        password_hash = await self._hasher.hash(password)
        try:
            user = await self._credentials.insert(User(username=username, password_hash=password_hash))
        except ConflictError:
            # Another request inserted the same username after our lookup
            logger.info("register_lost_race", username=username)
            return RegisterOutcome(result=RegisterResult.ALREADY_REGISTERED)

        try:
            auth_token = await self._sessions.create_session(user.id)
        except Exception:
            await self._credentials.delete(user.id)
            raise

        logger.info("user_registered", user_id=str(user.id))
        return RegisterOutcome(result=RegisterResult.REGISTERED, auth_token=auth_token)

    async def login(self, username: str, password: str) -> LoginOutcome:
        """Verify credentials and open a session.

        Unknown usernames still pay for one hash verification.
        """
        user = await self._credentials.find_by_username(username)
        if user is None:
            await self._hasher.verify_dummy(password)
            logger.info("login_failed")
            return LoginOutcome(result=LoginResult.UNAUTHORIZED)

        if not await self._hasher.verify(password, user.password_hash):
            logger.info("login_failed")
            return LoginOutcome(result=LoginResult.UNAUTHORIZED)

        auth_token = await self._sessions.create_session(user.id)
        logger.info("user_logged_in", user_id=str(user.id))
        return LoginOutcome(result=LoginResult.SUCCESS, auth_token=auth_token)

    async def reset_credentials(
        self,
        user_id: UUID,
        new_username: str | None = None,
        new_password: str | None = None,
        existing_password: str | None = None,
    ) -> ResetResult:
        """Change username and/or password of the session user.

        A username-only change needs no password. Any password change requires
        existing_password to match the stored hash, and is a no-op when the new
        password equals the current one.
        """
        if new_username is None and new_password is None:
            raise ValidationError("Nothing to update: provide a username or a password")

        if new_username is not None:
            validate_username(new_username)

        if new_password is None:
            await self._update(user_id, {"username": new_username})
            logger.info("username_updated", user_id=str(user_id))
            return ResetResult.USERNAME_UPDATED

        validate_password(new_password)
        if not existing_password:
            raise ValidationError("Current password is required to change the password")

        user = await self._credentials.find_by_id(user_id)
        if user is None:
            raise NotAuthenticatedError
        if not await self._hasher.verify(existing_password, user.password_hash):
            raise ValidationError("Invalid current password")
        if await self._hasher.verify(new_password, user.password_hash):
            return ResetResult.NO_CHANGE

        fields: dict[str, str] = {"password_hash": await self._hasher.hash(new_password)}
        if new_username is not None:
            fields["username"] = new_username
        await self._update(user_id, fields)

        if new_username is not None:
            logger.info("username_and_password_updated", user_id=str(user_id))
            return ResetResult.USERNAME_AND_PASSWORD_UPDATED
        logger.info("password_updated", user_id=str(user_id))
        return ResetResult.PASSWORD_UPDATED

    async def logout(self, auth_token: AuthToken | None) -> None:
        """Destroy the session. Safe to call with an unknown or missing token."""
        await self._sessions.invalidate_session(auth_token)

    async def session_status(self, auth_token: AuthToken | None) -> bool:
        """Whether the token is bound to a user."""
        return await self._sessions.get_user_id(auth_token) is not None

    async def _update(self, user_id: UUID, fields: dict[str, Any]) -> None:
        # ConflictError from a taken username propagates to the caller
        if not await self._credentials.update(user_id, fields):
            raise NotAuthenticatedError
