from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from healthdesk.config import Config
from healthdesk.core.core import Core
from healthdesk.core.modules.auth.models import LoginOutcome, RegisterOutcome, ResetResult
from healthdesk.core.modules.session.models import AuthToken
from healthdesk.core.modules.session.store import SessionStore
from healthdesk.core.modules.user.models import UserDetails
from healthdesk.core.modules.user.store import CredentialStore


class App:
    """Facade for all application operations, resolves the session before delegating to Core."""

    def __init__(
        self,
        config: Config,
        credentials: CredentialStore | None = None,
        sessions: SessionStore | None = None,
    ) -> None:
        self._core = Core(config, credentials=credentials, sessions=sessions)

    @asynccontextmanager
    async def lifespan(self) -> AsyncGenerator[None]:
        """Application lifespan management - delegates to Core."""
        async with self._core.lifespan():
            yield

    async def register(self, username: str, password: str) -> RegisterOutcome:
        return await self._core.services.auth.register(username, password)

    async def login(self, username: str, password: str) -> LoginOutcome:
        return await self._core.services.auth.login(username, password)

    async def logout(self, auth_token: AuthToken | None) -> None:
        await self._core.services.auth.logout(auth_token)

    async def is_session_active(self, auth_token: AuthToken | None) -> bool:
        return await self._core.services.auth.session_status(auth_token)

    async def reset_credentials(
        self,
        auth_token: AuthToken | None,
        username: str | None,
        password: str | None,
        existing_password: str | None,
    ) -> ResetResult:
        """Change username and/or password of the current user (authenticated only)."""
        user_id = await self._core.services.session.require_user_id(auth_token)
        return await self._core.services.auth.reset_credentials(user_id, username, password, existing_password)

    async def get_details(self, auth_token: AuthToken | None) -> UserDetails:
        """Get current user profile (authenticated only)."""
        user_id = await self._core.services.session.require_user_id(auth_token)
        return await self._core.services.profile.get_details(user_id)

    async def save_details(
        self, auth_token: AuthToken | None, first_name: str, last_name: str, insurer_code: str | None
    ) -> None:
        user_id = await self._core.services.session.require_user_id(auth_token)
        await self._core.services.profile.save_details(user_id, first_name, last_name, insurer_code)

    async def save_address(self, auth_token: AuthToken | None, latitude: float, longitude: float, address: str) -> None:
        user_id = await self._core.services.session.require_user_id(auth_token)
        await self._core.services.profile.save_address(user_id, latitude, longitude, address)
