from typing import Any
from uuid import UUID

import structlog

from healthdesk.core.core import Service
from healthdesk.core.modules.user.models import UserDetails
from healthdesk.core.modules.user.store import CredentialStore
from healthdesk.errors import NotAuthenticatedError

logger = structlog.get_logger(__name__)


class ProfileService(Service):
    """Profile and address fields of the signed-in user."""

    def __init__(self, credentials: CredentialStore) -> None:
        self._credentials = credentials

    async def get_details(self, user_id: UUID) -> UserDetails:
        user = await self._credentials.find_by_id(user_id)
        if user is None:
            # Session outlived its user
            raise NotAuthenticatedError
        return UserDetails.from_domain(user)

    async def save_details(self, user_id: UUID, first_name: str, last_name: str, insurer_code: str | None) -> None:
        await self._save(user_id, {"first_name": first_name, "last_name": last_name, "insurer_code": insurer_code})
        logger.info("details_saved", user_id=str(user_id))

    async def save_address(self, user_id: UUID, latitude: float, longitude: float, address: str) -> None:
        await self._save(user_id, {"latitude": latitude, "longitude": longitude, "address": address})
        logger.info("address_saved", user_id=str(user_id))

    async def _save(self, user_id: UUID, fields: dict[str, Any]) -> None:
        if not await self._credentials.update(user_id, fields):
            raise NotAuthenticatedError
