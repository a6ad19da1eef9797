import asyncio

import bcrypt
import structlog

from healthdesk.errors import DependencyError

logger = structlog.get_logger(__name__)

# bcrypt ignores (or, in newer releases, rejects) input past 72 bytes
_BCRYPT_MAX_BYTES = 72


class PasswordHasher:
    """bcrypt hashing with a fixed work factor, run off the event loop."""

    def __init__(self, rounds: int = 10) -> None:
        self._rounds = rounds
        # Built up front so the first unknown-user login costs the same as every other
        self._dummy_hash = bcrypt.hashpw(b"dummy-password", bcrypt.gensalt(rounds))

    @property
    def rounds(self) -> int:
        return self._rounds

    async def hash(self, password: str) -> str:
        """Hash a plaintext password.

        Raises:
            DependencyError: If bcrypt fails; no hash is returned in that case
        """
        try:
            hashed = await asyncio.to_thread(bcrypt.hashpw, password.encode("utf-8"), bcrypt.gensalt(self._rounds))
        except (ValueError, MemoryError) as e:
            logger.exception("password_hash_failed")
            raise DependencyError("Password hashing failed") from e
        return hashed.decode("utf-8")

    async def verify(self, password: str, password_hash: str) -> bool:
        """Check a plaintext password against a stored hash.

        A malformed hash costs one dummy verification and returns False,
        so it is indistinguishable from a wrong password.
        """
        candidate = password.encode("utf-8")
        if len(candidate) > _BCRYPT_MAX_BYTES:
            await self.verify_dummy(password)
            return False
        try:
            return await asyncio.to_thread(bcrypt.checkpw, candidate, password_hash.encode("utf-8"))
        except ValueError:
            logger.warning("password_hash_malformed")
            await self.verify_dummy(password)
            return False

    async def verify_dummy(self, password: str) -> None:
        """Spend one verification on a throwaway hash, for users that do not exist."""
        candidate = password.encode("utf-8")[:_BCRYPT_MAX_BYTES]
        await asyncio.to_thread(bcrypt.checkpw, candidate, self._dummy_hash)
