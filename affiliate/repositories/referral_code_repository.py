"""
ReferralCode repository.

Data access layer for ReferralCode model. Inserts run inside a savepoint
so a unique-key violation leaves the outer transaction usable.
"""

from loguru import logger
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from affiliate.models.referral_code import ReferralCode
from affiliate.repositories.base import BaseRepository


class ReferralCodeRepository(BaseRepository[ReferralCode]):
    """ReferralCode repository with specific queries."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize referral code repository."""
        super().__init__(ReferralCode, session)

    async def get_by_code(self, code: str) -> ReferralCode | None:
        """
        Resolve referral code.

        Args:
            code: Referral code

        Returns:
            ReferralCode or None if absent
        """
        return await self.get_by(code=code)

    async def get_by_user_id(self, user_id: int) -> ReferralCode | None:
        """
        Get the code owned by a user.

        Args:
            user_id: Owner user ID

        Returns:
            ReferralCode or None
        """
        return await self.get_by(user_id=user_id)

    async def code_exists(self, code: str) -> bool:
        """
        Check if code is already assigned.

        Args:
            code: Candidate code

        Returns:
            True if taken
        """
        return await self.exists(code=code)

    async def insert_unique(
        self, code: str, url: str, user_id: int
    ) -> ReferralCode | None:
        """
        Insert code, returning None on a unique-key violation.

        Args:
            code: Candidate code
            url: Referral url derived from the code
            user_id: Owner user ID

        Returns:
            Created ReferralCode, or None if the code or the owner
            already exists
        """
        try:
            async with self.session.begin_nested():
                entity = ReferralCode(code=code, url=url, user_id=user_id)
                self.session.add(entity)
                await self.session.flush()
        except IntegrityError as e:
            logger.warning(
                "Referral code insert hit unique constraint",
                extra={"code": code, "user_id": user_id, "error": str(e.orig)},
            )
            return None
        return entity
