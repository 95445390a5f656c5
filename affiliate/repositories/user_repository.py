"""
User repository.

Data access layer for User model.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from affiliate.models.referral_code import ReferralCode
from affiliate.models.user import User
from affiliate.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """User repository with specific queries."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize user repository."""
        super().__init__(User, session)

    async def get_by_email(self, email: str) -> User | None:
        """
        Get user by email.

        Args:
            email: User email

        Returns:
            User or None
        """
        return await self.get_by(email=email)

    async def get_ids_without_referral_code(self) -> list[int]:
        """
        Get IDs of users that own no referral code.

        Returns:
            User IDs ordered ascending
        """
        stmt = (
            select(User.id)
            .outerjoin(ReferralCode, ReferralCode.user_id == User.id)
            .where(ReferralCode.id.is_(None))
            .order_by(User.id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
