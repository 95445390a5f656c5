"""
User service.

Creates platform users and gives each one a referral code at creation
time. Code exhaustion is a soft failure: the user is still created and
the backfill picks them up later.
"""

import random

from sqlalchemy.ext.asyncio import AsyncSession

from affiliate.models.user import User
from affiliate.repositories.user_repository import UserRepository
from affiliate.services.base_service import BaseService
from affiliate.services.referral_code.registry import ReferralCodeRegistry
from affiliate.utils.db_decorators import with_rollback_on_error
from affiliate.utils.exceptions import NonUniqueExhausted


class UserService(BaseService):
    """User creation with referral code assignment."""

    def __init__(
        self,
        session: AsyncSession,
        registry: ReferralCodeRegistry | None = None,
        rng: random.Random | None = None,
    ) -> None:
        super().__init__(session)
        self.user_repo = UserRepository(session)
        self.registry = registry or ReferralCodeRegistry(session, rng=rng)

    @with_rollback_on_error
    async def register_user(
        self,
        email: str,
        first_name: str = "",
        last_name: str = "",
    ) -> User:
        """
        Register new user and assign a referral code.

        Args:
            email: User email
            first_name: First name
            last_name: Last name

        Returns:
            Created user

        Raises:
            ValueError: If the email is already registered
        """
        email = email.strip().lower()
        if await self.user_repo.get_by_email(email):
            raise ValueError("User already registered")

        user = await self.user_repo.create(
            email=email, first_name=first_name, last_name=last_name
        )

        try:
            await self.registry.assign_code(user.id)
        except NonUniqueExhausted as e:
            self.logger.error(
                f"{e}; user left without a code until backfill",
                extra={"user_id": user.id},
            )

        await self.commit()
        return user
