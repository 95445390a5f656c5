"""
Referral code registry.

Assigns exactly one unique referral code per user. Uniqueness rests on
the database constraint: the existence check only avoids pointless
inserts, and a unique-key violation at insert time is handled as a
collision within the same attempt budget.
"""

import random

from sqlalchemy.ext.asyncio import AsyncSession

from affiliate.config.settings import settings
from affiliate.models.referral_code import ReferralCode
from affiliate.repositories.referral_code_repository import (
    ReferralCodeRepository,
)
from affiliate.repositories.user_repository import UserRepository
from affiliate.services.base_service import BaseService
from affiliate.services.referral_code.generator import generate_candidate
from affiliate.utils.exceptions import NonUniqueExhausted


class ReferralCodeRegistry(BaseService):
    """
    Referral code registry.

    Args:
        session: Async database session
        base_url: Prefix for referral urls, defaults to settings
        rng: Random source for candidates (inject a seeded
            random.Random for deterministic tests)
        max_attempts: Candidates tried per user
        code_length: Characters per code
    """

    def __init__(
        self,
        session: AsyncSession,
        base_url: str | None = None,
        rng: random.Random | None = None,
        max_attempts: int | None = None,
        code_length: int | None = None,
    ) -> None:
        super().__init__(session)
        self.code_repo = ReferralCodeRepository(session)
        self.user_repo = UserRepository(session)
        self.base_url = (base_url or settings.referral_base_url).rstrip("/")
        self.rng = rng
        self.max_attempts = max_attempts or settings.referral_code_max_attempts
        self.code_length = code_length or settings.referral_code_length

    def generate_candidate(self) -> str:
        """Draw one candidate code."""
        return generate_candidate(self.code_length, self.rng)

    def build_url(self, code: str) -> str:
        """Referral url for a code."""
        return f"{self.base_url}/{code}"

    async def assign_code(self, user_id: int) -> ReferralCode:
        """
        Assign a unique referral code to a user.

        Returns the existing code if the user already owns one. Changes
        are flushed, committing is left to the caller.

        Args:
            user_id: User ID

        Returns:
            The user's ReferralCode

        Raises:
            NonUniqueExhausted: If every attempt collided; nothing is written
        """
        existing = await self.code_repo.get_by_user_id(user_id)
        if existing:
            return existing

        for attempt in range(1, self.max_attempts + 1):
            code = self.generate_candidate()

            if await self.code_repo.code_exists(code):
                self.logger.debug(
                    f"Referral code collision for user {user_id} "
                    f"(attempt {attempt}/{self.max_attempts})"
                )
                continue

            created = await self.code_repo.insert_unique(
                code=code, url=self.build_url(code), user_id=user_id
            )
            if created:
                self.logger.info(
                    "Referral code assigned",
                    extra={"user_id": user_id, "code": code},
                )
                return created

            # Lost a race: either the code or this user got a row meanwhile
            existing = await self.code_repo.get_by_user_id(user_id)
            if existing:
                return existing

        raise NonUniqueExhausted(user_id, self.max_attempts)

    async def backfill(self) -> int:
        """
        Assign codes to every user that has none.

        Each assignment is committed on its own, so one user's failure
        does not affect the others. Users that already own a code are
        not selected and never reassigned.

        Returns:
            Number of codes created
        """
        user_ids = await self.user_repo.get_ids_without_referral_code()
        self.logger.info(f"Backfilling referral codes for {len(user_ids)} users")

        created = 0
        for user_id in user_ids:
            try:
                await self.assign_code(user_id)
            except NonUniqueExhausted as e:
                await self.rollback()
                self.logger.error(str(e), extra={"user_id": user_id})
                continue
            await self.commit()
            created += 1

        self.logger.info(f"Backfill complete. Created {created} referral codes.")
        return created
