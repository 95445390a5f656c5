"""
Affiliate repository.

Data access layer for Affiliate model, including the atomic wallet
operations. Every wallet mutation locks the affiliate row first so
concurrent credits and approvals for one affiliate are serialized.
"""

from decimal import Decimal

from loguru import logger
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from affiliate.models.affiliate import Affiliate
from affiliate.repositories.base import BaseRepository
from affiliate.utils.exceptions import WalletInvariantError


class AffiliateRepository(BaseRepository[Affiliate]):
    """Affiliate repository with wallet operations."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize affiliate repository."""
        super().__init__(Affiliate, session)

    async def get_by_user_id(self, user_id: int) -> Affiliate | None:
        """
        Get affiliate for a user.

        Args:
            user_id: Owner user ID

        Returns:
            Affiliate or None
        """
        return await self.get_by(user_id=user_id)

    async def get_or_create_for_user(self, user_id: int) -> Affiliate:
        """
        Get affiliate for a user, creating one with an empty wallet.

        A concurrent creation for the same user is detected through the
        unique user_id constraint and the winner's row is returned.

        Args:
            user_id: Owner user ID

        Returns:
            Affiliate
        """
        affiliate = await self.get_by_user_id(user_id)
        if affiliate:
            return affiliate

        try:
            async with self.session.begin_nested():
                affiliate = Affiliate(
                    user_id=user_id,
                    available_balance=Decimal("0"),
                    pending_balance=Decimal("0"),
                    total_earned=Decimal("0"),
                )
                self.session.add(affiliate)
                await self.session.flush()
        except IntegrityError:
            affiliate = await self.get_by_user_id(user_id)
            if affiliate is None:
                raise
            return affiliate

        logger.info(f"Wallet created for user {user_id}")
        return affiliate

    async def _lock(self, affiliate_id: int) -> Affiliate:
        affiliate = await self.get_for_update(affiliate_id)
        if affiliate is None:
            raise WalletInvariantError(f"Affiliate {affiliate_id} not found")
        return affiliate

    @staticmethod
    def _check_amount(amount: Decimal) -> None:
        if amount < 0:
            raise WalletInvariantError(
                f"Wallet amount must be non-negative, got {amount}"
            )

    async def credit_pending(
        self, affiliate_id: int, amount: Decimal
    ) -> Affiliate:
        """
        Add a new commission to pending and total.

        Args:
            affiliate_id: Affiliate ID
            amount: Commission amount

        Returns:
            Updated affiliate
        """
        self._check_amount(amount)
        affiliate = await self._lock(affiliate_id)

        affiliate.pending_balance += amount
        affiliate.total_earned += amount

        await self.session.flush()
        return affiliate

    async def move_pending_to_available(
        self, affiliate_id: int, amount: Decimal
    ) -> Affiliate:
        """
        Move an approved commission from pending to available.

        Total is unchanged.

        Args:
            affiliate_id: Affiliate ID
            amount: Commission amount

        Returns:
            Updated affiliate

        Raises:
            WalletInvariantError: If pending balance is insufficient
        """
        self._check_amount(amount)
        affiliate = await self._lock(affiliate_id)

        if affiliate.pending_balance < amount:
            raise WalletInvariantError(
                f"Affiliate {affiliate_id} pending balance "
                f"{affiliate.pending_balance} is less than {amount}"
            )

        affiliate.pending_balance -= amount
        affiliate.available_balance += amount

        await self.session.flush()
        return affiliate

    async def reverse_pending(
        self, affiliate_id: int, amount: Decimal
    ) -> Affiliate:
        """
        Remove a rejected commission from pending and total.

        Args:
            affiliate_id: Affiliate ID
            amount: Commission amount

        Returns:
            Updated affiliate

        Raises:
            WalletInvariantError: If pending balance is insufficient
        """
        self._check_amount(amount)
        affiliate = await self._lock(affiliate_id)

        if affiliate.pending_balance < amount:
            raise WalletInvariantError(
                f"Affiliate {affiliate_id} pending balance "
                f"{affiliate.pending_balance} is less than {amount}"
            )

        affiliate.pending_balance -= amount
        affiliate.total_earned -= amount

        await self.session.flush()
        return affiliate
