"""
Commission repository.

Data access layer for Commission model.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from affiliate.models.commission import Commission
from affiliate.models.enums import CommissionStatus
from affiliate.repositories.base import BaseRepository


class CommissionRepository(BaseRepository[Commission]):
    """Commission repository with specific queries."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize commission repository."""
        super().__init__(Commission, session)

    async def get_by_order_id(self, order_id: str) -> Commission | None:
        """
        Get commission recorded for an order.

        Args:
            order_id: External order identifier

        Returns:
            Commission or None
        """
        return await self.get_by(order_id=order_id)

    async def get_pending(self, limit: int | None = None) -> list[Commission]:
        """
        Get commissions awaiting approval, oldest first.

        Args:
            limit: Max number of results

        Returns:
            List of pending commissions
        """
        stmt = (
            select(Commission)
            .where(Commission.status == CommissionStatus.PENDING.value)
            .order_by(Commission.created_at, Commission.id)
        )
        if limit:
            stmt = stmt.limit(limit)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
