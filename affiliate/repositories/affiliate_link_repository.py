"""
AffiliateLink repository.

Data access layer for AffiliateLink model. Counters are bumped with
single UPDATE statements, and inserts run inside a savepoint so a
unique-key violation leaves the outer transaction usable.
"""

from decimal import Decimal

from loguru import logger
from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from affiliate.models.affiliate_link import AffiliateLink
from affiliate.repositories.base import BaseRepository


class AffiliateLinkRepository(BaseRepository[AffiliateLink]):
    """AffiliateLink repository with specific queries."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize affiliate link repository."""
        super().__init__(AffiliateLink, session)

    async def get_by_slug(self, slug: str) -> AffiliateLink | None:
        """
        Resolve affiliate link slug.

        Args:
            slug: Link slug

        Returns:
            AffiliateLink or None if absent
        """
        return await self.get_by(slug=slug)

    async def get_by_user_and_product(
        self, user_id: int, product_id: str
    ) -> AffiliateLink | None:
        """Get the link a user shares for one product."""
        return await self.get_by(user_id=user_id, product_id=product_id)

    async def slug_exists(self, slug: str) -> bool:
        """Check if slug is already taken."""
        return await self.exists(slug=slug)

    async def insert_unique(
        self, slug: str, user_id: int, product_id: str
    ) -> AffiliateLink | None:
        """
        Insert link, returning None on a unique-key violation.

        Args:
            slug: Candidate slug
            user_id: Owner user ID
            product_id: Shared product

        Returns:
            Created AffiliateLink, or None if the slug is taken or the
            user already has a link for the product
        """
        try:
            async with self.session.begin_nested():
                entity = AffiliateLink(
                    slug=slug, user_id=user_id, product_id=product_id
                )
                self.session.add(entity)
                await self.session.flush()
        except IntegrityError as e:
            logger.warning(
                "Affiliate link insert hit unique constraint",
                extra={"slug": slug, "user_id": user_id, "error": str(e.orig)},
            )
            return None
        return entity

    async def record_click(self, slug: str) -> bool:
        """
        Increment the click counter in a single UPDATE.

        Args:
            slug: Link slug

        Returns:
            False if no link has the slug
        """
        stmt = (
            update(AffiliateLink)
            .where(AffiliateLink.slug == slug)
            .values(clicks=AffiliateLink.clicks + 1)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount > 0

    async def record_conversion(
        self, link_id: int, commission_amount: Decimal
    ) -> None:
        """
        Increment conversion counters in a single UPDATE.

        Args:
            link_id: Affiliate link ID
            commission_amount: Commission earned by the conversion
        """
        stmt = (
            update(AffiliateLink)
            .where(AffiliateLink.id == link_id)
            .values(
                orders=AffiliateLink.orders + 1,
                commission=AffiliateLink.commission + commission_amount,
            )
            .execution_options(synchronize_session=False)
        )
        await self.session.execute(stmt)
