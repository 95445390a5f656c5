"""
Affiliate link service.

An affiliate gets one link per product, identified by a slug made of
the user and product IDs plus a random suffix. As with referral codes,
slug uniqueness rests on the database constraints and an insert that
violates one counts as a collision.
"""

import random
import string

from sqlalchemy.ext.asyncio import AsyncSession

from affiliate.config.settings import settings
from affiliate.models.affiliate_link import AffiliateLink
from affiliate.repositories.affiliate_link_repository import (
    AffiliateLinkRepository,
)
from affiliate.services.base_service import BaseService, transaction
from affiliate.services.referral_code.generator import generate_candidate
from affiliate.utils.exceptions import NonUniqueExhausted, ValidationFailure


SLUG_SUFFIX_ALPHABET = string.ascii_lowercase + string.digits
SLUG_SUFFIX_LENGTH = 5
SLUG_PREFIX_LENGTH = 6
PRODUCT_ID_MAX_LENGTH = 64


class AffiliateLinkService(BaseService):
    """
    Affiliate link service.

    Args:
        session: Async database session
        storefront_url: Prefix for shareable urls, defaults to settings
        rng: Random source for slug suffixes
        max_attempts: Slugs tried per link
    """

    def __init__(
        self,
        session: AsyncSession,
        storefront_url: str | None = None,
        rng: random.Random | None = None,
        max_attempts: int | None = None,
    ) -> None:
        super().__init__(session)
        self.link_repo = AffiliateLinkRepository(session)
        self.storefront_url = (
            storefront_url or settings.storefront_base_url
        ).rstrip("/")
        self.rng = rng
        self.max_attempts = max_attempts or settings.affiliate_link_max_attempts

    def generate_slug(self, user_id: int, product_id: str) -> str:
        """Draw one candidate slug for a user and product."""
        suffix = generate_candidate(
            SLUG_SUFFIX_LENGTH, self.rng, alphabet=SLUG_SUFFIX_ALPHABET
        )
        return (
            f"{str(user_id)[:SLUG_PREFIX_LENGTH]}-"
            f"{product_id[:SLUG_PREFIX_LENGTH]}-{suffix}"
        )

    def share_url(self, link: AffiliateLink) -> str:
        """Storefront url of the product carrying the link slug."""
        return f"{self.storefront_url}/product/{link.product_id}?ref={link.slug}"

    @transaction
    async def generate_link(self, user_id: int, product_id: str) -> AffiliateLink:
        """
        Get or create the user's link for a product.

        Args:
            user_id: Affiliate user ID
            product_id: Product to share

        Returns:
            The existing or new AffiliateLink

        Raises:
            ValidationFailure: If product_id is empty or too long
            NonUniqueExhausted: If every slug collided; nothing is written
        """
        product_id = str(product_id).strip()
        if not product_id or len(product_id) > PRODUCT_ID_MAX_LENGTH:
            raise ValidationFailure(
                f"Invalid product ID: {product_id!r}", fields=["product_id"]
            )

        existing = await self.link_repo.get_by_user_and_product(
            user_id, product_id
        )
        if existing:
            return existing

        for attempt in range(1, self.max_attempts + 1):
            slug = self.generate_slug(user_id, product_id)

            if await self.link_repo.slug_exists(slug):
                self.logger.debug(
                    f"Affiliate link slug collision for user {user_id} "
                    f"(attempt {attempt}/{self.max_attempts})"
                )
                continue

            created = await self.link_repo.insert_unique(
                slug=slug, user_id=user_id, product_id=product_id
            )
            if created:
                self.logger.info(
                    "Affiliate link generated",
                    extra={
                        "user_id": user_id,
                        "product_id": product_id,
                        "slug": slug,
                    },
                )
                return created

            # Lost a race: the slug or this user-product pair got a row
            existing = await self.link_repo.get_by_user_and_product(
                user_id, product_id
            )
            if existing:
                return existing

        raise NonUniqueExhausted(
            user_id, self.max_attempts, kind="affiliate link slug"
        )

    @transaction
    async def record_click(self, slug: str) -> bool:
        """
        Count one click on a link.

        Args:
            slug: Link slug from the ?ref= parameter

        Returns:
            True if counted, False for an unknown slug
        """
        if await self.link_repo.record_click(slug):
            return True
        self.logger.bind(slug=slug).warning("Click on unknown affiliate link")
        return False
