"""
Attribution resolver.

Links an order to the affiliate whose referral code or affiliate link
led to it. The affiliate link slug is tried first; if it is absent or
does not resolve, the referral code is tried. Unresolvable identifiers
are logged as missed attributions and never fail the order.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from affiliate.models.enums import AttributionChannel
from affiliate.repositories.affiliate_link_repository import (
    AffiliateLinkRepository,
)
from affiliate.repositories.affiliate_repository import AffiliateRepository
from affiliate.repositories.referral_code_repository import (
    ReferralCodeRepository,
)
from affiliate.services.base_service import BaseService
from affiliate.services.commission.types import Attribution
from affiliate.utils.exceptions import AttributionUnresolvable


class AttributionResolver(BaseService):
    """Resolves referral identifiers to affiliates."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.code_repo = ReferralCodeRepository(session)
        self.link_repo = AffiliateLinkRepository(session)
        self.affiliate_repo = AffiliateRepository(session)

    def _missed(self, channel: AttributionChannel, identifier: str) -> None:
        error = AttributionUnresolvable(channel.display_name, identifier)
        self.logger.bind(channel=channel.value, identifier=identifier).warning(
            f"Missed attribution: {error}"
        )

    async def resolve(
        self,
        referral_slug: str | None = None,
        referral_code: str | None = None,
    ) -> Attribution | None:
        """
        Resolve the affiliate for an order.

        Creates the affiliate wallet on first attribution.

        Args:
            referral_slug: Affiliate link slug
            referral_code: Referral code (case-insensitive)

        Returns:
            Attribution, or None if nothing resolves
        """
        slug = (referral_slug or "").strip()
        if slug:
            link = await self.link_repo.get_by_slug(slug)
            if link:
                affiliate = await self.affiliate_repo.get_or_create_for_user(
                    link.user_id
                )
                return Attribution(
                    affiliate=affiliate,
                    channel=AttributionChannel.AFFILIATE_LINK,
                    identifier=slug,
                    affiliate_link=link,
                )
            self._missed(AttributionChannel.AFFILIATE_LINK, slug)

        code = (referral_code or "").strip().upper()
        if code:
            referral = await self.code_repo.get_by_code(code)
            if referral:
                affiliate = await self.affiliate_repo.get_or_create_for_user(
                    referral.user_id
                )
                return Attribution(
                    affiliate=affiliate,
                    channel=AttributionChannel.REFERRAL_CODE,
                    identifier=code,
                )
            self._missed(AttributionChannel.REFERRAL_CODE, code)

        return None
