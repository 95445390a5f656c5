"""
Repositories package.

Data access layer, one repository per model.
"""

from affiliate.repositories.affiliate_link_repository import (
    AffiliateLinkRepository,
)
from affiliate.repositories.affiliate_repository import AffiliateRepository
from affiliate.repositories.base import BaseRepository
from affiliate.repositories.commission_repository import CommissionRepository
from affiliate.repositories.referral_code_repository import (
    ReferralCodeRepository,
)
from affiliate.repositories.user_repository import UserRepository


__all__ = [
    "BaseRepository",
    "UserRepository",
    "ReferralCodeRepository",
    "AffiliateRepository",
    "AffiliateLinkRepository",
    "CommissionRepository",
]
