"""
Database models.

Exports all SQLAlchemy models for easy imports.
"""

from affiliate.models.affiliate import Affiliate
from affiliate.models.affiliate_link import AffiliateLink
from affiliate.models.base import Base
from affiliate.models.commission import Commission
from affiliate.models.enums import AttributionChannel, CommissionStatus
from affiliate.models.referral_code import ReferralCode
from affiliate.models.user import User


__all__ = [
    "Base",
    "User",
    "ReferralCode",
    "Affiliate",
    "AffiliateLink",
    "Commission",
    "CommissionStatus",
    "AttributionChannel",
]
