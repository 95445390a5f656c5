"""
Commission services package.

Contains modular services for commission processing:
- tier_calculator: Pure commission and referral discount rules
- attribution: Resolves referral codes and affiliate links
- lifecycle: Pending / approved / rejected transitions
- approval_sweep: Scheduled approval of eligible commissions
"""

from affiliate.services.commission.approval_sweep import CommissionApprovalSweep
from affiliate.services.commission.attribution import AttributionResolver
from affiliate.services.commission.lifecycle import CommissionLifecycleService
from affiliate.services.commission.tier_calculator import (
    calculate_commission_amount,
    commission_percentage,
    referral_discount_amount,
    referral_discount_percent,
)
from affiliate.services.commission.types import (
    ApprovalReport,
    Attribution,
    OrderAttribution,
    SkippedCommission,
    WalletSnapshot,
)


__all__ = [
    # Rules
    "commission_percentage",
    "calculate_commission_amount",
    "referral_discount_percent",
    "referral_discount_amount",
    # Services
    "AttributionResolver",
    "CommissionLifecycleService",
    "CommissionApprovalSweep",
    # Types
    "OrderAttribution",
    "Attribution",
    "WalletSnapshot",
    "ApprovalReport",
    "SkippedCommission",
]
