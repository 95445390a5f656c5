"""
Referral code package.

Generates and persists globally unique referral codes.
"""

from affiliate.services.referral_code.generator import (
    REFERRAL_CODE_ALPHABET,
    generate_candidate,
)
from affiliate.services.referral_code.registry import ReferralCodeRegistry


__all__ = [
    "REFERRAL_CODE_ALPHABET",
    "generate_candidate",
    "ReferralCodeRegistry",
]
