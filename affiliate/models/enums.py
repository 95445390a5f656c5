"""
Model enums.
"""

from enum import StrEnum


class CommissionStatus(StrEnum):
    """Commission lifecycle states. APPROVED and REJECTED are terminal."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class AttributionChannel(StrEnum):
    """How an order was attributed to an affiliate."""

    REFERRAL_CODE = "referral_code"
    AFFILIATE_LINK = "affiliate_link"

    @property
    def display_name(self) -> str:
        """Human readable channel name used in notifications."""
        return self.value.replace("_", " ")
