"""
Value types for the commission services.
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal

from affiliate.models.affiliate import Affiliate
from affiliate.models.affiliate_link import AffiliateLink
from affiliate.models.enums import AttributionChannel
from affiliate.services.checkout.payload import CheckoutPayload
from affiliate.services.commission.tier_calculator import to_decimal
from affiliate.services.notification.events import WalletDisplay
from affiliate.utils.formatters import format_amount


@dataclass(frozen=True)
class OrderAttribution:
    """Order facts needed to attribute and compute a commission."""

    order_id: str
    order_total: Decimal
    referral_code: str | None = None
    referral_slug: str | None = None
    buyer_id: int | None = None
    order_created_at: datetime | None = None

    @classmethod
    def from_checkout(
        cls,
        order_id: str,
        payload: CheckoutPayload,
        buyer_id: int | None = None,
        order_created_at: datetime | None = None,
    ) -> "OrderAttribution":
        """Build from a normalized checkout payload."""
        return cls(
            order_id=order_id,
            order_total=to_decimal(payload.total) or Decimal("0"),
            referral_code=payload.referral_code,
            referral_slug=payload.referral_slug,
            buyer_id=buyer_id,
            order_created_at=order_created_at,
        )

    @property
    def has_referral(self) -> bool:
        """Check if any attribution identifier is present."""
        return bool(
            (self.referral_code and self.referral_code.strip())
            or (self.referral_slug and self.referral_slug.strip())
        )


@dataclass(frozen=True)
class Attribution:
    """Resolved affiliate for an order."""

    affiliate: Affiliate
    channel: AttributionChannel
    identifier: str
    affiliate_link: AffiliateLink | None = None


@dataclass(frozen=True)
class WalletSnapshot:
    """Point-in-time copy of an affiliate wallet."""

    available: Decimal
    pending: Decimal
    total: Decimal

    @classmethod
    def of(cls, affiliate: Affiliate) -> "WalletSnapshot":
        return cls(
            available=affiliate.available_balance,
            pending=affiliate.pending_balance,
            total=affiliate.total_earned,
        )

    @property
    def is_consistent(self) -> bool:
        """total == available + pending."""
        return self.total == self.available + self.pending

    def to_display(self) -> WalletDisplay:
        return WalletDisplay(
            available=format_amount(self.available),
            pending=format_amount(self.pending),
            total=format_amount(self.total),
        )


@dataclass(frozen=True)
class SkippedCommission:
    """Commission left pending by an approval sweep."""

    commission_id: int
    order_id: str
    reason: str


@dataclass
class ApprovalReport:
    """Result of an approval sweep."""

    total_processed: int = 0
    approved: list[int] = field(default_factory=list)
    approved_order_ids: list[str] = field(default_factory=list)
    skipped: list[SkippedCommission] = field(default_factory=list)
    total_amount_approved: Decimal = Decimal("0")

    @property
    def total_approved(self) -> int:
        return len(self.approved)

    @property
    def total_skipped(self) -> int:
        return len(self.skipped)
