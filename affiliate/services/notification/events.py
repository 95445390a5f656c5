"""
Notification events.

Every display field is a preformatted string (currency rounded with
symbol, dates in the display timezone).
"""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class WalletDisplay:
    """Formatted wallet balances."""

    available: str
    pending: str
    total: str


@dataclass(frozen=True)
class ReferralUsed:
    """A referral code or affiliate link was used for a purchase."""

    commission_id: int
    order_id: str
    affiliate_id: int
    affiliate_user_id: int
    buyer_id: int | None
    affiliate_name: str
    affiliate_email: str
    buyer_name: str
    buyer_email: str
    channel: str
    purchase_amount: str
    commission_amount: str
    commission_percentage: str
    purchase_date: str

    event_type: str = field(default="referral_used", init=False)


@dataclass(frozen=True)
class CommissionApproved:
    """A pending commission was approved and credited."""

    commission_id: int
    order_id: str
    affiliate_id: int
    affiliate_user_id: int
    affiliate_name: str
    affiliate_email: str
    commission_amount: str
    wallet_before: WalletDisplay
    wallet_after: WalletDisplay
    approved_at: str

    event_type: str = field(default="commission_approved", init=False)


@dataclass(frozen=True)
class CommissionApprovalReport:
    """Summary of one approval sweep, for operators."""

    report_date: str
    total_processed: int
    total_approved: int
    total_skipped: int
    total_amount_approved: str
    approved_order_ids: tuple[str, ...] = ()
    skipped: tuple[tuple[str, str], ...] = ()

    event_type: str = field(default="commission_approval_report", init=False)


NotificationEvent = ReferralUsed | CommissionApproved | CommissionApprovalReport
