"""
Commission model.

Commission owed to an affiliate for one attributed order.
"""

from datetime import UTC, datetime
from decimal import Decimal

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column

from affiliate.models.base import Base
from affiliate.models.enums import AttributionChannel, CommissionStatus
from affiliate.models.types import MoneyType, PercentType


class Commission(Base):
    """
    Commission entity.

    Created PENDING when an order is attributed. APPROVED moves the
    amount from the affiliate's pending balance to available; REJECTED
    removes it from pending and total. Both are terminal.

    Attributes:
        id: Primary key
        affiliate_id: Earning affiliate
        order_id: External order identifier, one commission per order
        buyer_id: Purchasing user (if known)
        affiliate_link_id: Link used for attribution (link channel only)
        channel: Attribution channel
        order_total: Purchase amount the commission was computed from
        percentage: Tier percentage applied
        amount: order_total * percentage / 100
        status: Lifecycle status
        order_created_at: When the order was placed
        order_delivered_at: When delivery was confirmed
        created_at: When the commission was recorded
        approved_at: When the commission was approved
        rejected_at: When the commission was rejected
        rejection_reason: Operator supplied reason
    """

    __tablename__ = "commissions"
    __table_args__ = (
        CheckConstraint("amount >= 0", name="check_commission_amount_non_negative"),
        Index("idx_commissions_affiliate_status", "affiliate_id", "status"),
    )

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )
    affiliate_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("affiliates.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    order_id: Mapped[str] = mapped_column(
        String(64), unique=True, nullable=False
    )
    buyer_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )
    affiliate_link_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("affiliate_links.id", ondelete="SET NULL"),
        nullable=True,
    )
    channel: Mapped[str] = mapped_column(
        String(32), nullable=False, default=AttributionChannel.REFERRAL_CODE.value
    )

    order_total: Mapped[Decimal] = mapped_column(MoneyType, nullable=False)
    percentage: Mapped[Decimal] = mapped_column(PercentType, nullable=False)
    amount: Mapped[Decimal] = mapped_column(MoneyType, nullable=False)

    status: Mapped[str] = mapped_column(
        String(16),
        default=CommissionStatus.PENDING.value,
        nullable=False,
        index=True,
    )

    order_created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )
    order_delivered_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
    )
    approved_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    rejected_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    rejection_reason: Mapped[str | None] = mapped_column(Text, nullable=True)

    @property
    def is_pending(self) -> bool:
        """Check if commission still awaits a decision."""
        return self.status == CommissionStatus.PENDING.value

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<Commission(id={self.id}, order_id={self.order_id}, "
            f"amount={self.amount}, status={self.status})>"
        )
