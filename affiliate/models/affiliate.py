"""
Affiliate model.

An affiliate is a user earning commission on attributed purchases.
The row carries the wallet split into available and pending buckets.
"""

from datetime import UTC, datetime
from decimal import Decimal

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Integer
from sqlalchemy.orm import Mapped, mapped_column

from affiliate.models.base import Base
from affiliate.models.types import MoneyType


class Affiliate(Base):
    """
    Affiliate entity with wallet balances.

    Attributes:
        id: Primary key
        user_id: Owning user
        available_balance: Approved commission, withdrawable
        pending_balance: Commission awaiting approval
        total_earned: available_balance + pending_balance
    """

    __tablename__ = "affiliates"
    __table_args__ = (
        CheckConstraint(
            "available_balance >= 0",
            name="check_affiliate_available_non_negative",
        ),
        CheckConstraint(
            "pending_balance >= 0",
            name="check_affiliate_pending_non_negative",
        ),
        CheckConstraint(
            "total_earned = available_balance + pending_balance",
            name="check_affiliate_wallet_total",
        ),
    )

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )

    available_balance: Mapped[Decimal] = mapped_column(
        MoneyType, default=Decimal("0"), nullable=False
    )
    pending_balance: Mapped[Decimal] = mapped_column(
        MoneyType, default=Decimal("0"), nullable=False
    )
    total_earned: Mapped[Decimal] = mapped_column(
        MoneyType, default=Decimal("0"), nullable=False
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
        nullable=False,
    )

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<Affiliate(id={self.id}, user_id={self.user_id}, "
            f"available={self.available_balance}, "
            f"pending={self.pending_balance})>"
        )
