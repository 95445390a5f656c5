"""
AffiliateLink model.

Slug-based attribution channel, distinct from referral codes. One link
per user and product; tracks click and conversion counters for reporting.
"""

from datetime import UTC, datetime
from decimal import Decimal

from sqlalchemy import DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from affiliate.models.base import Base
from affiliate.models.types import MoneyType


class AffiliateLink(Base):
    """AffiliateLink entity."""

    __tablename__ = "affiliate_links"
    __table_args__ = (
        UniqueConstraint(
            "user_id", "product_id", name="uq_affiliate_link_user_product"
        ),
    )

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )
    slug: Mapped[str] = mapped_column(
        String(128), unique=True, index=True, nullable=False
    )
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    product_id: Mapped[str | None] = mapped_column(
        String(64), nullable=True
    )

    # Traffic and conversion stats
    clicks: Mapped[int] = mapped_column(
        Integer, default=0, nullable=False
    )
    orders: Mapped[int] = mapped_column(
        Integer, default=0, nullable=False
    )
    commission: Mapped[Decimal] = mapped_column(
        MoneyType, default=Decimal("0"), nullable=False
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
    )

    def __repr__(self) -> str:
        """String representation."""
        return f"<AffiliateLink(slug={self.slug}, user_id={self.user_id})>"
