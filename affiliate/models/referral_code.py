"""
ReferralCode model.

One globally unique code per user. Uniqueness of both the code and the
owner is enforced by the database, not only by the application.
"""

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from affiliate.models.base import Base


if TYPE_CHECKING:
    from affiliate.models.user import User


class ReferralCode(Base):
    """
    ReferralCode entity.

    Attributes:
        id: Primary key
        code: Uppercase alphanumeric token, globally unique
        url: base_url/code, always derived from code
        user_id: Owning user (one code per user)
        created_at: Creation timestamp

    Never mutated after creation.
    """

    __tablename__ = "referral_codes"

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )
    code: Mapped[str] = mapped_column(
        String(32), unique=True, index=True, nullable=False
    )
    url: Mapped[str] = mapped_column(String(512), nullable=False)
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
    )

    user: Mapped["User"] = relationship(
        "User", back_populates="referral_code"
    )

    def __repr__(self) -> str:
        """String representation."""
        return f"<ReferralCode(code={self.code}, user_id={self.user_id})>"
