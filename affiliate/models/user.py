"""
User model.

Minimal projection of a platform user: identity and display fields
needed for attribution and notifications.
"""

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from affiliate.models.base import Base


if TYPE_CHECKING:
    from affiliate.models.referral_code import ReferralCode


class User(Base):
    """User model - platform buyers and affiliates."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )
    email: Mapped[str] = mapped_column(
        String(255), unique=True, index=True, nullable=False
    )
    first_name: Mapped[str] = mapped_column(
        String(100), nullable=False, default=""
    )
    last_name: Mapped[str] = mapped_column(
        String(100), nullable=False, default=""
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
    )

    referral_code: Mapped["ReferralCode | None"] = relationship(
        "ReferralCode",
        back_populates="user",
        uselist=False,
    )

    @property
    def full_name(self) -> str:
        """First and last name joined."""
        return f"{self.first_name} {self.last_name}".strip()

    def __repr__(self) -> str:
        """String representation."""
        return f"<User(id={self.id}, email={self.email})>"
