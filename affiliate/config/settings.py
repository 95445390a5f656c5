"""
Application settings.

Loads configuration from environment variables using pydantic-settings.
"""

from pydantic import Field, ValidationInfo, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database
    database_url: str
    database_echo: bool = False

    # Runtime
    log_level: str = "INFO"
    log_file: str = "logs/affiliate.log"

    # Referral codes
    referral_base_url: str = "https://www.access-sellr.com/ref"
    referral_code_length: int = Field(
        default=8,
        ge=4,
        le=32,
        description="Number of characters in a generated referral code",
    )
    referral_code_max_attempts: int = Field(
        default=5,
        gt=0,
        description="Candidates tried before giving up on a unique code",
    )

    # Affiliate product links
    storefront_base_url: str = "https://www.access-sellr.com"
    affiliate_link_max_attempts: int = Field(
        default=5,
        gt=0,
        description="Slugs tried before giving up on a unique link",
    )

    # Commission approval
    commission_approval_hold_days: int = Field(
        default=30,
        ge=0,
        description="Days an order must age before its commission is approved",
    )

    # Display formatting for notifications
    currency_symbol: str = "₦"
    display_timezone: str = "Africa/Lagos"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("referral_base_url", "storefront_base_url")
    @classmethod
    def validate_base_url(cls, v: str, info: ValidationInfo) -> str:
        """Strip trailing slashes so urls are built as base/path."""
        v = v.strip().rstrip("/")
        if not v.startswith(("http://", "https://")):
            raise ValueError(
                f"{info.field_name.upper()} must start with http:// or https://"
            )
        return v

    @field_validator("database_url")
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        """Validate database URL."""
        if not v.startswith(
            ("postgresql://", "postgresql+asyncpg://", "sqlite+aiosqlite://")
        ):
            raise ValueError(
                "DATABASE_URL must start with postgresql://, "
                "postgresql+asyncpg:// or sqlite+aiosqlite://"
            )
        return v

    @property
    def async_database_url(self) -> str:
        """Database URL with the async driver selected."""
        if self.database_url.startswith("postgresql://"):
            return self.database_url.replace(
                "postgresql://", "postgresql+asyncpg://", 1
            )
        return self.database_url


# Global settings instance
settings = Settings()
