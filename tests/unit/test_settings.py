"""
Unit tests for application settings validation.
"""

import pytest
from pydantic import ValidationError

from affiliate.config.settings import Settings


class TestSettings:
    """Test Settings validators and derived values."""

    def test_base_url_trailing_slash_stripped(self):
        """Test urls are normalized for base/code joining."""
        settings = Settings(
            database_url="sqlite+aiosqlite:///:memory:",
            referral_base_url="https://example.com/ref/",
        )

        assert settings.referral_base_url == "https://example.com/ref"

    def test_base_url_requires_scheme(self):
        """Test non-http base url is rejected."""
        with pytest.raises(ValidationError):
            Settings(
                database_url="sqlite+aiosqlite:///:memory:",
                referral_base_url="example.com/ref",
            )

    def test_unsupported_database_url(self):
        """Test unknown database schemes are rejected."""
        with pytest.raises(ValidationError):
            Settings(database_url="mysql://localhost/shop")

    def test_async_database_url(self):
        """Test plain postgres urls get the asyncpg driver."""
        settings = Settings(database_url="postgresql://u:p@localhost/shop")

        assert settings.async_database_url == "postgresql+asyncpg://u:p@localhost/shop"

    def test_code_length_bounds(self):
        """Test referral code length limits."""
        with pytest.raises(ValidationError):
            Settings(
                database_url="sqlite+aiosqlite:///:memory:",
                referral_code_length=2,
            )

    def test_defaults(self):
        """Test business defaults."""
        settings = Settings(database_url="sqlite+aiosqlite:///:memory:")

        assert settings.referral_code_max_attempts == 5
        assert settings.commission_approval_hold_days == 30
        assert settings.affiliate_link_max_attempts == 5

    def test_storefront_url_normalized(self):
        """Test the storefront url gets the same normalization."""
        settings = Settings(
            database_url="sqlite+aiosqlite:///:memory:",
            storefront_base_url=" https://shop.example.com/ ",
        )

        assert settings.storefront_base_url == "https://shop.example.com"

    def test_storefront_url_requires_scheme(self):
        """Test non-http storefront url is rejected."""
        with pytest.raises(ValidationError):
            Settings(
                database_url="sqlite+aiosqlite:///:memory:",
                storefront_base_url="shop.example.com",
            )
