"""
Shared fixtures for unit tests.

This module provides common fixtures used across multiple test modules:
- ReferralCodeRegistry with mocked repositories
- AffiliateLinkService with a mocked repository
- CommissionLifecycleService with mocked repositories
- Mock affiliate and commission objects
"""

from datetime import UTC, datetime
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest

from affiliate.models.enums import AttributionChannel, CommissionStatus
from affiliate.services.affiliate_link.service import AffiliateLinkService
from affiliate.services.commission.lifecycle import CommissionLifecycleService
from affiliate.services.referral_code.registry import ReferralCodeRegistry


@pytest.fixture
def registry(mock_session, seeded_rng):
    """
    Create ReferralCodeRegistry with mocked repositories.

    Defaults: the user owns no code, no candidate exists, every insert
    succeeds and echoes back a ReferralCode-like mock.
    """
    registry = ReferralCodeRegistry(
        mock_session,
        base_url="https://www.access-sellr.com/ref/",
        rng=seeded_rng,
        max_attempts=5,
        code_length=8,
    )
    registry.code_repo = AsyncMock()
    registry.code_repo.get_by_user_id.return_value = None
    registry.code_repo.code_exists.return_value = False

    async def _insert(code, url, user_id):
        return MagicMock(code=code, url=url, user_id=user_id)

    registry.code_repo.insert_unique.side_effect = _insert
    registry.user_repo = AsyncMock()
    return registry


@pytest.fixture
def link_service(mock_session, seeded_rng):
    """
    Create AffiliateLinkService with a mocked repository.

    Defaults: no link for the pair, no slug taken, every insert succeeds.
    """
    service = AffiliateLinkService(
        mock_session,
        storefront_url="https://shop.example.com/",
        rng=seeded_rng,
        max_attempts=5,
    )
    service.link_repo = AsyncMock()
    service.link_repo.get_by_user_and_product.return_value = None
    service.link_repo.slug_exists.return_value = False

    async def _insert(slug, user_id, product_id):
        return MagicMock(slug=slug, user_id=user_id, product_id=product_id)

    service.link_repo.insert_unique.side_effect = _insert
    return service


@pytest.fixture
def mock_affiliate():
    """
    Create mock affiliate with an empty wallet.

    Returns:
        MagicMock: Affiliate with id 10 owned by user 100
    """
    affiliate = MagicMock()
    affiliate.id = 10
    affiliate.user_id = 100
    affiliate.available_balance = Decimal("0")
    affiliate.pending_balance = Decimal("0")
    affiliate.total_earned = Decimal("0")
    return affiliate


@pytest.fixture
def mock_commission():
    """
    Create mock pending commission of 90,000 on a 600,000 order.

    Returns:
        MagicMock: Commission in PENDING status
    """
    commission = MagicMock()
    commission.id = 1
    commission.affiliate_id = 10
    commission.order_id = "ORD-1"
    commission.channel = AttributionChannel.REFERRAL_CODE.value
    commission.order_total = Decimal("600000")
    commission.percentage = Decimal("15")
    commission.amount = Decimal("90000")
    commission.status = CommissionStatus.PENDING.value
    commission.is_pending = True
    commission.order_created_at = datetime(2026, 9, 1, 10, 0, tzinfo=UTC)
    commission.order_delivered_at = None
    commission.approved_at = None
    return commission


@pytest.fixture
def lifecycle(mock_session, recording_dispatcher):
    """Create CommissionLifecycleService with mocked repositories."""
    service = CommissionLifecycleService(mock_session, recording_dispatcher)
    service.commission_repo = AsyncMock()
    service.affiliate_repo = AsyncMock()
    service.link_repo = AsyncMock()
    service.user_repo = AsyncMock()
    service.resolver = AsyncMock()
    return service
