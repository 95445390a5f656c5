"""Integration tests for commission recording, approval and rejection."""

from datetime import UTC, datetime, timedelta
from decimal import Decimal

import pytest
from sqlalchemy.exc import IntegrityError

from affiliate.models import AffiliateLink, CommissionStatus
from affiliate.repositories import AffiliateRepository, CommissionRepository
from affiliate.services.checkout import normalize_checkout_payload
from affiliate.services.commission import (
    CommissionApprovalSweep,
    CommissionLifecycleService,
    OrderAttribution,
    WalletSnapshot,
)
from affiliate.utils.exceptions import InvalidCommissionTransition


pytestmark = pytest.mark.integration

ORDER_DATE = datetime(2026, 9, 1, 10, 0, tzinfo=UTC)


def make_order(order_id="ORD-100", total="600000", code="AB12CD34", **kwargs):
    return OrderAttribution(
        order_id=order_id,
        order_total=Decimal(total),
        referral_code=code,
        order_created_at=ORDER_DATE,
        **kwargs,
    )


async def wallet_of(session, user_id) -> WalletSnapshot:
    affiliate = await AffiliateRepository(session).get_by_user_id(user_id)
    await session.refresh(affiliate)
    return WalletSnapshot.of(affiliate)


@pytest.fixture
def lifecycle(session, recording_dispatcher):
    return CommissionLifecycleService(session, recording_dispatcher)


class TestRecordOrderCommission:
    """Integration tests for commission creation."""

    @pytest.mark.asyncio
    async def test_checkout_to_pending_commission(
        self, session, lifecycle, affiliate_user, buyer, recording_dispatcher
    ):
        """600,000 checkout with a referral code credits 90,000 pending."""
        payload = normalize_checkout_payload(
            {"total": "600000", "referralCode": "ab12cd34", "items": "[]"}
        )
        order = OrderAttribution.from_checkout(
            "ORD-100", payload, buyer_id=buyer.id, order_created_at=ORDER_DATE
        )

        commission = await lifecycle.record_order_commission(order)

        assert commission.status == CommissionStatus.PENDING.value
        assert commission.amount == Decimal("90000")
        assert commission.percentage == Decimal("15")
        assert commission.channel == "referral_code"

        wallet = await wallet_of(session, affiliate_user.id)
        assert wallet == WalletSnapshot(
            available=Decimal("0"), pending=Decimal("90000"), total=Decimal("90000")
        )

        [event] = recording_dispatcher.of_type("referral_used")
        assert event.affiliate_email == "ada@example.com"
        assert event.buyer_name == "Bola Ade"
        assert event.commission_amount == "₦90,000.00"

    @pytest.mark.asyncio
    async def test_replayed_order_credits_once(self, session, lifecycle, affiliate_user):
        """Same order twice yields one commission and one credit."""
        first = await lifecycle.record_order_commission(make_order())
        second = await lifecycle.record_order_commission(make_order())

        assert second.id == first.id
        assert await CommissionRepository(session).count() == 1
        wallet = await wallet_of(session, affiliate_user.id)
        assert wallet.pending == Decimal("90000")

    @pytest.mark.asyncio
    async def test_unknown_code_records_nothing(self, session, lifecycle, affiliate_user):
        """Missed attribution leaves no trace."""
        result = await lifecycle.record_order_commission(make_order(code="ZZZZ9999"))

        assert result is None
        assert await CommissionRepository(session).count() == 0
        assert await AffiliateRepository(session).get_by_user_id(affiliate_user.id) is None

    @pytest.mark.asyncio
    async def test_link_wins_and_updates_stats(
        self, session, lifecycle, affiliate_user, buyer
    ):
        """Link slug takes precedence and its counters grow."""
        link = AffiliateLink(slug="summer-sale", user_id=buyer.id)
        session.add(link)
        await session.commit()

        commission = await lifecycle.record_order_commission(
            make_order(total="250000", referral_slug="summer-sale")
        )

        assert commission.channel == "affiliate_link"
        assert commission.amount == Decimal("25000")
        assert commission.affiliate_link_id == link.id
        assert (await wallet_of(session, buyer.id)).pending == Decimal("25000")
        assert await AffiliateRepository(session).get_by_user_id(affiliate_user.id) is None

        await session.refresh(link)
        assert link.orders == 1
        assert link.commission == Decimal("25000")

    @pytest.mark.asyncio
    async def test_unknown_slug_falls_back_to_code(
        self, session, lifecycle, affiliate_user
    ):
        """Code is used when the slug does not resolve."""
        commission = await lifecycle.record_order_commission(
            make_order(referral_slug="expired-link")
        )

        assert commission.channel == "referral_code"
        assert (await wallet_of(session, affiliate_user.id)).pending == Decimal("90000")

    @pytest.mark.asyncio
    async def test_notification_failure_keeps_commission(
        self, session, affiliate_user, failing_dispatcher
    ):
        """Delivery failure does not undo the recorded commission."""
        lifecycle = CommissionLifecycleService(session, failing_dispatcher)

        commission = await lifecycle.record_order_commission(make_order())

        assert commission is not None
        assert failing_dispatcher.calls == 1
        assert await CommissionRepository(session).count() == 1


class TestTransitions:
    """Integration tests for approve and reject."""

    @pytest.mark.asyncio
    async def test_approve_moves_to_available(
        self, session, lifecycle, affiliate_user, recording_dispatcher
    ):
        """Approval gives wallet 90,000 / 0 / 90,000."""
        commission = await lifecycle.record_order_commission(make_order())

        approved = await lifecycle.approve(commission.id)

        assert approved.status == CommissionStatus.APPROVED.value
        assert approved.approved_at is not None
        wallet = await wallet_of(session, affiliate_user.id)
        assert wallet == WalletSnapshot(
            available=Decimal("90000"), pending=Decimal("0"), total=Decimal("90000")
        )

        [event] = recording_dispatcher.of_type("commission_approved")
        assert event.wallet_before.pending == "₦90,000.00"
        assert event.wallet_after.available == "₦90,000.00"
        assert event.wallet_after.total == "₦90,000.00"

    @pytest.mark.asyncio
    async def test_approve_twice_rejected(self, session, lifecycle, affiliate_user):
        """Approved is terminal and the wallet is untouched."""
        # The failed approve rolls back and expires loaded instances
        user_id = affiliate_user.id
        commission = await lifecycle.record_order_commission(make_order())
        commission_id = commission.id
        await lifecycle.approve(commission_id)

        with pytest.raises(InvalidCommissionTransition):
            await lifecycle.approve(commission_id)

        wallet = await wallet_of(session, user_id)
        stored = await CommissionRepository(session).get_by_id(commission_id)
        assert stored.status == CommissionStatus.APPROVED.value
        assert wallet.available == Decimal("90000")
        assert wallet.is_consistent

    @pytest.mark.asyncio
    async def test_reject_reverses_pending(self, session, lifecycle, affiliate_user):
        """Rejection removes the amount from pending and total."""
        commission = await lifecycle.record_order_commission(make_order())
        commission_id = commission.id

        rejected = await lifecycle.reject(commission_id, reason="Refunded")

        assert rejected.status == CommissionStatus.REJECTED.value
        wallet = await wallet_of(session, affiliate_user.id)
        assert wallet == WalletSnapshot(
            available=Decimal("0"), pending=Decimal("0"), total=Decimal("0")
        )

        with pytest.raises(InvalidCommissionTransition):
            await lifecycle.approve(commission_id)

    @pytest.mark.asyncio
    async def test_wallet_check_constraint(self, session, lifecycle, affiliate_user):
        """Database refuses a wallet where total != available + pending."""
        await lifecycle.record_order_commission(make_order())
        affiliate = await AffiliateRepository(session).get_by_user_id(affiliate_user.id)

        affiliate.total_earned = Decimal("1")
        with pytest.raises(IntegrityError):
            await session.flush()
        await session.rollback()


class TestApprovalSweep:
    """Integration tests for the scheduled approval sweep."""

    @pytest.mark.asyncio
    async def test_sweep_approves_delivered_and_aged(
        self, session, lifecycle, affiliate_user, recording_dispatcher
    ):
        """Delivered order past the hold is approved, others wait."""
        await lifecycle.record_order_commission(make_order("ORD-1", total="100000"))
        await lifecycle.record_order_commission(make_order("ORD-2", total="250000"))
        await lifecycle.mark_order_delivered("ORD-1", ORDER_DATE + timedelta(days=3))

        sweep = CommissionApprovalSweep(
            session, dispatcher=recording_dispatcher, hold_days=30
        )
        report = await sweep.run(now=ORDER_DATE + timedelta(days=31))

        assert report.total_processed == 2
        assert report.approved_order_ids == ["ORD-1"]
        assert report.total_amount_approved == Decimal("5000")
        assert [s.order_id for s in report.skipped] == ["ORD-2"]

        wallet = await wallet_of(session, affiliate_user.id)
        assert wallet == WalletSnapshot(
            available=Decimal("5000"), pending=Decimal("25000"), total=Decimal("30000")
        )
        assert len(recording_dispatcher.of_type("commission_approval_report")) == 1
