"""
Commission lifecycle service.

State machine per commission:
    pending --approve--> approved (terminal)
    pending --reject-->  rejected (terminal)

Commission records and wallet changes commit together. Notifications
are sent after commit and never undo a committed transition.
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from affiliate.models.commission import Commission
from affiliate.models.enums import AttributionChannel, CommissionStatus
from affiliate.repositories.affiliate_link_repository import (
    AffiliateLinkRepository,
)
from affiliate.repositories.affiliate_repository import AffiliateRepository
from affiliate.repositories.commission_repository import CommissionRepository
from affiliate.repositories.user_repository import UserRepository
from affiliate.services.base_service import BaseService, transaction
from affiliate.services.commission.attribution import AttributionResolver
from affiliate.services.commission.tier_calculator import (
    calculate_commission_amount,
)
from affiliate.services.commission.types import (
    Attribution,
    OrderAttribution,
    WalletSnapshot,
)
from affiliate.services.notification.dispatcher import (
    LoggingNotificationDispatcher,
    NotificationDispatcher,
    dispatch_safely,
)
from affiliate.services.notification.events import (
    CommissionApproved,
    ReferralUsed,
)
from affiliate.utils.datetime_utils import utc_now
from affiliate.utils.exceptions import (
    CommissionNotFound,
    InvalidCommissionTransition,
)
from affiliate.utils.formatters import (
    format_amount,
    format_display_datetime,
    format_percentage,
)


class CommissionLifecycleService(BaseService):
    """Creates, approves and rejects affiliate commissions."""

    def __init__(
        self,
        session: AsyncSession,
        dispatcher: NotificationDispatcher | None = None,
    ) -> None:
        """
        Initialize lifecycle service.

        Args:
            session: Async database session
            dispatcher: Notification collaborator, logs only if omitted
        """
        super().__init__(session)
        self.commission_repo = CommissionRepository(session)
        self.affiliate_repo = AffiliateRepository(session)
        self.link_repo = AffiliateLinkRepository(session)
        self.user_repo = UserRepository(session)
        self.resolver = AttributionResolver(session)
        self.dispatcher = dispatcher or LoggingNotificationDispatcher()

    # ------------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------------

    async def record_order_commission(
        self, order: OrderAttribution
    ) -> Commission | None:
        """
        Attribute a completed order and record a pending commission.

        Replaying an order returns the commission already recorded for
        it without crediting the wallet again.

        Args:
            order: Order facts

        Returns:
            Pending commission, or None if the order has no resolvable
            attribution or no commissionable total
        """
        if not order.has_referral:
            return None

        existing = await self.commission_repo.get_by_order_id(order.order_id)
        if existing:
            self.logger.info(
                f"Commission already recorded for order {order.order_id}"
            )
            return existing

        percentage, amount = calculate_commission_amount(order.order_total)
        if amount <= 0:
            self.logger.info(
                f"Order {order.order_id} has no commissionable total "
                f"({order.order_total})"
            )
            return None

        try:
            result = await self._create_pending(order, percentage, amount)
        except IntegrityError:
            # Concurrent recording of the same order won the unique order_id
            existing = await self.commission_repo.get_by_order_id(order.order_id)
            if existing is None:
                raise
            return existing

        if result is None:
            return None

        commission, attribution = result
        await self._notify_referral_used(commission, attribution, order)
        return commission

    @transaction
    async def _create_pending(
        self,
        order: OrderAttribution,
        percentage: Decimal,
        amount: Decimal,
    ) -> tuple[Commission, Attribution] | None:
        attribution = await self.resolver.resolve(
            referral_slug=order.referral_slug,
            referral_code=order.referral_code,
        )
        if attribution is None:
            return None

        commission = await self.commission_repo.create(
            affiliate_id=attribution.affiliate.id,
            order_id=order.order_id,
            buyer_id=order.buyer_id,
            affiliate_link_id=(
                attribution.affiliate_link.id
                if attribution.affiliate_link
                else None
            ),
            channel=attribution.channel.value,
            order_total=order.order_total,
            percentage=percentage,
            amount=amount,
            status=CommissionStatus.PENDING.value,
            order_created_at=order.order_created_at or utc_now(),
        )
        await self.affiliate_repo.credit_pending(attribution.affiliate.id, amount)

        if attribution.affiliate_link:
            await self.link_repo.record_conversion(
                attribution.affiliate_link.id, amount
            )

        self.logger.info(
            f"Commission awarded: {amount} ({percentage}%) to affiliate "
            f"{attribution.affiliate.id} via {attribution.channel.display_name}",
            extra={
                "commission_id": commission.id,
                "order_id": order.order_id,
                "affiliate_id": attribution.affiliate.id,
            },
        )
        return commission, attribution

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    @staticmethod
    def _ensure_pending(commission: Commission, target: CommissionStatus) -> None:
        if not commission.is_pending:
            raise InvalidCommissionTransition(
                commission.id, commission.status, target.value
            )

    async def _lock_commission(self, commission_id: int) -> Commission:
        commission = await self.commission_repo.get_for_update(commission_id)
        if commission is None:
            raise CommissionNotFound(commission_id)
        return commission

    async def approve(
        self, commission_id: int, approved_at: datetime | None = None
    ) -> Commission:
        """
        Approve a pending commission.

        Moves the amount from the wallet's pending balance to available;
        the total is unchanged.

        Args:
            commission_id: Commission ID
            approved_at: Approval time, defaults to now

        Returns:
            Approved commission

        Raises:
            CommissionNotFound: Unknown commission
            InvalidCommissionTransition: Commission is not pending
        """
        commission, before, after = await self._approve(
            commission_id, approved_at or utc_now()
        )
        await self._notify_commission_approved(commission, before, after)
        return commission

    @transaction
    async def _approve(
        self, commission_id: int, approved_at: datetime
    ) -> tuple[Commission, WalletSnapshot, WalletSnapshot]:
        commission = await self._lock_commission(commission_id)
        self._ensure_pending(commission, CommissionStatus.APPROVED)

        affiliate = await self.affiliate_repo.get_for_update(commission.affiliate_id)
        if affiliate is None:
            raise CommissionNotFound(commission_id)
        before = WalletSnapshot.of(affiliate)

        affiliate = await self.affiliate_repo.move_pending_to_available(
            commission.affiliate_id, commission.amount
        )
        commission.status = CommissionStatus.APPROVED.value
        commission.approved_at = approved_at
        await self.session.flush()

        after = WalletSnapshot.of(affiliate)
        self.logger.info(
            f"Approved commission {commission.id}: {commission.amount} "
            f"moved to available",
            extra={
                "affiliate_id": commission.affiliate_id,
                "pending": str(after.pending),
                "available": str(after.available),
            },
        )
        return commission, before, after

    @transaction
    async def reject(
        self, commission_id: int, reason: str | None = None
    ) -> Commission:
        """
        Reject a pending commission.

        Removes the amount from the wallet's pending balance and total.

        Args:
            commission_id: Commission ID
            reason: Optional operator reason

        Returns:
            Rejected commission

        Raises:
            CommissionNotFound: Unknown commission
            InvalidCommissionTransition: Commission is not pending
        """
        commission = await self._lock_commission(commission_id)
        self._ensure_pending(commission, CommissionStatus.REJECTED)

        await self.affiliate_repo.reverse_pending(
            commission.affiliate_id, commission.amount
        )
        commission.status = CommissionStatus.REJECTED.value
        commission.rejected_at = utc_now()
        commission.rejection_reason = reason
        await self.session.flush()

        self.logger.info(
            f"Rejected commission {commission.id}: {commission.amount} "
            f"removed from pending",
            extra={"affiliate_id": commission.affiliate_id, "reason": reason},
        )
        return commission

    @transaction
    async def mark_order_delivered(
        self, order_id: str, delivered_at: datetime | None = None
    ) -> Commission | None:
        """
        Record delivery of an attributed order.

        Args:
            order_id: External order identifier
            delivered_at: Delivery time, defaults to now

        Returns:
            Commission for the order, or None if the order earned none
        """
        commission = await self.commission_repo.get_by_order_id(order_id)
        if commission is None:
            return None
        commission.order_delivered_at = delivered_at or utc_now()
        await self.session.flush()
        return commission

    # ------------------------------------------------------------------
    # Notifications
    # ------------------------------------------------------------------

    async def _notify_referral_used(
        self,
        commission: Commission,
        attribution: Attribution,
        order: OrderAttribution,
    ) -> bool:
        try:
            owner = await self.user_repo.get_by_id(attribution.affiliate.user_id)
            buyer = (
                await self.user_repo.get_by_id(order.buyer_id)
                if order.buyer_id
                else None
            )
            event = ReferralUsed(
                commission_id=commission.id,
                order_id=commission.order_id,
                affiliate_id=attribution.affiliate.id,
                affiliate_user_id=attribution.affiliate.user_id,
                buyer_id=order.buyer_id,
                affiliate_name=owner.full_name if owner else "",
                affiliate_email=owner.email if owner else "",
                buyer_name=buyer.full_name if buyer else "",
                buyer_email=buyer.email if buyer else "",
                channel=AttributionChannel(commission.channel).display_name,
                purchase_amount=format_amount(commission.order_total),
                commission_amount=format_amount(commission.amount),
                commission_percentage=format_percentage(commission.percentage),
                purchase_date=format_display_datetime(commission.order_created_at),
            )
        except Exception as e:
            self.logger.bind(commission_id=commission.id).warning(
                f"Failed to build referral used notification: {e}"
            )
            return False
        return await dispatch_safely(self.dispatcher, event)

    async def _notify_commission_approved(
        self,
        commission: Commission,
        before: WalletSnapshot,
        after: WalletSnapshot,
    ) -> bool:
        try:
            affiliate = await self.affiliate_repo.get_by_id(commission.affiliate_id)
            owner = (
                await self.user_repo.get_by_id(affiliate.user_id)
                if affiliate
                else None
            )
            event = CommissionApproved(
                commission_id=commission.id,
                order_id=commission.order_id,
                affiliate_id=commission.affiliate_id,
                affiliate_user_id=affiliate.user_id if affiliate else 0,
                affiliate_name=owner.full_name if owner else "",
                affiliate_email=owner.email if owner else "",
                commission_amount=format_amount(commission.amount),
                wallet_before=before.to_display(),
                wallet_after=after.to_display(),
                approved_at=format_display_datetime(commission.approved_at),
            )
        except Exception as e:
            self.logger.bind(commission_id=commission.id).warning(
                f"Failed to build commission approved notification: {e}"
            )
            return False
        return await dispatch_safely(self.dispatcher, event)
