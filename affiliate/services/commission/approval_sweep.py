"""
Commission approval sweep.

Scheduled approval of pending commissions: a commission is approved
once its order has been delivered and is at least the configured hold
period old. Everything else stays pending and is listed with a reason.
"""

from datetime import datetime, timedelta
from decimal import Decimal

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from affiliate.config.settings import settings
from affiliate.models.commission import Commission
from affiliate.repositories.commission_repository import CommissionRepository
from affiliate.services.base_service import BaseService
from affiliate.services.commission.lifecycle import CommissionLifecycleService
from affiliate.services.commission.types import ApprovalReport, SkippedCommission
from affiliate.services.notification.dispatcher import (
    NotificationDispatcher,
    dispatch_safely,
)
from affiliate.services.notification.events import CommissionApprovalReport
from affiliate.utils.datetime_utils import ensure_aware, utc_now
from affiliate.utils.exceptions import (
    InvalidCommissionTransition,
    WalletInvariantError,
)
from affiliate.utils.formatters import format_amount, format_display_datetime


SKIP_NOT_DELIVERED = "Order not delivered"
SKIP_TOO_RECENT = "Order not old enough"
SKIP_NO_AMOUNT = "No valid commission amount"


class CommissionApprovalSweep(BaseService):
    """Approves eligible pending commissions in one pass."""

    def __init__(
        self,
        session: AsyncSession,
        dispatcher: NotificationDispatcher | None = None,
        hold_days: int | None = None,
    ) -> None:
        super().__init__(session)
        self.commission_repo = CommissionRepository(session)
        self.lifecycle = CommissionLifecycleService(session, dispatcher)
        self.hold_days = (
            settings.commission_approval_hold_days
            if hold_days is None
            else hold_days
        )

    def skip_reason(self, commission: Commission, now: datetime) -> str | None:
        """
        Explain why a commission is not yet eligible.

        Args:
            commission: Pending commission
            now: Reference time

        Returns:
            Reason string, or None if eligible
        """
        if commission.order_delivered_at is None:
            return SKIP_NOT_DELIVERED

        cutoff = now - timedelta(days=self.hold_days)
        if ensure_aware(commission.order_created_at) > cutoff:
            return SKIP_TOO_RECENT

        if commission.amount is None or commission.amount <= 0:
            return SKIP_NO_AMOUNT

        return None

    async def run(self, now: datetime | None = None) -> ApprovalReport:
        """
        Approve every eligible pending commission.

        Args:
            now: Reference time, defaults to now

        Returns:
            ApprovalReport with approved and skipped commissions
        """
        now = now or utc_now()
        pending = await self.commission_repo.get_pending()
        report = ApprovalReport(total_processed=len(pending))
        self.logger.info(f"Found {len(pending)} pending commissions")

        # Decide eligibility before any commit or rollback touches the objects
        eligible: list[tuple[int, str]] = []
        for commission in pending:
            reason = self.skip_reason(commission, now)
            if reason:
                self.logger.debug(f"Skipping commission {commission.id}: {reason}")
                report.skipped.append(
                    SkippedCommission(commission.id, commission.order_id, reason)
                )
            else:
                eligible.append((commission.id, commission.order_id))

        for commission_id, order_id in eligible:
            try:
                approved = await self.lifecycle.approve(commission_id, approved_at=now)
            except (
                InvalidCommissionTransition,
                WalletInvariantError,
                SQLAlchemyError,
            ) as e:
                self.logger.error(f"Error processing commission {commission_id}: {e}")
                report.skipped.append(
                    SkippedCommission(commission_id, order_id, str(e))
                )
                continue

            report.approved.append(approved.id)
            report.approved_order_ids.append(approved.order_id)
            report.total_amount_approved += Decimal(approved.amount)

        self.logger.info(
            f"Commission approval completed: approved={report.total_approved}, "
            f"skipped={report.total_skipped}, processed={report.total_processed}"
        )

        await dispatch_safely(
            self.lifecycle.dispatcher,
            CommissionApprovalReport(
                report_date=format_display_datetime(now),
                total_processed=report.total_processed,
                total_approved=report.total_approved,
                total_skipped=report.total_skipped,
                total_amount_approved=format_amount(report.total_amount_approved),
                approved_order_ids=tuple(report.approved_order_ids),
                skipped=tuple((s.order_id, s.reason) for s in report.skipped),
            ),
        )
        return report
