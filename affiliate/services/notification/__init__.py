"""
Notification package.

Typed events handed to the delivery collaborator with display fields
already formatted.
"""

from affiliate.services.notification.dispatcher import (
    LoggingNotificationDispatcher,
    NotificationDispatcher,
    dispatch_safely,
)
from affiliate.services.notification.events import (
    CommissionApprovalReport,
    CommissionApproved,
    NotificationEvent,
    ReferralUsed,
    WalletDisplay,
)


__all__ = [
    "NotificationDispatcher",
    "LoggingNotificationDispatcher",
    "dispatch_safely",
    "NotificationEvent",
    "ReferralUsed",
    "CommissionApproved",
    "CommissionApprovalReport",
    "WalletDisplay",
]
