"""
Notification dispatch.

Delivery belongs to an external collaborator implementing
NotificationDispatcher. Dispatch is best-effort: failures are logged
and never propagate into the state transition that triggered them.
"""

from dataclasses import asdict
from typing import Protocol

from loguru import logger

from affiliate.services.notification.events import NotificationEvent
from affiliate.utils.exceptions import NotificationDeliveryFailure


class NotificationDispatcher(Protocol):
    """Delivery collaborator."""

    async def dispatch(self, event: NotificationEvent) -> None:
        """Deliver event. May raise on failure."""
        ...


class LoggingNotificationDispatcher:
    """Dispatcher that only logs events. Default when none is wired."""

    async def dispatch(self, event: NotificationEvent) -> None:
        logger.info(
            f"Notification event {event.event_type}",
            extra={"event": asdict(event)},
        )


async def dispatch_safely(
    dispatcher: NotificationDispatcher, event: NotificationEvent
) -> bool:
    """
    Dispatch event, isolating failures.

    Args:
        dispatcher: Delivery collaborator
        event: Event to deliver

    Returns:
        True if the dispatcher accepted the event
    """
    try:
        await dispatcher.dispatch(event)
    except Exception as e:
        failure = NotificationDeliveryFailure(
            f"Failed to deliver {event.event_type}: {e}"
        )
        logger.bind(event_type=event.event_type).warning(str(failure))
        return False

    logger.debug(f"Notification {event.event_type} dispatched")
    return True
