"""
Exception types.

Each error category maps to one handling strategy:
- ValidationFailure: surfaced to the checkout caller, request rejected
- NonUniqueExhausted: logged, batch continues, user left without a code
- AttributionUnresolvable: logged as a missed attribution, order proceeds
- NotificationDeliveryFailure: logged, never fails the state transition
"""

from collections.abc import Sequence


class AffiliateError(Exception):
    """Base class for all affiliate engine errors."""

    pass


class ValidationFailure(AffiliateError):
    """Raised when a checkout payload cannot be normalized."""

    def __init__(self, message: str, fields: Sequence[str] = ()) -> None:
        super().__init__(message)
        self.fields = list(fields)


class NonUniqueExhausted(AffiliateError):
    """Raised when every referral code or link slug candidate collided."""

    def __init__(
        self, user_id: int, attempts: int, kind: str = "referral code"
    ) -> None:
        super().__init__(
            f"Failed to generate unique {kind} for user {user_id} "
            f"after {attempts} attempts"
        )
        self.user_id = user_id
        self.attempts = attempts
        self.kind = kind


class AttributionUnresolvable(AffiliateError):
    """Referral code or link slug does not resolve to any affiliate."""

    def __init__(self, channel: str, identifier: str) -> None:
        super().__init__(f"Unresolvable {channel}: {identifier}")
        self.channel = channel
        self.identifier = identifier


class NotificationDeliveryFailure(AffiliateError):
    """Notification collaborator failed to accept an event."""

    pass


class CommissionNotFound(AffiliateError):
    """Raised when a commission id does not exist."""

    def __init__(self, commission_id: int) -> None:
        super().__init__(f"Commission {commission_id} not found")
        self.commission_id = commission_id


class InvalidCommissionTransition(AffiliateError):
    """Raised on approve/reject of a commission in a terminal state."""

    def __init__(self, commission_id: int, current: str, target: str) -> None:
        super().__init__(
            f"Commission {commission_id} cannot move from {current} to {target}"
        )
        self.commission_id = commission_id
        self.current = current
        self.target = target


class WalletInvariantError(AffiliateError):
    """Raised when a wallet operation would break balance invariants."""

    pass

