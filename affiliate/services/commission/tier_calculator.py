"""
Commission tier calculator.

Pure business logic without database or session dependencies.
Never raises: missing or invalid numeric input is evaluated as zero.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

from affiliate.config.commission_tiers import (
    BASE_COMMISSION_PERCENT,
    COLLECTION_CENTER_DISCOUNT_PERCENT,
    COMMISSION_TIERS,
    MONEY_QUANTUM,
    NO_REFERRAL_DISCOUNT_PERCENT,
    SALE_DISCOUNT_REFERRAL_SCHEDULE,
)


def to_decimal(value: Any) -> Decimal | None:
    """
    Convert loosely typed numeric input to Decimal.

    Args:
        value: int, float, Decimal or numeric string

    Returns:
        Decimal, or None for missing, boolean, non-numeric or non-finite input
    """
    if value is None or isinstance(value, bool):
        return None
    try:
        result = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None
    if not result.is_finite():
        return None
    return result


def commission_percentage(amount: Any) -> Decimal:
    """
    Get commission percentage for a purchase amount.

    Tiers (lower bound inclusive):
        >= 501,000            -> 15
        201,000 - 500,999.99  -> 10
        below 201,000         -> 5

    Args:
        amount: Purchase amount

    Returns:
        Commission percentage

    Example:
        >>> commission_percentage(600000)
        Decimal('15')
    """
    value = to_decimal(amount)
    if value is None:
        value = Decimal("0")

    for lower_bound, percent in COMMISSION_TIERS:
        if value >= lower_bound:
            return percent
    return BASE_COMMISSION_PERCENT


def calculate_commission_amount(amount: Any) -> tuple[Decimal, Decimal]:
    """
    Calculate commission for a purchase.

    Formula: amount * commission_percentage(amount) / 100,
    rounded half up to 2 decimal places.

    Args:
        amount: Purchase amount

    Returns:
        Tuple of (percentage, commission amount)
    """
    value = to_decimal(amount)
    if value is None or value <= 0:
        return commission_percentage(value), Decimal("0.00")

    percent = commission_percentage(value)
    commission = (value * percent / Decimal("100")).quantize(
        MONEY_QUANTUM, rounding=ROUND_HALF_UP
    )
    return percent, commission


def referral_discount_percent(
    sale_discount_percent: Any = None,
    is_collection_center: bool = False,
) -> Decimal:
    """
    Get buyer referral discount percentage.

    Closed lookup, no interpolation:
        collection center -> 5 (sale discount ignored)
        20% sale          -> 2
        10% sale          -> 5
        anything else     -> 0

    Args:
        sale_discount_percent: Sale discount of the product
        is_collection_center: Whether the buyer is a collection center

    Returns:
        Referral discount percentage
    """
    if is_collection_center:
        return COLLECTION_CENTER_DISCOUNT_PERCENT

    discount = to_decimal(sale_discount_percent)
    if discount is None:
        return NO_REFERRAL_DISCOUNT_PERCENT

    return SALE_DISCOUNT_REFERRAL_SCHEDULE.get(
        discount, NO_REFERRAL_DISCOUNT_PERCENT
    )


def referral_discount_amount(subtotal: Any, percent: Any) -> Decimal:
    """
    Calculate referral discount amount for a subtotal.

    Args:
        subtotal: Order subtotal
        percent: Discount percentage

    Returns:
        Discount amount rounded to 2 decimal places, zero for invalid input
    """
    value = to_decimal(subtotal)
    rate = to_decimal(percent)
    if value is None or rate is None or value <= 0 or rate <= 0:
        return Decimal("0.00")
    return (value * rate / Decimal("100")).quantize(
        MONEY_QUANTUM, rounding=ROUND_HALF_UP
    )
