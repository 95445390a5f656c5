"""
Formatters utility.

Display formatting for notification payloads. Notification delivery
receives already formatted strings and never formats values itself.
"""

from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from zoneinfo import ZoneInfo

from affiliate.config.commission_tiers import MONEY_QUANTUM
from affiliate.config.settings import settings
from affiliate.utils.datetime_utils import ensure_aware


def round_money(amount: Decimal | float | int) -> Decimal:
    """
    Round a monetary amount to 2 decimal places (half up).

    Args:
        amount: Amount to round

    Returns:
        Rounded Decimal
    """
    return Decimal(str(amount)).quantize(MONEY_QUANTUM, rounding=ROUND_HALF_UP)


def format_amount(
    amount: Decimal | float | int, symbol: str | None = None
) -> str:
    """
    Format amount with currency symbol and thousands separators.

    Args:
        amount: Amount to format
        symbol: Currency symbol, defaults to configured symbol

    Returns:
        String like "₦90,000.00"
    """
    if symbol is None:
        symbol = settings.currency_symbol
    rounded = round_money(amount)
    sign = "-" if rounded < 0 else ""
    return f"{sign}{symbol}{abs(rounded):,.2f}"


def format_display_datetime(
    value: datetime, timezone: str | None = None
) -> str:
    """
    Format datetime for display in the configured timezone.

    Args:
        value: Datetime (naive values are treated as UTC)
        timezone: IANA timezone name, defaults to configured timezone

    Returns:
        String like "19 Oct 2026, 14:05"
    """
    tz = ZoneInfo(timezone or settings.display_timezone)
    local = ensure_aware(value).astimezone(tz)
    return local.strftime("%d %b %Y, %H:%M")


def format_percentage(value: Decimal | float | int) -> str:
    """
    Format percentage without trailing zeros.

    Args:
        value: Percentage value (15 means 15%)

    Returns:
        String like "15%" or "2.5%"
    """
    normalized = Decimal(str(value)).normalize()
    if normalized == normalized.to_integral():
        normalized = normalized.quantize(Decimal("1"))
    return f"{normalized}%"
