"""
Commission schedule constants.

Central location for the affiliate commission tiers and the referral
discount schedule. Amounts are in the platform currency unit (NGN).
"""

from decimal import Decimal

# Commission tiers: (lower bound inclusive, percentage), highest first
COMMISSION_TIERS: tuple[tuple[Decimal, Decimal], ...] = (
    (Decimal("501000"), Decimal("15")),  # N501,000 and above
    (Decimal("201000"), Decimal("10")),  # N201,000 - N500,999
)
BASE_COMMISSION_PERCENT = Decimal("5")  # below N201,000

# Referral discount for buyers, keyed by the sale discount of the product
COLLECTION_CENTER_DISCOUNT_PERCENT = Decimal("5")
SALE_DISCOUNT_REFERRAL_SCHEDULE: dict[Decimal, Decimal] = {
    Decimal("20"): Decimal("2"),
    Decimal("10"): Decimal("5"),
}
NO_REFERRAL_DISCOUNT_PERCENT = Decimal("0")

# Monetary precision for stored commission amounts
MONEY_QUANTUM = Decimal("0.01")
