"""
Checkout payload shapes.

RawCheckoutPayload is the untyped bag received from a form-encoded
transport. CheckoutPayload is the strictly typed result of
normalization. Unknown fields are preserved on both levels.
"""

from collections.abc import Mapping
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict
from pydantic.alias_generators import to_camel


# Values may be native or text encoded ("2", '{"payNow": "100"}')
RawCheckoutPayload = Mapping[str, Any]


def _reject_bool(value: Any) -> Any:
    if isinstance(value, bool):
        raise ValueError("boolean is not a number")
    return value


def _int_to_str(value: Any) -> Any:
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return value


Number = Annotated[float, BeforeValidator(_reject_bool)]

# Codes typed into numeric form inputs arrive as integers
Identifier = Annotated[str, BeforeValidator(_int_to_str)]


class _CheckoutModel(BaseModel):
    """Shared config: camelCase wire names, extra fields kept."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
        allow_inf_nan=False,
    )

    def to_dict(self) -> dict[str, Any]:
        """Dump with wire names, only fields that were present."""
        return self.model_dump(by_alias=True, exclude_unset=True)


class CheckoutItem(_CheckoutModel):
    """Line item."""

    product_id: str | int | None = None
    quantity: Number | None = None
    price: Number | None = None
    subtotal: Number | None = None


class PartialPayment(_CheckoutModel):
    """Pay-now / pay-later split for partial payments."""

    allowed_percentage: Number | None = None
    selected_percentage: Number | None = None
    pay_now: Number | None = None
    pay_later: Number | None = None
    to_balance: Number | None = None


class FullPayment(_CheckoutModel):
    """Totals for full payments."""

    total: Number | None = None
    pay_now: Number | None = None
    pay_later: Number | None = None


class CheckoutPayload(_CheckoutModel):
    """Normalized checkout payload."""

    items: list[CheckoutItem] | None = None
    partial_payment: PartialPayment | None = None
    full_payment: FullPayment | None = None
    shipping_info: dict[str, Any] | None = None

    total: Number | None = None
    subtotal: Number | None = None
    shipping: Number | None = None
    total_items: Number | None = None
    referral_discount_percent: Number | None = None
    referral_discount_amount: Number | None = None
    promo_discount_percent: Number | None = None
    promo_discount_amount: Number | None = None

    # Attribution identifiers
    referral_code: Identifier | None = None
    referral_slug: Identifier | None = None
