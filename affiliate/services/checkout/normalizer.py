"""
Checkout payload normalizer.

Converts a raw checkout payload, where numbers and nested objects may
arrive as text, into a CheckoutPayload. Only representation changes:
no field is added or dropped, and values already in native form are
left as they are, so normalizing twice gives the same result.
"""

import copy
import json
import math
from collections.abc import Mapping
from typing import Any

from loguru import logger
from pydantic import ValidationError

from affiliate.services.checkout.payload import (
    CheckoutPayload,
    RawCheckoutPayload,
)
from affiliate.utils.exceptions import ValidationFailure


JSON_FIELDS = ("items", "partialPayment", "fullPayment", "shippingInfo")

NUMBER_FIELDS = (
    "total",
    "subtotal",
    "shipping",
    "totalItems",
    "referralDiscountPercent",
    "referralDiscountAmount",
    "promoDiscountPercent",
    "promoDiscountAmount",
)

PARTIAL_PAYMENT_NUMBER_FIELDS = (
    "allowedPercentage",
    "selectedPercentage",
    "payNow",
    "payLater",
    "toBalance",
)

FULL_PAYMENT_NUMBER_FIELDS = ("total", "payNow", "payLater")

ITEM_NUMBER_FIELDS = ("quantity", "price", "subtotal")


def _parse_json(value: str, path: str) -> Any:
    def reject_constant(name: str) -> Any:
        raise ValidationFailure(
            f"Field '{path}' contains a non-finite number: {name}",
            fields=[path],
        )

    try:
        return json.loads(value, parse_constant=reject_constant)
    except json.JSONDecodeError as e:
        raise ValidationFailure(
            f"Field '{path}' is not valid JSON: {e.msg}", fields=[path]
        ) from e


def _parse_number(value: str, path: str) -> float:
    try:
        number = float(value.strip())
    except ValueError as e:
        raise ValidationFailure(
            f"Field '{path}' is not a number: {value!r}", fields=[path]
        ) from e
    if not math.isfinite(number):
        raise ValidationFailure(
            f"Field '{path}' is not a finite number: {value!r}", fields=[path]
        )
    return number


def _coerce_numbers(
    target: dict[str, Any], fields: tuple[str, ...], prefix: str = ""
) -> None:
    for field in fields:
        value = target.get(field)
        if isinstance(value, str):
            target[field] = _parse_number(value, f"{prefix}{field}")


def normalize_checkout_payload(
    raw: RawCheckoutPayload | CheckoutPayload,
) -> CheckoutPayload:
    """
    Normalize a raw checkout payload.

    Steps:
    1. Parse text JSON in items, partialPayment, fullPayment, shippingInfo
    2. Coerce top-level numeric text fields to float
    3. Coerce numeric fields inside partialPayment and fullPayment
    4. Coerce quantity, price and subtotal of every item

    Args:
        raw: Raw payload mapping, or an already normalized payload

    Returns:
        Normalized CheckoutPayload

    Raises:
        ValidationFailure: If a JSON field does not parse, a numeric field
            holds non-numeric text or a non-finite value, or a value has
            the wrong shape
    """
    if isinstance(raw, CheckoutPayload):
        raw = raw.to_dict()
    if not isinstance(raw, Mapping):
        raise ValidationFailure(
            f"Checkout payload must be an object, got {type(raw).__name__}"
        )

    data: dict[str, Any] = copy.deepcopy(dict(raw))

    for field in JSON_FIELDS:
        if isinstance(data.get(field), str):
            data[field] = _parse_json(data[field], field)

    _coerce_numbers(data, NUMBER_FIELDS)

    partial = data.get("partialPayment")
    if isinstance(partial, dict):
        _coerce_numbers(partial, PARTIAL_PAYMENT_NUMBER_FIELDS, "partialPayment.")

    full = data.get("fullPayment")
    if isinstance(full, dict):
        _coerce_numbers(full, FULL_PAYMENT_NUMBER_FIELDS, "fullPayment.")

    items = data.get("items")
    if isinstance(items, list):
        for index, item in enumerate(items):
            if isinstance(item, dict):
                _coerce_numbers(item, ITEM_NUMBER_FIELDS, f"items[{index}].")

    try:
        payload = CheckoutPayload.model_validate(data)
    except ValidationError as e:
        fields = [
            ".".join(str(part) for part in error["loc"]) for error in e.errors()
        ]
        logger.warning(
            "Checkout payload rejected",
            extra={"fields": fields},
        )
        raise ValidationFailure(
            f"Checkout payload has invalid fields: {', '.join(fields)}",
            fields=fields,
        ) from e

    return payload
