"""
Checkout package.

Normalizes loosely typed checkout payloads for the commission pipeline.
"""

from affiliate.services.checkout.normalizer import normalize_checkout_payload
from affiliate.services.checkout.payload import (
    CheckoutItem,
    CheckoutPayload,
    FullPayment,
    PartialPayment,
    RawCheckoutPayload,
)


__all__ = [
    "normalize_checkout_payload",
    "RawCheckoutPayload",
    "CheckoutPayload",
    "CheckoutItem",
    "PartialPayment",
    "FullPayment",
]
