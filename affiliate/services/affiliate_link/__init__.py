"""
Affiliate link package.

Per-product shareable links and their click tracking.
"""

from affiliate.services.affiliate_link.service import (
    SLUG_SUFFIX_ALPHABET,
    AffiliateLinkService,
)


__all__ = [
    "SLUG_SUFFIX_ALPHABET",
    "AffiliateLinkService",
]
