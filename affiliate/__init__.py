"""
Affiliate referral attribution and commission engine.

Attributes purchases to referring affiliates, computes tiered commissions
and tracks them through the pending -> approved / rejected lifecycle.
"""

__version__ = "1.0.0"
