#!/usr/bin/env python3
"""
Backfill referral codes.

Assigns a unique referral code to every user created before codes
existed. Users that already own a code are skipped, so running it again
is harmless. The referral url prefix can be overridden with the
REFERRAL_BASE_URL environment variable.

Usage:
    python scripts/backfill_referral_codes.py
"""

import asyncio
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from loguru import logger  # noqa: E402

from affiliate.config.logging import setup_logging  # noqa: E402
from affiliate.database import create_engine, create_session_maker  # noqa: E402
from affiliate.services.referral_code.registry import (  # noqa: E402
    ReferralCodeRegistry,
)


async def backfill_referral_codes() -> int:
    """Run the backfill and return the number of codes created."""
    engine = create_engine()
    session_maker = create_session_maker(engine)
    try:
        async with session_maker() as session:
            registry = ReferralCodeRegistry(session)
            return await registry.backfill()
    finally:
        await engine.dispose()


def main() -> int:
    """Main entry point."""
    setup_logging(log_file="")
    try:
        created = asyncio.run(backfill_referral_codes())
    except Exception:
        logger.exception("Referral code backfill failed")
        return 1

    print(f"Backfill complete. Created {created} referral codes.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
