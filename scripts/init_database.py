#!/usr/bin/env python3
"""
Create the affiliate tables.

Existing tables are left alone unless --drop is given, in which case
every affiliate table is dropped and recreated empty.

Usage:
    python scripts/init_database.py [--drop]
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from loguru import logger  # noqa: E402

from affiliate.config.logging import setup_logging  # noqa: E402
from affiliate.database import create_engine, create_schema  # noqa: E402


async def init_database(drop_existing: bool = False) -> list[str]:
    """Create the schema and return the table names."""
    engine = create_engine(echo=False)
    try:
        return await create_schema(engine, drop_existing=drop_existing)
    finally:
        await engine.dispose()


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument(
        "--drop",
        action="store_true",
        help="drop and recreate every affiliate table",
    )
    args = parser.parse_args(argv)

    setup_logging(log_file="")
    try:
        tables = asyncio.run(init_database(drop_existing=args.drop))
    except Exception:
        logger.exception("Database initialization failed")
        return 1

    print(f"Schema ready: {', '.join(sorted(tables))}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
