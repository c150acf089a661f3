#!/usr/bin/env python3
"""Seed entry catalog script.

Generates the deterministic demo catalog and writes it to the SQL entry
store configured by ``MODEFILTER_DATABASE_URL``.

Usage:
    python scripts/seed_catalog.py --mode small
    python scripts/seed_catalog.py --mode full --seed 7
"""

import argparse
import asyncio

from modefilter.catalog.generator import CatalogGenerator, GeneratorConfig
from modefilter.catalog.repository import SqlEntryStore
from modefilter.domain.value_objects import Axis
from modefilter.infrastructure.database import (
    Base,
    dispose_engine,
    get_engine,
    get_session_factory,
)
from modefilter.infrastructure.logging import configure_logging

# Registers the catalog tables on Base.metadata
import modefilter.catalog.models  # noqa: F401


async def create_tables() -> None:
    """Create database tables if they don't exist."""
    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def seed(config: GeneratorConfig) -> dict[str, int]:
    """Replace the stored catalog with a generated one.

    Args:
        config: Generator configuration.

    Returns:
        Seeding summary.
    """
    catalog = CatalogGenerator(config).generate()
    async with get_session_factory()() as session:
        await SqlEntryStore(session).replace_catalog(catalog.groups, catalog.entries)
        await session.commit()

    return {
        "entries": len(catalog.entries),
        "categories": len(catalog.groups_on(Axis.CATEGORY)),
        "tags": len(catalog.groups_on(Axis.TAG)),
        "brands": len(catalog.groups_on(Axis.BRAND)),
    }


async def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Seed the ModeFilter demo catalog",
    )
    parser.add_argument(
        "--mode",
        choices=["small", "full"],
        default="small",
        help="Catalog size: small (~60 entries) or full (~1200 entries)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed (default: 42)",
    )

    args = parser.parse_args()
    configure_logging(json_output=False)

    config = GeneratorConfig.small() if args.mode == "small" else GeneratorConfig.full()
    if args.seed is not None:
        config.seed = args.seed

    print("=" * 60)
    print("ModeFilter Catalog Seeder")
    print("=" * 60)
    print(f"Mode: {args.mode}")
    print(f"Seed: {config.seed}")
    print()

    print("Creating database tables...")
    await create_tables()
    print("Tables ready.")
    print()

    try:
        result = await seed(config)
    finally:
        await dispose_engine()

    print(f"  ✓ Entries: {result['entries']}")
    print(f"  ✓ Categories: {result['categories']}")
    print(f"  ✓ Tags: {result['tags']}")
    print(f"  ✓ Brands: {result['brands']}")
    print()
    print("=" * 60)
    print("Seeding complete!")
    print("=" * 60)


if __name__ == "__main__":
    asyncio.run(main())
