#!/usr/bin/env python3
"""
Database migration script for production deployments.

Usage:
    python scripts/migrate.py               # Create any missing tables
    python scripts/migrate.py --status      # Show tables and missing columns
    python scripts/migrate.py --repair      # Add columns missing from older schemas
    python scripts/migrate.py --reset --yes # Drop and recreate all tables (DANGER!)
"""

import argparse
import asyncio
import sys
import os

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from volley_stats.config import get_settings
from volley_stats.database import Base, create_engine, init_db
from volley_stats.services import SchemaService
import volley_stats.models  # noqa: F401


async def run_migrations(engine):
    """Create all tables that do not exist yet."""
    print("🔄 Running database migrations...")
    if await init_db(engine):
        print("✅ All tables created/verified")
    else:
        print("❌ Migration failed, see log output above")


async def check_status(engine):
    """Print which tables exist and which columns they lack."""
    print("📊 Database Status")
    print("=" * 40)

    report = await SchemaService.status(engine)
    for table, info in sorted(report.items()):
        if not info["exists"]:
            status = "❌ missing"
        elif info["missing_columns"]:
            status = f"⚠️ needs repair ({', '.join(info['missing_columns'])})"
        else:
            status = "✅"
        print(f"  {table}: {status}")


async def repair(engine):
    print("🔧 Repairing schema...")
    added = await SchemaService.repair(engine)
    if added:
        print(f"✅ Added columns: {', '.join(added)}")
    else:
        print("✅ Schema already up to date")


async def reset(engine):
    """Drop every table and recreate it. All recorded data is lost."""
    print("⚠️  Dropping all tables...")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    print("🔄 Recreating tables...")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    print("✅ Database reset")


async def main(args):
    engine = create_engine(get_settings())
    try:
        if args.status:
            await check_status(engine)
        elif args.repair:
            await repair(engine)
        elif args.reset:
            if not args.yes:
                print("Refusing to reset without --yes; this deletes every player and session.")
                return 1
            await reset(engine)
        else:
            await run_migrations(engine)
    finally:
        await engine.dispose()
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Manage the volleyball stats database schema")
    group = parser.add_mutually_exclusive_group()
    group.add_argument("--status", action="store_true", help="show schema status")
    group.add_argument("--repair", action="store_true", help="add missing columns")
    group.add_argument("--reset", action="store_true", help="drop and recreate all tables")
    parser.add_argument("--yes", action="store_true", help="confirm --reset")
    sys.exit(asyncio.run(main(parser.parse_args())))
