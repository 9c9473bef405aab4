#!/usr/bin/env python3
"""
Seed script to populate a demo roster.
Run this against an empty database to get something on the dashboard.
"""
import asyncio
import random
import sys
from datetime import date, timedelta
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from volley_stats.config import get_settings
from volley_stats.database import create_engine, create_sessionmaker, init_db
from volley_stats.exceptions import ConflictError
from volley_stats.services import PlayerService, SessionService, StatsService

DEMO_PLAYERS = [
    ("VB001", "Alex Morgan", "Advanced"),
    ("VB002", "Jordan Lee", "Intermediate"),
    ("VB003", "Sam Rivera", "Beginner"),
    ("VB004", "Taylor Kim", "Intermediate"),
    ("VB005", "Casey Brooks", "Advanced"),
    ("VB006", "Riley Chen", None),
]


async def seed_all(weeks: int = 4):
    """Seed demo players and a few weeks of sessions."""
    print("🏐 Volleyball Club Stats - Data Seeder")
    print("=" * 50)

    engine = create_engine(get_settings())
    sessionmaker = create_sessionmaker(engine)

    # Initialize database tables
    print("\n📦 Initializing database tables...")
    await init_db(engine)

    async with sessionmaker() as db:
        print("\n👥 Adding players...")
        ids = []
        for player_id, full_name, skill_level in DEMO_PLAYERS:
            try:
                player = await PlayerService.create_player(db, {
                    "player_id": player_id,
                    "full_name": full_name,
                    "skill_level": skill_level,
                })
            except ConflictError:
                print(f"   - {player_id} already exists, skipping")
                continue
            ids.append(player.id)
        print(f"✅ {len(ids)} players added")
        # Stats writes open their own transactions
        await db.commit()

        print(f"\n📅 Recording {weeks} weeks of sessions...")
        first = date.today() - timedelta(weeks=weeks)
        rng = random.Random(7)
        for week in range(weeks):
            session_date = first + timedelta(weeks=week)
            mvp = rng.choice(ids) if ids else None
            for id in ids:
                await SessionService.record_player_session(
                    db,
                    player_id=id,
                    session_date=session_date,
                    points_scored=rng.randint(0, 15),
                    saves=rng.randint(0, 8),
                    mvp_award=id == mvp,
                )

        stats = await StatsService.get_dashboard(db)
        print(f"\n📋 Summary:")
        print(f"   - Total players: {stats['total_players']}")
        print(f"   - Total sessions: {stats['total_sessions']}")
        print(f"   - Total points: {stats['total_points']}")

    await engine.dispose()
    print("\n✨ Seeding complete!")
    print("\nNext steps:")
    print("  1. Start the server: python -m volley_stats.main")
    print("  2. Open the dashboard: http://localhost:5000/")
    print("  3. Use the API: http://localhost:5000/docs")


if __name__ == "__main__":
    asyncio.run(seed_all())
