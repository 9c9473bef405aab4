"""Dashboard aggregates, computed on every request."""
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from volley_stats.models import Player, ClubSession, PlayerSession
from volley_stats.services.session_service import SessionService

TOP_N = 5


class StatsService:
    """Read-only club statistics."""

    @staticmethod
    async def get_dashboard(db: AsyncSession) -> dict:
        total_players = await db.scalar(select(func.count(Player.id)))
        total_sessions = await db.scalar(select(func.count(ClubSession.id)))
        total_points = await db.scalar(
            select(func.coalesce(func.sum(PlayerSession.points_scored), 0))
        )
        total_mvps = await db.scalar(
            select(func.count(PlayerSession.id)).where(PlayerSession.mvp_award.is_(True))
        )

        result = await db.execute(
            select(Player.id, Player.full_name, Player.mvp_awards_count)
            .where(Player.mvp_awards_count > 0)
            .order_by(Player.mvp_awards_count.desc(), Player.full_name)
            .limit(TOP_N)
        )
        top_mvps = [
            {"id": row.id, "full_name": row.full_name, "mvp_awards_count": row.mvp_awards_count}
            for row in result.all()
        ]

        result = await db.execute(
            select(Player.id, Player.full_name, Player.player_id, Player.created_at)
            .order_by(Player.created_at.desc(), Player.id.desc())
            .limit(TOP_N)
        )
        recent_players = [
            {
                "id": row.id,
                "full_name": row.full_name,
                "player_id": row.player_id,
                "created_at": row.created_at.isoformat() if row.created_at else None,
            }
            for row in result.all()
        ]

        return {
            "total_players": total_players or 0,
            "total_sessions": total_sessions or 0,
            "total_points": int(total_points or 0),
            "total_mvps": total_mvps or 0,
            "top_mvps": top_mvps,
            "recent_players": recent_players,
            "recent_sessions": await SessionService.list_sessions(db, limit=TOP_N),
        }
