"""Session ledger: sessions and per-player session stats."""
import logging
from datetime import date, datetime
from typing import Optional
from sqlalchemy import select, update, func, case
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from volley_stats.exceptions import ConflictError, NotFoundError
from volley_stats.models import Player, ClubSession, PlayerSession

logger = logging.getLogger(__name__)


def _insert_for(db: AsyncSession):
    """Dialect-specific INSERT that supports ON CONFLICT."""
    if db.bind.dialect.name == "postgresql":
        return pg_insert
    return sqlite_insert


def _duplicate_date(session_date: date) -> ConflictError:
    value = session_date.isoformat()
    return ConflictError(f'Session for date "{value}" already exists', value)


def participant_count():
    return (
        select(func.count(PlayerSession.id))
        .where(PlayerSession.session_id == ClubSession.id)
        .correlate(ClubSession)
        .scalar_subquery()
    )


class SessionService:
    """Service for sessions and the stats recorded against them."""

    @staticmethod
    async def list_sessions(db: AsyncSession, limit: Optional[int] = None) -> list[dict]:
        """Sessions, most recent date first."""
        query = (
            select(ClubSession, participant_count().label("participant_count"))
            .order_by(ClubSession.session_date.desc())
        )
        if limit:
            query = query.limit(limit)

        result = await db.execute(query)
        return [
            {
                "id": s.id,
                "session_date": s.session_date.isoformat(),
                "participant_count": count,
                "created_at": s.created_at.isoformat() if s.created_at else None,
            }
            for s, count in result.all()
        ]

    @staticmethod
    async def create_session(db: AsyncSession, session_date: date) -> ClubSession:
        """Record that the club met on a date. One session per date."""
        existing = await db.scalar(
            select(ClubSession.id).where(ClubSession.session_date == session_date)
        )
        if existing:
            raise _duplicate_date(session_date)

        session = ClubSession(session_date=session_date)
        db.add(session)
        try:
            await db.commit()
        except IntegrityError as e:
            await db.rollback()
            raise _duplicate_date(session_date) from e

        await db.refresh(session)
        logger.info("Added session %s (%s)", session.session_date, session.id)
        return session

    @staticmethod
    async def get_player_sessions(db: AsyncSession, player_id: int) -> list[dict]:
        """A player's stats history, most recent date first."""
        result = await db.execute(
            select(PlayerSession, ClubSession.session_date)
            .join(ClubSession, PlayerSession.session_id == ClubSession.id)
            .where(PlayerSession.player_id == player_id)
            .order_by(ClubSession.session_date.desc())
        )
        return [
            {
                "id": ps.id,
                "player_id": ps.player_id,
                "session_id": ps.session_id,
                "session_date": session_date.isoformat(),
                "points_scored": ps.points_scored,
                "saves": ps.saves,
                "mvp_award": ps.mvp_award,
                "attendance_status": ps.attendance_status,
                "created_at": ps.created_at.isoformat() if ps.created_at else None,
            }
            for ps, session_date in result.all()
        ]

    @staticmethod
    async def get_session_players(db: AsyncSession, session_id: int) -> list[dict]:
        """Everyone with stats in a session, by name."""
        result = await db.execute(
            select(PlayerSession, Player)
            .join(Player, PlayerSession.player_id == Player.id)
            .where(PlayerSession.session_id == session_id)
            .order_by(Player.full_name)
        )
        return [
            {
                "id": p.id,
                "player_id": p.player_id,
                "full_name": p.full_name,
                "points_scored": ps.points_scored,
                "saves": ps.saves,
                "mvp_award": ps.mvp_award,
                "attendance_status": ps.attendance_status,
            }
            for ps, p in result.all()
        ]

    @staticmethod
    async def _resolve_session(
        db: AsyncSession,
        session_id: Optional[int],
        session_date: Optional[date],
    ) -> int:
        if session_id is not None:
            found = await db.scalar(select(ClubSession.id).where(ClubSession.id == session_id))
            if not found:
                raise NotFoundError("Session not found")
            return found

        insert = _insert_for(db)
        await db.execute(
            insert(ClubSession)
            .values(session_date=session_date, created_at=datetime.utcnow())
            .on_conflict_do_nothing(index_elements=["session_date"])
        )
        return await db.scalar(
            select(ClubSession.id).where(ClubSession.session_date == session_date)
        )

    @staticmethod
    async def recompute_player_totals(db: AsyncSession, player_id: int) -> dict:
        """Overwrite a player's counters with aggregates over all their session rows."""
        row = (await db.execute(
            select(
                func.count(PlayerSession.id),
                func.coalesce(func.sum(PlayerSession.points_scored), 0),
                func.coalesce(func.sum(PlayerSession.saves), 0),
                func.coalesce(func.sum(case((PlayerSession.mvp_award.is_(True), 1), else_=0)), 0),
            ).where(PlayerSession.player_id == player_id)
        )).one()

        totals = {
            "sessions_attended_count": int(row[0]),
            "total_points_scored": int(row[1]),
            "total_saves": int(row[2]),
            "mvp_awards_count": int(row[3]),
        }
        await db.execute(
            update(Player)
            .where(Player.id == player_id)
            .values(**totals, updated_at=datetime.utcnow())
        )
        return totals

    @staticmethod
    async def record_player_session(
        db: AsyncSession,
        player_id: int,
        session_id: Optional[int] = None,
        session_date: Optional[date] = None,
        points_scored: int = 0,
        saves: int = 0,
        mvp_award: bool = False,
        attendance_status: str = "Present",
    ) -> dict:
        """
        Upsert one player's stats for a session and recompute their totals.

        Both writes happen in a single transaction. The player row is locked
        first, so concurrent writers for the same player recompute one after
        the other. Raises NotFoundError for an unknown player or session ID.
        """
        if session_id is None and session_date is None:
            raise ValueError("session_id or session_date is required")

        async with db.begin():
            locked = await db.scalar(
                select(Player.id).where(Player.id == player_id).with_for_update()
            )
            if not locked:
                raise NotFoundError("Player not found")

            resolved_session_id = await SessionService._resolve_session(
                db, session_id, session_date
            )

            insert = _insert_for(db)
            stmt = insert(PlayerSession).values(
                player_id=player_id,
                session_id=resolved_session_id,
                points_scored=points_scored,
                saves=saves,
                mvp_award=mvp_award,
                attendance_status=attendance_status,
                created_at=datetime.utcnow(),
            )
            stmt = stmt.on_conflict_do_update(
                index_elements=["player_id", "session_id"],
                set_={
                    "points_scored": stmt.excluded.points_scored,
                    "saves": stmt.excluded.saves,
                    "mvp_award": stmt.excluded.mvp_award,
                    "attendance_status": stmt.excluded.attendance_status,
                },
            )
            await db.execute(stmt)

            totals = await SessionService.recompute_player_totals(db, player_id)

        logger.info(
            "Recorded session %s for player %s: %s",
            resolved_session_id, player_id, totals,
        )
        return {"session_id": resolved_session_id, "player": {"id": player_id, **totals}}
