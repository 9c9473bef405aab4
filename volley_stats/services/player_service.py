"""Player directory: roster CRUD."""
import logging
from datetime import datetime
from typing import Optional
from sqlalchemy import select, update, delete, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from volley_stats.exceptions import ConflictError
from volley_stats.models import Player

logger = logging.getLogger(__name__)

PROFILE_FIELDS = (
    "player_id",
    "full_name",
    "phone_number",
    "instagram_username",
    "age",
    "skill_level",
)


def per_session(total: int, sessions_attended: int):
    """Average per attended session, 0 when nothing was attended."""
    if not sessions_attended:
        return 0
    return round(total / sessions_attended, 2)


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def _duplicate_player_id(player_id: str) -> ConflictError:
    return ConflictError(f'Player ID "{player_id}" already exists', player_id)


class PlayerService:
    """Service for roster operations."""

    @staticmethod
    def profile_dict(player: Player) -> dict:
        return {
            "id": player.id,
            "player_id": player.player_id,
            "full_name": player.full_name,
            "phone_number": player.phone_number,
            "instagram_username": player.instagram_username,
            "age": player.age,
            "skill_level": player.skill_level,
            "created_at": _iso(player.created_at),
        }

    @staticmethod
    def stats_dict(player: Player) -> dict:
        return {
            **PlayerService.profile_dict(player),
            "form_submissions_count": player.form_submissions_count,
            "sessions_attended_count": player.sessions_attended_count,
            "mvp_awards_count": player.mvp_awards_count,
            "total_points_scored": player.total_points_scored,
            "total_saves": player.total_saves,
            "avg_points_per_session": per_session(
                player.total_points_scored, player.sessions_attended_count
            ),
            "avg_saves_per_session": per_session(
                player.total_saves, player.sessions_attended_count
            ),
        }

    @staticmethod
    async def list_players(db: AsyncSession) -> list[dict]:
        """All players' profile fields, by name."""
        result = await db.execute(select(Player).order_by(Player.full_name))
        return [PlayerService.profile_dict(p) for p in result.scalars().all()]

    @staticmethod
    async def list_players_with_stats(db: AsyncSession) -> list[dict]:
        """All players with their counters and per-session averages, by name."""
        result = await db.execute(select(Player).order_by(Player.full_name))
        return [PlayerService.stats_dict(p) for p in result.scalars().all()]

    @staticmethod
    async def get_player(db: AsyncSession, id: int) -> Optional[dict]:
        """Get the full row for a player by internal ID."""
        player = await db.get(Player, id)
        if not player:
            return None

        return {
            **PlayerService.stats_dict(player),
            "updated_at": _iso(player.updated_at),
        }

    @staticmethod
    async def player_id_exists(db: AsyncSession, player_id: str) -> bool:
        count = await db.scalar(
            select(func.count(Player.id)).where(Player.player_id == player_id)
        )
        return bool(count)

    @staticmethod
    async def create_player(db: AsyncSession, data: dict) -> Player:
        """
        Insert a new player.

        Raises ConflictError when the external player ID is taken. The
        unique index is the authority; the pre-check only gives a clean
        error in the common case.
        """
        player_id = data["player_id"]
        if await PlayerService.player_id_exists(db, player_id):
            raise _duplicate_player_id(player_id)

        player = Player(**{field: data.get(field) for field in PROFILE_FIELDS})
        db.add(player)
        try:
            await db.commit()
        except IntegrityError as e:
            await db.rollback()
            if await PlayerService.player_id_exists(db, player_id):
                raise _duplicate_player_id(player_id) from e
            raise

        await db.refresh(player)
        logger.info("Added player %s (%s)", player.player_id, player.id)
        return player

    @staticmethod
    async def update_player(db: AsyncSession, id: int, data: dict) -> bool:
        """Replace a player's profile fields. Returns False if no row matched."""
        values = {field: data.get(field) for field in PROFILE_FIELDS}
        values["updated_at"] = datetime.utcnow()

        try:
            result = await db.execute(
                update(Player).where(Player.id == id).values(**values)
            )
            await db.commit()
        except IntegrityError as e:
            await db.rollback()
            taken = await db.scalar(
                select(func.count(Player.id)).where(
                    Player.player_id == values["player_id"], Player.id != id
                )
            )
            if taken:
                raise _duplicate_player_id(values["player_id"]) from e
            raise

        return result.rowcount > 0

    @staticmethod
    async def delete_player(db: AsyncSession, id: int) -> bool:
        """Delete a player; their session rows go with them via ON DELETE CASCADE."""
        result = await db.execute(delete(Player).where(Player.id == id))
        await db.commit()
        return result.rowcount > 0
