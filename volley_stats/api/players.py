"""Player API endpoints."""
from typing import Literal, Optional
from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict, Field, field_validator
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from volley_stats.api.errors import storage_error
from volley_stats.api.params import RowId
from volley_stats.database import get_db
from volley_stats.exceptions import ConflictError
from volley_stats.services import PlayerService, SessionService

router = APIRouter()


# ============ Pydantic Models ============

class PlayerIn(BaseModel):
    """Body for both creating and replacing a player."""
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    player_id: str = Field(min_length=1, max_length=20)
    full_name: str = Field(min_length=1, max_length=100)
    phone_number: Optional[str] = Field(default=None, max_length=20)
    instagram_username: Optional[str] = Field(default=None, max_length=50)
    age: Optional[int] = Field(default=None, ge=0)
    skill_level: Optional[Literal["Beginner", "Intermediate", "Advanced"]] = None

    @field_validator("phone_number", "instagram_username", "age", "skill_level", mode="before")
    @classmethod
    def blank_is_unset(cls, value):
        # HTML forms send "" for untouched inputs
        if isinstance(value, str) and not value.strip():
            return None
        return value


# ============ Players ============

@router.get("/players-list")
async def list_players(db: AsyncSession = Depends(get_db)):
    """Lightweight roster: profile fields only, ordered by name."""
    try:
        players = await PlayerService.list_players(db)
    except SQLAlchemyError as e:
        raise storage_error(e, "Failed to fetch players") from e
    return {"players": players, "count": len(players)}


@router.get("/players")
async def list_players_with_stats(db: AsyncSession = Depends(get_db)):
    """Roster with session counters and per-session averages."""
    try:
        players = await PlayerService.list_players_with_stats(db)
    except SQLAlchemyError as e:
        raise storage_error(e, "Failed to fetch players with stats") from e
    return {"players": players}


@router.get("/players/{id}")
async def get_player(id: RowId, db: AsyncSession = Depends(get_db)):
    """Get player by internal ID."""
    try:
        player = await PlayerService.get_player(db, id)
    except SQLAlchemyError as e:
        raise storage_error(e) from e
    if not player:
        raise HTTPException(status_code=404, detail="Player not found")
    return {"player": player}


@router.post("/players")
async def create_player(data: PlayerIn, db: AsyncSession = Depends(get_db)):
    """Add a player. The external player ID must be unused."""
    try:
        player = await PlayerService.create_player(db, data.model_dump())
    except ConflictError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except SQLAlchemyError as e:
        raise storage_error(e) from e

    return {
        "message": "Player added successfully",
        "player_id": player.player_id,
        "id": player.id,
    }


@router.put("/players/{id}")
async def update_player(id: RowId, data: PlayerIn, db: AsyncSession = Depends(get_db)):
    """Replace a player's profile fields."""
    try:
        updated = await PlayerService.update_player(db, id, data.model_dump())
    except ConflictError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except SQLAlchemyError as e:
        raise storage_error(e) from e

    if not updated:
        raise HTTPException(status_code=404, detail="Player not found")
    return {"message": "Player updated successfully"}


@router.delete("/players/{id}")
async def delete_player(id: RowId, db: AsyncSession = Depends(get_db)):
    """Delete a player together with their session stats."""
    try:
        deleted = await PlayerService.delete_player(db, id)
    except SQLAlchemyError as e:
        raise storage_error(e) from e

    if not deleted:
        raise HTTPException(status_code=404, detail="Player not found")
    return {"message": "Player deleted successfully"}


@router.get("/players/{id}/sessions")
async def get_player_sessions(id: RowId, db: AsyncSession = Depends(get_db)):
    """A player's session history, most recent first."""
    try:
        sessions = await SessionService.get_player_sessions(db, id)
    except SQLAlchemyError as e:
        raise storage_error(e) from e
    return {"sessions": sessions}


@router.get("/check-player-id/{player_id}")
async def check_player_id(player_id: str, db: AsyncSession = Depends(get_db)):
    """
    Whether an external player ID is taken.

    Advisory only, for form validation; creating a player re-checks.
    """
    try:
        exists = await PlayerService.player_id_exists(db, player_id)
    except SQLAlchemyError as e:
        raise storage_error(e) from e
    return {"exists": exists}
