"""Session API endpoints."""
from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from volley_stats.api.errors import storage_error
from volley_stats.api.params import RowId, RowIdField
from volley_stats.database import get_db
from volley_stats.exceptions import ConflictError, NotFoundError
from volley_stats.services import SessionService

router = APIRouter()


# ============ Pydantic Models ============

class SessionCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    session_date: date


class PlayerSessionRecord(BaseModel):
    """Stats for one player in one session; the session is given by ID or by date."""
    model_config = ConfigDict(extra="forbid")

    player_id: RowIdField
    session_id: Optional[RowIdField] = None
    session_date: Optional[date] = None
    points_scored: int = Field(default=0, ge=0)
    saves: int = Field(default=0, ge=0)
    mvp_award: bool = False
    attendance_status: str = Field(default="Present", min_length=1, max_length=20)

    @field_validator("points_scored", "saves", "mvp_award", "attendance_status", mode="before")
    @classmethod
    def null_is_default(cls, value, info):
        if value is None or value == "":
            return cls.model_fields[info.field_name].default
        return value

    @model_validator(mode="after")
    def require_session(self):
        if self.session_id is None and self.session_date is None:
            raise ValueError("session_id or session_date is required")
        if self.session_id is not None and self.session_date is not None:
            raise ValueError("give session_id or session_date, not both")
        return self


# ============ Sessions ============

@router.get("/sessions")
async def list_sessions(db: AsyncSession = Depends(get_db)):
    """All sessions, most recent date first."""
    try:
        sessions = await SessionService.list_sessions(db)
    except SQLAlchemyError as e:
        raise storage_error(e, "Failed to fetch sessions") from e
    return {"sessions": sessions}


@router.post("/sessions")
async def create_session(data: SessionCreate, db: AsyncSession = Depends(get_db)):
    """Record a session date. Each date can be recorded once."""
    try:
        session = await SessionService.create_session(db, data.session_date)
    except ConflictError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except SQLAlchemyError as e:
        raise storage_error(e) from e

    return {"message": "Session created successfully", "session_id": session.id}


@router.get("/sessions/{id}/players")
async def get_session_players(id: RowId, db: AsyncSession = Depends(get_db)):
    """Players with stats in a session, by name."""
    try:
        players = await SessionService.get_session_players(db, id)
    except SQLAlchemyError as e:
        raise storage_error(e) from e
    return {"players": players}


@router.post("/player-sessions")
async def record_player_session(
    data: PlayerSessionRecord,
    db: AsyncSession = Depends(get_db)
):
    """
    Record a player's stats for a session.

    A second call for the same player and session overwrites the first.
    The player's totals are recomputed from all their sessions in the same
    transaction; on failure nothing is written.

    - **session_date**: creates the session if that date has none yet
    """
    try:
        result = await SessionService.record_player_session(
            db,
            player_id=data.player_id,
            session_id=data.session_id,
            session_date=data.session_date,
            points_scored=data.points_scored,
            saves=data.saves,
            mvp_award=data.mvp_award,
            attendance_status=data.attendance_status,
        )
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except SQLAlchemyError as e:
        raise storage_error(e) from e

    return {"message": "Session statistics added successfully", **result}
