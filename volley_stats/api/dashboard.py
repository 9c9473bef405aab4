"""Dashboard API endpoint."""
from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from volley_stats.api.errors import storage_error
from volley_stats.database import get_db
from volley_stats.services import StatsService

router = APIRouter()


@router.get("/dashboard")
async def get_dashboard(db: AsyncSession = Depends(get_db)):
    """
    Club totals and leaderboards.

    Returns player/session/point/MVP totals, the top 5 MVP holders, the 5
    newest players and the 5 most recent sessions.
    """
    try:
        return await StatsService.get_dashboard(db)
    except SQLAlchemyError as e:
        raise storage_error(e, "Failed to fetch dashboard stats") from e
