"""Admin API endpoints."""
from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine

from volley_stats.api.errors import storage_error
from volley_stats.database import get_engine
from volley_stats.services import SchemaService

router = APIRouter()


@router.get("/schema-status")
async def schema_status(engine: AsyncEngine = Depends(get_engine)):
    """Managed tables and any model columns they are missing."""
    try:
        return {"tables": await SchemaService.status(engine)}
    except SQLAlchemyError as e:
        raise storage_error(e) from e


@router.post("/repair-database")
async def repair_database(engine: AsyncEngine = Depends(get_engine)):
    """Bring a database created by an older schema revision up to date."""
    try:
        added = await SchemaService.repair(engine)
    except SQLAlchemyError as e:
        raise storage_error(e) from e
    return {"message": "Database repaired successfully", "added_columns": added}
