from fastapi import APIRouter

from volley_stats.api import players, sessions, dashboard, admin

api_router = APIRouter()

api_router.include_router(players.router, tags=["players"])
api_router.include_router(sessions.router, tags=["sessions"])
api_router.include_router(dashboard.router, tags=["dashboard"])
api_router.include_router(admin.router, tags=["admin"])
