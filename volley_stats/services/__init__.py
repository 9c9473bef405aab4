from volley_stats.services.player_service import PlayerService
from volley_stats.services.session_service import SessionService
from volley_stats.services.stats_service import StatsService
from volley_stats.services.schema_service import SchemaService

__all__ = [
    "PlayerService",
    "SessionService",
    "StatsService",
    "SchemaService",
]
