from volley_stats.models.player import Player
from volley_stats.models.club_session import ClubSession
from volley_stats.models.player_session import PlayerSession
from volley_stats.models.form_submission import FormSubmission

__all__ = [
    "Player",
    "ClubSession",
    "PlayerSession",
    "FormSubmission",
]
