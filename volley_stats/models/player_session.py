from sqlalchemy import Column, Integer, String, ForeignKey, UniqueConstraint, CheckConstraint, DateTime, Boolean
from sqlalchemy.orm import relationship
from datetime import datetime
from volley_stats.database import Base


class PlayerSession(Base):
    """One player's performance in one session."""
    __tablename__ = "player_sessions"
    
    id = Column(Integer, primary_key=True, index=True)
    player_id = Column(Integer, ForeignKey("players.id", ondelete="CASCADE"), nullable=False, index=True)
    session_id = Column(Integer, ForeignKey("sessions.id", ondelete="CASCADE"), nullable=False, index=True)
    
    points_scored = Column(Integer, nullable=False, default=0)
    saves = Column(Integer, nullable=False, default=0)
    mvp_award = Column(Boolean, nullable=False, default=False)
    attendance_status = Column(String(20), nullable=False, default="Present")
    
    created_at = Column(DateTime, default=datetime.utcnow)
    
    # Relationships
    player = relationship("Player", back_populates="sessions")
    session = relationship("ClubSession", back_populates="player_stats")
    
    __table_args__ = (
        UniqueConstraint("player_id", "session_id", name="uq_player_sessions"),
        CheckConstraint("points_scored >= 0", name="ck_player_sessions_points"),
        CheckConstraint("saves >= 0", name="ck_player_sessions_saves"),
    )
    
    def __repr__(self):
        return f"<PlayerSession {self.player_id} - Session {self.session_id}>"
