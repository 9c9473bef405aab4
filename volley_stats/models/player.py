from sqlalchemy import Column, Integer, String, DateTime, CheckConstraint
from sqlalchemy.orm import relationship
from datetime import datetime
from volley_stats.database import Base


class Player(Base):
    __tablename__ = "players"
    
    id = Column(Integer, primary_key=True, index=True)
    player_id = Column(String(20), unique=True, nullable=False, index=True)
    full_name = Column(String(100), nullable=False)
    phone_number = Column(String(20), nullable=True)
    instagram_username = Column(String(50), nullable=True)
    age = Column(Integer, nullable=True)
    skill_level = Column(String(20), nullable=True)
    
    # Derived from player_sessions; rewritten on every stats write
    form_submissions_count = Column(Integer, nullable=False, default=0)
    sessions_attended_count = Column(Integer, nullable=False, default=0)
    mvp_awards_count = Column(Integer, nullable=False, default=0)
    total_points_scored = Column(Integer, nullable=False, default=0)
    total_saves = Column(Integer, nullable=False, default=0)
    
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    
    # Relationships
    sessions = relationship("PlayerSession", back_populates="player", passive_deletes=True)
    form_submissions = relationship("FormSubmission", back_populates="player", passive_deletes=True)
    
    __table_args__ = (
        CheckConstraint(
            "skill_level IN ('Beginner', 'Intermediate', 'Advanced')",
            name="ck_players_skill_level",
        ),
    )
    
    def __repr__(self):
        return f"<Player {self.player_id} {self.full_name}>"
