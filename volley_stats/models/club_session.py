from sqlalchemy import Column, Integer, Date, DateTime
from sqlalchemy.orm import relationship
from datetime import datetime
from volley_stats.database import Base


class ClubSession(Base):
    """A date on which the club met."""
    __tablename__ = "sessions"
    
    id = Column(Integer, primary_key=True, index=True)
    session_date = Column(Date, unique=True, nullable=False, index=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    
    # Relationships
    player_stats = relationship("PlayerSession", back_populates="session", passive_deletes=True)
    
    def __repr__(self):
        return f"<ClubSession {self.session_date}>"
