from sqlalchemy import Column, Integer, ForeignKey, Date, DateTime, Boolean
from sqlalchemy.orm import relationship
from datetime import datetime
from volley_stats.database import Base


class FormSubmission(Base):
    """Intake form submission; recorded by the schema only for now."""
    __tablename__ = "form_submissions"
    
    id = Column(Integer, primary_key=True, index=True)
    player_id = Column(Integer, ForeignKey("players.id", ondelete="CASCADE"), nullable=False, index=True)
    submission_date = Column(DateTime, default=datetime.utcnow)
    session_date = Column(Date, nullable=True)
    attended_session = Column(Boolean, nullable=False, default=False)
    
    # Relationships
    player = relationship("Player", back_populates="form_submissions")
    
    def __repr__(self):
        return f"<FormSubmission {self.player_id} @ {self.submission_date}>"
