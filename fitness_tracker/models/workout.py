from sqlalchemy import Column, Integer, Float, String, Date, DateTime, ForeignKey, Index, func
from fitness_tracker.database import Base


class WorkoutSession(Base):
    __tablename__ = "workout_sessions"
    __table_args__ = (Index("idx_workout_sessions_user", "user_id"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    workout_type = Column(String(64), nullable=False)
    duration_minutes = Column(Integer)
    calories_burned = Column(Float)
    intensity = Column(String(16))
    notes = Column(String(500))
    session_date = Column(Date, nullable=False)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
