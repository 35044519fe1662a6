from sqlalchemy import Column, Integer, Float, String, Date, DateTime, ForeignKey, Index, UniqueConstraint, func
from fitness_tracker.database import Base


class ActivityLog(Base):
    __tablename__ = "activity_logs"
    __table_args__ = (
        UniqueConstraint("activity_id", "log_date", name="uq_activity_logs_activity_date"),  # 하루 1건
        Index("idx_activity_logs_date", "log_date"),
        Index("idx_activity_logs_user", "user_id"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    activity_id = Column(Integer, ForeignKey("fitness_activities.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    completed = Column(Integer, nullable=False, default=0)
    actual_value = Column(Float)
    notes = Column(String(500))
    log_date = Column(Date, nullable=False)
    logged_at = Column(DateTime, server_default=func.now(), nullable=False)
