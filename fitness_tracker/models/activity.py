from sqlalchemy import Column, Integer, String, Float, DateTime, ForeignKey, Index, func
from fitness_tracker.database import Base


class Activity(Base):
    __tablename__ = "fitness_activities"
    __table_args__ = (Index("idx_fitness_activities_user", "user_id"),)

    id          = Column(Integer, primary_key=True, autoincrement=True)
    user_id     = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    name        = Column(String(100), nullable=False)
    description = Column(String(255))
    icon        = Column(String(16))
    target_value = Column(Float)
    target_unit = Column(String(32))
    category    = Column(String(32))
    is_active   = Column(Integer, nullable=False, default=1, server_default="1")  # 0 = soft delete
    created_at  = Column(DateTime, server_default=func.now(), nullable=False)
