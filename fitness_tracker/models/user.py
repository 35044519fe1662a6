from sqlalchemy import Column, Integer, String, Float, DateTime, ForeignKey, func
from sqlalchemy.orm import relationship
from fitness_tracker.database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), unique=True, index=True, nullable=False)  # 소문자 정규화된 값
    password_hash = Column(String(200), nullable=False)  # salt:digest
    full_name = Column(String(100), nullable=False)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)

    profile = relationship("UserProfile", back_populates="user", uselist=False, passive_deletes=True)


class UserProfile(Base):
    __tablename__ = "user_profiles"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)
    age = Column(Integer)
    weight = Column(Float)
    height = Column(Float)
    gender = Column(String(20))
    fitness_goal = Column(String(255))

    user = relationship("User", back_populates="profile")
