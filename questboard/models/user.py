"""
User model
"""
from sqlalchemy import Column, String, Integer, DateTime
from sqlalchemy.orm import relationship
from questboard.database import Base
from questboard.utils.time_utils import utc_now

# Users outside any country/region group carry this marker
GLOBAL_MARKER = "Global"


class User(Base):
    """User account with gamification totals"""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(50), unique=True, nullable=False, index=True)

    # Gamification; mutated only through the point-credit path
    score = Column(Integer, nullable=False, default=0)
    level = Column(String(20), nullable=False, default="Bronze")  # 'Bronze' .. 'Diamond'

    # Leaderboard grouping
    region = Column(String(100), nullable=False, default=GLOBAL_MARKER)
    country = Column(String(100), nullable=False, default=GLOBAL_MARKER)

    # Timestamps
    created_at = Column(DateTime, default=utc_now)

    # Relationships
    tasks = relationship("Task", back_populates="user")
    goals = relationship("Goal", back_populates="user")
    achievements = relationship("UserAchievement", back_populates="user", cascade="all, delete-orphan")
