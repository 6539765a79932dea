"""
Achievement system models
"""
from sqlalchemy import Column, String, Integer, DateTime, Text, ForeignKey
from sqlalchemy.orm import relationship
from questboard.database import Base
from questboard.utils.time_utils import utc_now


class Achievement(Base):
    """Achievement definition"""
    __tablename__ = "achievements"

    id = Column(Integer, primary_key=True, autoincrement=True)

    # Achievement details
    name = Column(String(255), nullable=False, index=True)
    description = Column(Text, nullable=True)
    icon = Column(String(255), nullable=True)

    # Unlock rule: the evaluator keys off category + requirement
    category = Column(String(50), nullable=False, default="completion")  # 'completion', 'priority', 'streak'
    requirement = Column(Integer, nullable=False, default=1)

    # Reward
    points = Column(Integer, nullable=False, default=10)

    # Relationships
    user_achievements = relationship("UserAchievement", back_populates="achievement", cascade="all, delete-orphan")


class UserAchievement(Base):
    """
    A user's unlocked achievement.

    No unique constraint on (user_id, achievement_id);
    the achievement service checks membership before every award.
    """
    __tablename__ = "user_achievements"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    achievement_id = Column(Integer, ForeignKey("achievements.id", ondelete="CASCADE"), nullable=False, index=True)

    # Timestamps
    earned_at = Column(DateTime, nullable=False, default=utc_now)

    # Relationships
    user = relationship("User", back_populates="achievements")
    achievement = relationship("Achievement", back_populates="user_achievements")
