"""
Goal model with its AI-generated roadmap
"""
from sqlalchemy import Column, String, Integer, DateTime, Text, ForeignKey, JSON
from sqlalchemy.orm import relationship
from questboard.database import Base
from questboard.utils.time_utils import utc_now

GOAL_TIMEFRAMES = ("short-term", "medium-term", "long-term")


class Goal(Base):
    """A user goal. ``roadmap`` is stored as returned by the roadmap service."""
    __tablename__ = "goals"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    category = Column(String(100), nullable=False)
    timeframe = Column(String(20), nullable=False)  # 'short-term', 'medium-term', 'long-term'

    # Manually maintained counter, not derived from goal tasks
    progress = Column(Integer, nullable=False, default=0)

    # {overview, milestones: [{title, tasks: [...]}], ...} or {error}
    roadmap = Column(JSON, nullable=True)

    # Timestamps
    completed_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=utc_now)

    # Relationships
    user = relationship("User", back_populates="goals")
