"""
Task model
"""
from sqlalchemy import Column, String, Integer, Boolean, DateTime, Text, ForeignKey
from sqlalchemy.orm import relationship
from questboard.database import Base

TASK_PRIORITIES = ("high", "medium", "low")
TASK_STATUSES = ("complete", "incomplete")
TASK_DIFFICULTIES = ("easy", "normal", "hard")

DEFAULT_TASK_POINTS = 10


class Task(Base):
    """A unit of work. ``completed`` always mirrors ``status == 'complete'``."""
    __tablename__ = "tasks"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    due_date = Column(DateTime, nullable=True, index=True)

    priority = Column(String(20), nullable=False, default="medium")  # 'high', 'medium', 'low'
    status = Column(String(20), nullable=False, default="incomplete")  # 'complete', 'incomplete'
    completed = Column(Boolean, nullable=False, default=False)
    completed_at = Column(DateTime, nullable=True)

    # Reward inputs
    points = Column(Integer, nullable=False, default=DEFAULT_TASK_POINTS)
    difficulty = Column(String(20), nullable=False, default="normal")  # 'easy', 'normal', 'hard'

    # Weak references: categories and goals may be deleted under the task
    category_id = Column(Integer, nullable=True, index=True)
    goal_id = Column(Integer, nullable=True, index=True)
    is_goal_task = Column(Boolean, nullable=False, default=False)

    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)

    # Reminder offset in minutes before due_date
    has_reminder = Column(Boolean, nullable=False, default=False)
    reminder_time = Column(Integer, nullable=True)

    # Relationships
    user = relationship("User", back_populates="tasks")
