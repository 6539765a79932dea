"""
Database models for Questboard

All models should be imported here so Base.metadata sees them.
"""
from questboard.models.user import User
from questboard.models.category import Category
from questboard.models.task import Task
from questboard.models.goal import Goal
from questboard.models.achievement import Achievement, UserAchievement

__all__ = [
    # User
    "User",
    # Category
    "Category",
    # Task
    "Task",
    # Goal
    "Goal",
    # Achievement
    "Achievement",
    "UserAchievement",
]
