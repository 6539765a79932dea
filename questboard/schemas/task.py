"""
Task schemas
"""
from datetime import date, datetime
from typing import Optional, List, Literal
from pydantic import BaseModel, Field

from questboard.schemas.achievement import AchievementResponse
from questboard.schemas.user import UserResponse

Priority = Literal["high", "medium", "low"]
Status = Literal["complete", "incomplete"]
Difficulty = Literal["easy", "normal", "hard"]

# HH:MM, 24-hour clock
DUE_TIME_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"


class TaskCreate(BaseModel):
    """Schema for creating a task. due_date and due_time are merged into one timestamp."""
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    due_date: Optional[date] = None
    due_time: Optional[str] = Field(None, pattern=DUE_TIME_PATTERN)
    priority: Priority = "medium"
    status: Status = "incomplete"
    points: int = Field(default=10, ge=0)
    difficulty: Difficulty = "normal"
    category_id: Optional[int] = None
    user_id: Optional[int] = None
    has_reminder: bool = False
    reminder_time: Optional[int] = Field(None, ge=0, description="Minutes before the due date")


class TaskUpdate(BaseModel):
    """Partial task update; an explicit null due_date clears it"""
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    due_date: Optional[date] = None
    due_time: Optional[str] = Field(None, pattern=DUE_TIME_PATTERN)
    priority: Optional[Priority] = None
    status: Optional[Status] = None
    points: Optional[int] = Field(None, ge=0)
    difficulty: Optional[Difficulty] = None
    category_id: Optional[int] = None
    has_reminder: Optional[bool] = None
    reminder_time: Optional[int] = Field(None, ge=0)


class TaskStatusUpdate(BaseModel):
    status: Status


class TaskResponse(BaseModel):
    """Schema for task response"""
    id: int
    title: str
    description: Optional[str] = None
    due_date: Optional[datetime] = None
    priority: str
    status: str
    completed: bool
    completed_at: Optional[datetime] = None
    points: int
    difficulty: str
    category_id: Optional[int] = None
    user_id: Optional[int] = None
    has_reminder: bool
    reminder_time: Optional[int] = None
    is_goal_task: bool
    goal_id: Optional[int] = None

    class Config:
        from_attributes = True


class TaskStatusResponse(BaseModel):
    """Response after a status change"""
    task: TaskResponse
    points_awarded: int = 0
    achievements_unlocked: List[AchievementResponse] = []
    user: Optional[UserResponse] = None


class StatsResponse(BaseModel):
    """Aggregate task counts"""
    total_tasks: int
    due_today: int
    completed: int
    high_priority: int
