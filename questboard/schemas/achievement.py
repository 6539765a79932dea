"""
Achievement schemas
"""
from datetime import datetime
from typing import Optional, List
from pydantic import BaseModel, Field


class AchievementBase(BaseModel):
    """Base achievement schema"""
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    icon: Optional[str] = None
    category: str = "completion"
    requirement: int = Field(default=1, ge=0)
    points: int = Field(default=10, ge=0)


class AchievementCreate(AchievementBase):
    """Schema for creating new achievement (admin)"""
    pass


class AchievementResponse(AchievementBase):
    """Achievement response schema"""
    id: int

    class Config:
        from_attributes = True


class UserAchievementResponse(BaseModel):
    """An unlocked achievement"""
    id: int
    user_id: int
    achievement: AchievementResponse
    earned_at: datetime

    class Config:
        from_attributes = True


class UserAchievementSummary(BaseModel):
    """Summary of user's achievements"""
    user_id: int
    total_achievements: int
    unlocked_count: int
    locked_count: int
    total_points_earned: int
    completion_percentage: float
    achievements: List[UserAchievementResponse]


class AwardAchievementRequest(BaseModel):
    """Manually award an achievement"""
    user_id: Optional[int] = None
    achievement_id: int


class AwardAchievementResponse(BaseModel):
    """Response after awarding an achievement"""
    user_achievement: UserAchievementResponse
    newly_awarded: bool
    user_score: int
    user_level: str
