"""
Goal and roadmap schemas
"""
from datetime import datetime
from typing import Optional, List, Dict, Any, Literal
from pydantic import BaseModel, Field

Timeframe = Literal["short-term", "medium-term", "long-term"]


class GoalCreate(BaseModel):
    user_id: Optional[int] = None
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    category: str = Field(..., min_length=1, max_length=100)
    timeframe: Timeframe
    generate_roadmap: bool = Field(default=True, description="Ask the AI service for a roadmap")


class GoalUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    category: Optional[str] = Field(None, min_length=1, max_length=100)
    timeframe: Optional[Timeframe] = None
    progress: Optional[int] = Field(None, ge=0)
    completed_at: Optional[datetime] = None


class GoalResponse(BaseModel):
    id: int
    user_id: int
    title: str
    description: Optional[str] = None
    category: str
    timeframe: str
    progress: int
    roadmap: Optional[Dict[str, Any]] = None
    completed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ProductivityTipsResponse(BaseModel):
    tips: List[str]
