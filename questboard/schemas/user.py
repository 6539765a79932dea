"""User schemas for request/response validation"""
from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime


class UserCreate(BaseModel):
    """Schema for creating a user"""
    username: str = Field(..., min_length=3, max_length=50, pattern=r"^[a-zA-Z0-9_]+$")
    region: str = Field("Global", max_length=100)
    country: str = Field("Global", max_length=100)


class UserUpdate(BaseModel):
    """Profile fields only; score and level change through point awards"""
    username: Optional[str] = Field(None, min_length=3, max_length=50, pattern=r"^[a-zA-Z0-9_]+$")
    region: Optional[str] = Field(None, max_length=100)
    country: Optional[str] = Field(None, max_length=100)


class UserResponse(BaseModel):
    """Schema for user response"""
    id: int
    username: str
    score: int
    level: str
    region: str
    country: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
