"""Category schemas"""
from pydantic import BaseModel, Field
from typing import Optional


class CategoryCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    color: str = Field(..., max_length=20)
    user_id: Optional[int] = None


class CategoryUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    color: Optional[str] = Field(None, max_length=20)


class CategoryResponse(BaseModel):
    id: int
    name: str
    color: str
    user_id: Optional[int] = None

    class Config:
        from_attributes = True
