"""
Leaderboard schemas
"""
from typing import List, Optional
from pydantic import BaseModel


class LeaderboardEntry(BaseModel):
    """Single entry in leaderboard; rank is the position in the returned page"""
    rank: int
    user_id: int
    username: str
    score: int
    level: str
    region: Optional[str] = None
    country: Optional[str] = None


class LeaderboardResponse(BaseModel):
    scope: str
    limit: int
    entries: List[LeaderboardEntry]


class UserRankResponse(BaseModel):
    """rank is -1 when the user is unknown or outside the scope"""
    user_id: int
    scope: str
    rank: int
