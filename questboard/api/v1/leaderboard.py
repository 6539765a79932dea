"""
Leaderboard API endpoints
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from questboard.core.config import settings
from questboard.database import get_db
from questboard.schemas.leaderboard import LeaderboardResponse, UserRankResponse
from questboard.services.leaderboard_service import LeaderboardScope, leaderboard_service

router = APIRouter(prefix="/leaderboard", tags=["leaderboard"])


@router.get("/user/{user_id}/{scope}", response_model=UserRankResponse)
async def get_user_rank(
    user_id: int,
    scope: LeaderboardScope,
    db: Session = Depends(get_db)
):
    """Get a user's rank within their scope group (-1 if not ranked)"""
    rank = leaderboard_service.get_user_rank(db, user_id, scope)
    return UserRankResponse(user_id=user_id, scope=scope.value, rank=rank)


@router.get("/{scope}", response_model=LeaderboardResponse)
async def get_leaderboard(
    scope: LeaderboardScope,
    limit: int = Query(
        settings.LEADERBOARD_DEFAULT_LIMIT, ge=1, le=settings.LEADERBOARD_MAX_LIMIT,
        description="Entries to return"
    ),
    db: Session = Depends(get_db)
):
    """Get the global, country or region leaderboard"""
    entries = leaderboard_service.get_leaderboard(db, scope, limit)
    return LeaderboardResponse(scope=scope.value, limit=limit, entries=entries)
