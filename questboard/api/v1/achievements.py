"""
Achievements API endpoints
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from questboard.core.dependencies import get_default_user_id
from questboard.core.exceptions import ValidationException
from questboard.database import get_db
from questboard.schemas.achievement import (
    AchievementCreate,
    AchievementResponse,
    AwardAchievementRequest,
    AwardAchievementResponse,
    UserAchievementSummary,
)
from questboard.services.achievement_service import achievement_service
from questboard.services.storage_service import storage_service

# Awards take the per-user scoring lock, so handlers are sync and run in the threadpool
router = APIRouter(prefix="/achievements", tags=["achievements"])


@router.get("", response_model=List[AchievementResponse])
def get_all_achievements(db: Session = Depends(get_db)):
    """Get all available achievements"""
    achievements = achievement_service.get_all_achievements(db)
    return [AchievementResponse.model_validate(a) for a in achievements]


@router.post("", response_model=AchievementResponse, status_code=status.HTTP_201_CREATED)
def create_achievement(achievement: AchievementCreate, db: Session = Depends(get_db)):
    """Add an achievement definition (admin)"""
    return achievement_service.create_achievement(db, achievement)


@router.get("/user/{user_id}", response_model=UserAchievementSummary)
def get_user_achievements(user_id: int, db: Session = Depends(get_db)):
    """Get a user's unlocked achievements"""
    return achievement_service.get_user_achievement_summary(db, user_id)


@router.post("/award", response_model=AwardAchievementResponse)
def award_achievement(
    award_request: AwardAchievementRequest,
    db: Session = Depends(get_db),
    default_user_id: Optional[int] = Depends(get_default_user_id)
):
    """Award an achievement to a user; awarding twice is a no-op"""
    user_id = award_request.user_id if award_request.user_id is not None else default_user_id
    if user_id is None:
        raise ValidationException("user_id", "is required")

    record, newly_awarded = achievement_service.award_achievement(
        db, user_id, award_request.achievement_id
    )
    user = storage_service.get_user(db, user_id)

    return AwardAchievementResponse(
        user_achievement=achievement_service.to_response(record),
        newly_awarded=newly_awarded,
        user_score=user.score,
        user_level=user.level
    )
