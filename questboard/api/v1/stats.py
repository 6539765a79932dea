"""
Stats endpoint
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from questboard.database import get_db
from questboard.schemas.task import StatsResponse
from questboard.services.task_service import task_service

router = APIRouter(prefix="/stats", tags=["stats"])


@router.get("", response_model=StatsResponse)
async def get_stats(db: Session = Depends(get_db)):
    """Total, due-today, completed and high-priority task counts"""
    return task_service.get_stats(db)
