"""
Goal and roadmap endpoints
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.orm import Session

from questboard.core.dependencies import get_default_user_id
from questboard.core.rate_limit import limiter
from questboard.database import get_db
from questboard.schemas.goal import GoalCreate, GoalUpdate, GoalResponse, ProductivityTipsResponse
from questboard.schemas.task import TaskResponse
from questboard.services.goal_service import goal_service

router = APIRouter(tags=["goals"])


@router.get("/goals", response_model=List[GoalResponse])
async def list_goals(
    user_id: Optional[int] = Query(None, description="Only this user's goals"),
    db: Session = Depends(get_db)
):
    return goal_service.list_goals(db, user_id)


# Roadmap generation calls the AI service synchronously, so these run in the threadpool
@router.post("/goals", response_model=GoalResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit("10/minute")
def create_goal(
    request: Request,
    goal_data: GoalCreate,
    db: Session = Depends(get_db),
    default_user_id: Optional[int] = Depends(get_default_user_id)
):
    """Create a goal; its roadmap and first-milestone tasks are generated"""
    return goal_service.create_goal(db, goal_data, default_user_id)


@router.get("/goals/{goal_id}", response_model=GoalResponse)
async def get_goal(goal_id: int, db: Session = Depends(get_db)):
    return goal_service.get_goal(db, goal_id)


@router.patch("/goals/{goal_id}", response_model=GoalResponse)
async def update_goal(goal_id: int, goal_update: GoalUpdate, db: Session = Depends(get_db)):
    return goal_service.update_goal(db, goal_id, goal_update)


@router.delete("/goals/{goal_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_goal(goal_id: int, db: Session = Depends(get_db)):
    goal_service.delete_goal(db, goal_id)


@router.get("/goals/{goal_id}/tasks", response_model=List[TaskResponse])
async def get_goal_tasks(goal_id: int, db: Session = Depends(get_db)):
    """Tasks created from the goal's roadmap"""
    return goal_service.get_goal_tasks(db, goal_id)


@router.post("/goals/{goal_id}/roadmap", response_model=GoalResponse)
@limiter.limit("10/minute")
def regenerate_roadmap(request: Request, goal_id: int, db: Session = Depends(get_db)):
    """Generate a new roadmap for the goal"""
    return goal_service.regenerate_roadmap(db, goal_id)


@router.get("/ai/tips", response_model=ProductivityTipsResponse)
@limiter.limit("10/minute")
def get_productivity_tips(
    request: Request,
    user_id: Optional[int] = Query(None),
    db: Session = Depends(get_db)
):
    """Productivity tips based on the current task load"""
    return ProductivityTipsResponse(tips=goal_service.get_productivity_tips(db, user_id))
