"""
Task endpoints
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from questboard.core.dependencies import get_default_user_id
from questboard.database import get_db
from questboard.schemas.achievement import AchievementResponse
from questboard.schemas.task import (
    TaskCreate,
    TaskUpdate,
    TaskResponse,
    TaskStatusUpdate,
    TaskStatusResponse,
)
from questboard.schemas.user import UserResponse
from questboard.services.task_service import task_service

# Status changes take the per-user scoring lock, so handlers are sync and run in the threadpool
router = APIRouter(prefix="/tasks", tags=["tasks"])


@router.get("", response_model=List[TaskResponse])
def list_tasks(
    status_filter: Optional[str] = Query(None, alias="status", pattern="^(complete|incomplete)$"),
    db: Session = Depends(get_db)
):
    """Get all tasks, optionally filtered by status"""
    return task_service.list_tasks(db, status_filter)


@router.post("", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
def create_task(
    task_data: TaskCreate,
    db: Session = Depends(get_db),
    default_user_id: Optional[int] = Depends(get_default_user_id)
):
    """Create a new task"""
    return task_service.create_task(db, task_data, default_user_id)


@router.get("/{task_id}", response_model=TaskResponse)
def get_task(task_id: int, db: Session = Depends(get_db)):
    return task_service.get_task(db, task_id)


@router.patch("/{task_id}", response_model=TaskResponse)
def update_task(
    task_id: int,
    task_update: TaskUpdate,
    db: Session = Depends(get_db),
    default_user_id: Optional[int] = Depends(get_default_user_id)
):
    """Update a task"""
    return task_service.update_task(db, task_id, task_update, default_user_id)


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_task(task_id: int, db: Session = Depends(get_db)):
    task_service.delete_task(db, task_id)


@router.post("/{task_id}/status", response_model=TaskStatusResponse)
def set_task_status(
    task_id: int,
    status_update: TaskStatusUpdate,
    db: Session = Depends(get_db),
    default_user_id: Optional[int] = Depends(get_default_user_id)
):
    """Complete or reopen a task; completion credits points and achievements"""
    task, points, unlocked = task_service.set_task_status(
        db, task_id, status_update.status, default_user_id
    )
    owner = task_service.get_task_owner(db, task, default_user_id)

    return TaskStatusResponse(
        task=TaskResponse.model_validate(task),
        points_awarded=points,
        achievements_unlocked=[AchievementResponse.model_validate(a) for a in unlocked],
        user=UserResponse.model_validate(owner) if owner else None
    )
