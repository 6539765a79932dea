"""
User management endpoints
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from questboard.core.exceptions import ConflictException, NotFoundException
from questboard.database import get_db
from questboard.schemas.user import UserCreate, UserUpdate, UserResponse
from questboard.services.storage_service import storage_service

router = APIRouter(prefix="/users", tags=["users"])
logger = logging.getLogger(__name__)


def _ensure_username_free(db: Session, username: str, user_id: Optional[int] = None):
    existing = storage_service.get_user_by_username(db, username)
    if existing and existing.id != user_id:
        raise ConflictException(f"Username '{username}' is already taken")


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(user_data: UserCreate, db: Session = Depends(get_db)):
    """Create a user"""
    _ensure_username_free(db, user_data.username)
    user = storage_service.create_user(db, **user_data.model_dump())
    logger.info(f"Created user {user.id}: {user.username}")
    return user


@router.get("", response_model=List[UserResponse])
async def list_users(db: Session = Depends(get_db)):
    """List all users"""
    return storage_service.get_all_users(db)


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(user_id: int, db: Session = Depends(get_db)):
    """Get a user's profile, score and level"""
    user = storage_service.get_user(db, user_id)
    if not user:
        raise NotFoundException("User", user_id)
    return user


@router.patch("/{user_id}", response_model=UserResponse)
async def update_user(user_id: int, update_data: UserUpdate, db: Session = Depends(get_db)):
    """Update username, region or country"""
    user = storage_service.get_user(db, user_id)
    if not user:
        raise NotFoundException("User", user_id)

    changes = update_data.model_dump(exclude_unset=True, exclude_none=True)
    if "username" in changes:
        _ensure_username_free(db, changes["username"], user_id)

    user = storage_service.update_user(db, user, changes)
    logger.info(f"Updated profile for user: {user.id}")
    return user
