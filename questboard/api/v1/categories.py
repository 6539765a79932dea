"""
Category endpoints
"""
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from questboard.core.exceptions import NotFoundException
from questboard.database import get_db
from questboard.schemas.category import CategoryCreate, CategoryUpdate, CategoryResponse
from questboard.services.storage_service import storage_service

router = APIRouter(prefix="/categories", tags=["categories"])


@router.get("", response_model=List[CategoryResponse])
async def list_categories(db: Session = Depends(get_db)):
    return storage_service.get_all_categories(db)


@router.post("", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
async def create_category(category: CategoryCreate, db: Session = Depends(get_db)):
    return storage_service.create_category(db, **category.model_dump())


@router.get("/{category_id}", response_model=CategoryResponse)
async def get_category(category_id: int, db: Session = Depends(get_db)):
    category = storage_service.get_category(db, category_id)
    if not category:
        raise NotFoundException("Category", category_id)
    return category


@router.patch("/{category_id}", response_model=CategoryResponse)
async def update_category(category_id: int, update: CategoryUpdate, db: Session = Depends(get_db)):
    category = storage_service.get_category(db, category_id)
    if not category:
        raise NotFoundException("Category", category_id)
    return storage_service.update_category(db, category, update.model_dump(exclude_unset=True, exclude_none=True))


@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_category(category_id: int, db: Session = Depends(get_db)):
    """Delete a category. Tasks keep their category_id."""
    if not storage_service.delete_category(db, category_id):
        raise NotFoundException("Category", category_id)
