from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from tripboard.core.database import get_db
from tripboard.dependencies.auth import get_current_user
from tripboard.models.user.user import User
from tripboard.schemas.trip.category import CategoryCreate, CategoryResponse
from tripboard.services.trips import category_service

router = APIRouter(prefix="/categories", tags=["Categories"])


@router.get("/trip/{trip_id}", response_model=List[CategoryResponse])
async def get_trip_categories_route(
    trip_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return await category_service.get_trip_categories(db, current_user, trip_id)


@router.post("/trip/{trip_id}", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
async def create_category_route(
    trip_id: int,
    category: CategoryCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return await category_service.create_category(db, current_user, trip_id, category)


@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_category_route(
    category_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    await category_service.delete_category(db, current_user, category_id)
