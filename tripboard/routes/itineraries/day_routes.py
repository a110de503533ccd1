from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from tripboard.core.database import get_db
from tripboard.dependencies.auth import get_current_user
from tripboard.models.user.user import User
from tripboard.schemas.itinerary.day import DayCreate, DayUpdate, DayReorder, DayResponse, DayWithActivities
from tripboard.services.itineraries import day_service

router = APIRouter(prefix="/days", tags=["Itinerary Days"])


@router.post("", response_model=DayResponse, status_code=status.HTTP_201_CREATED)
async def create_day_route(
    day: DayCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return await day_service.create_day(db, current_user, day)


@router.get("/{day_id}", response_model=DayWithActivities)
async def get_day_route(
    day_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return await day_service.get_day(db, current_user, day_id)


@router.patch("/{day_id}", response_model=DayResponse)
async def update_day_route(
    day_id: int,
    day_update: DayUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return await day_service.update_day(db, current_user, day_id, day_update)


@router.delete("/{day_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_day_route(
    day_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    await day_service.delete_day(db, current_user, day_id)


@router.patch("/{day_id}/reorder", response_model=DayResponse)
async def reorder_day_route(
    day_id: int,
    reorder: DayReorder,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return await day_service.reorder_day(db, current_user, day_id, reorder)
