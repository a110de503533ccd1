from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from tripboard.core.database import get_db
from tripboard.dependencies.auth import get_current_user
from tripboard.models.user.user import User
from tripboard.schemas.itinerary.activity import (
    ActivityCreate, ActivityUpdate, ActivityReorder, ActivityAssign, ActivityResponse
)
from tripboard.services.itineraries import activity_service

router = APIRouter(prefix="/activities", tags=["Activities"])


@router.post("", response_model=ActivityResponse, status_code=status.HTTP_201_CREATED)
async def create_activity_route(
    activity: ActivityCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return await activity_service.create_activity(db, current_user, activity)


@router.get("/trip/{trip_id}/wishlist", response_model=List[ActivityResponse])
async def get_wishlist_route(
    trip_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return await activity_service.get_unscheduled_activities(db, current_user, trip_id)


# Declared before /{activity_id} so "reorder" is never parsed as an id
@router.patch("/reorder", response_model=ActivityResponse)
async def reorder_activity_route(
    reorder: ActivityReorder,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return await activity_service.reorder_activity(db, current_user, reorder)


@router.get("/{activity_id}", response_model=ActivityResponse)
async def get_activity_route(
    activity_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return await activity_service.get_activity(db, current_user, activity_id)


@router.patch("/{activity_id}", response_model=ActivityResponse)
async def update_activity_route(
    activity_id: int,
    activity_update: ActivityUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return await activity_service.update_activity(db, current_user, activity_id, activity_update)


@router.delete("/{activity_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_activity_route(
    activity_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    await activity_service.delete_activity(db, current_user, activity_id)


@router.patch("/{activity_id}/assign", response_model=ActivityResponse)
async def assign_activity_route(
    activity_id: int,
    payload: ActivityAssign,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return await activity_service.assign_activity(db, current_user, activity_id, payload.day_id)
