from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from tripboard.schemas.trip.trip_schema import TripCreate, TripUpdate, TripResponse, TripSummary, TripDetail
from tripboard.models.trips.trip_member import TripMember
from tripboard.models.user.user import User
from tripboard.core.database import get_db
from tripboard.dependencies.auth import get_current_user
from tripboard.dependencies.access import require_viewer, require_editor, require_owner
from tripboard.services.trips import trip_service

router = APIRouter(prefix="/trips", tags=["Trips"])


@router.post("", response_model=TripResponse, status_code=status.HTTP_201_CREATED)
async def create_trip_route(
    trip: TripCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return await trip_service.create_trip(db, trip, current_user.id)


@router.get("", response_model=List[TripSummary])
async def get_my_trips(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return await trip_service.get_user_trips(db, current_user.id)


@router.get("/{trip_id}", response_model=TripDetail)
async def get_trip(
    trip_id: int,
    db: AsyncSession = Depends(get_db),
    member: TripMember = Depends(require_viewer)
):
    return await trip_service.get_trip_detail(db, trip_id, member)


@router.put("/{trip_id}", response_model=TripResponse)
async def update_trip_route(
    trip_id: int,
    trip_update: TripUpdate,
    db: AsyncSession = Depends(get_db),
    member: TripMember = Depends(require_editor)
):
    return await trip_service.update_trip(db, trip_id, trip_update, member)


@router.delete("/{trip_id}")
async def delete_trip_route(
    trip_id: int,
    db: AsyncSession = Depends(get_db),
    member: TripMember = Depends(require_owner)
):
    return await trip_service.delete_trip(db, trip_id, member.user_id)
