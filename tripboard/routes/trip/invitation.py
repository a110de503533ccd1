from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from tripboard.core.database import get_db
from tripboard.dependencies.auth import get_current_user
from tripboard.dependencies.access import require_owner
from tripboard.models.trips.trip_member import TripMember
from tripboard.models.user.user import User
from tripboard.schemas.trip.invite import TripInviteCreate, TripInviteResponse
from tripboard.services.trips import invite_service

# Owner-side management lives under the trip, the invitee's inbox under /invites
trip_router = APIRouter(prefix="/trips", tags=["Trip Invites"])
router = APIRouter(prefix="/invites", tags=["Trip Invites"])


@trip_router.post("/{trip_id}/invites", response_model=TripInviteResponse, status_code=status.HTTP_201_CREATED)
async def send_trip_invite(
    trip_id: int,
    invite_data: TripInviteCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
    owner: TripMember = Depends(require_owner)
):
    return await invite_service.create_trip_invite(db, trip_id, invite_data, current_user)


@trip_router.get("/{trip_id}/invites", response_model=List[TripInviteResponse])
async def list_trip_invites(
    trip_id: int,
    db: AsyncSession = Depends(get_db),
    owner: TripMember = Depends(require_owner)
):
    return await invite_service.get_trip_invites(db, trip_id)


@trip_router.delete("/{trip_id}/invites/{invite_id}")
async def cancel_invite(
    trip_id: int,
    invite_id: int,
    db: AsyncSession = Depends(get_db),
    owner: TripMember = Depends(require_owner)
):
    await invite_service.cancel_trip_invite(db, trip_id, invite_id)
    return {"detail": "Invite cancelled"}


@router.get("", response_model=List[TripInviteResponse])
async def view_user_invites(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return await invite_service.get_user_invites(db, current_user)


@router.post("/{invite_id}/accept")
async def accept_invite(
    invite_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return await invite_service.accept_trip_invite(db, invite_id, current_user)


@router.post("/{invite_id}/reject")
async def reject_invite(
    invite_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return await invite_service.reject_trip_invite(db, invite_id, current_user)
