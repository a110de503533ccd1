from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from tripboard.core.database import get_db
from tripboard.dependencies.access import require_viewer, require_owner
from tripboard.models.trips.trip_member import TripMember
from tripboard.schemas.trip.trip_member import TripMemberResponse, TripMemberOut, MemberRoleUpdate
from tripboard.services.trips import trip_member_service

router = APIRouter(prefix="/trips", tags=["Trip Member"])


@router.get("/{trip_id}/members", response_model=TripMemberResponse)
async def list_trip_members(
    trip_id: int,
    db: AsyncSession = Depends(get_db),
    member: TripMember = Depends(require_viewer)
):
    return await trip_member_service.get_trip_members(db, trip_id)


@router.patch("/{trip_id}/members/{member_id}", response_model=TripMemberOut)
async def change_member_role(
    trip_id: int,
    member_id: int,
    payload: MemberRoleUpdate,
    db: AsyncSession = Depends(get_db),
    owner: TripMember = Depends(require_owner)
):
    return await trip_member_service.update_member_role(db, trip_id, member_id, payload.role)


@router.delete("/{trip_id}/members/{member_id}")
async def delete_trip_member(
    trip_id: int,
    member_id: int,
    db: AsyncSession = Depends(get_db),
    owner: TripMember = Depends(require_owner)
):
    await trip_member_service.remove_member(db, trip_id, member_id)
    return {"detail": "Member removed"}


@router.post("/{trip_id}/leave")
async def leave_trip_route(
    trip_id: int,
    db: AsyncSession = Depends(get_db),
    member: TripMember = Depends(require_viewer)
):
    await trip_member_service.leave_trip(db, member)
    return {"detail": "You left the trip"}
