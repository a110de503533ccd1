from datetime import datetime
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm import selectinload
from tripboard.core.exceptions import ConflictError, NotFoundError, ValidationError
from tripboard.core.logger import logger
from tripboard.models.trips.trip_member import TripMember, MemberRole
from tripboard.schemas.trip.trip_member import TripMemberOut, TripMemberResponse
from tripboard.services.access.access_control import get_membership, parse_role


async def add_member(db: AsyncSession, trip_id: int, user_id: int, role: MemberRole) -> TripMember:
    """Stage a new non-owner membership. The caller commits."""
    role = parse_role(role)
    if role == MemberRole.OWNER:
        raise ValidationError("A trip has exactly one owner")

    if await get_membership(db, trip_id, user_id) is not None:
        raise ConflictError("User is already a member of this trip")

    new_member = TripMember(
        trip_id=trip_id,
        user_id=user_id,
        role=role,
        joined_at=datetime.utcnow()
    )
    db.add(new_member)
    await db.flush()
    return new_member


async def get_trip_members(db: AsyncSession, trip_id: int) -> TripMemberResponse:
    result = await db.execute(
        select(TripMember)
        .where(TripMember.trip_id == trip_id)
        .options(selectinload(TripMember.user))
        .order_by(TripMember.joined_at, TripMember.id)
    )
    members = result.scalars().all()
    return TripMemberResponse(
        members=[TripMemberOut.model_validate(member) for member in members]
    )


async def _get_trip_member(db: AsyncSession, trip_id: int, member_id: int) -> TripMember:
    result = await db.execute(
        select(TripMember)
        .where(TripMember.id == member_id, TripMember.trip_id == trip_id)
        .options(selectinload(TripMember.user))
    )
    member = result.scalar_one_or_none()
    if member is None:
        raise NotFoundError("Member not found")
    return member


async def update_member_role(db: AsyncSession, trip_id: int, member_id: int, role: str) -> TripMemberOut:
    member = await _get_trip_member(db, trip_id, member_id)
    new_role = parse_role(role)

    if member.role == MemberRole.OWNER:
        raise ValidationError("Cannot change the owner's role")
    if new_role == MemberRole.OWNER:
        raise ValidationError("Ownership cannot be granted")

    member.role = new_role
    await db.commit()

    logger.info(f"Member {member_id} of trip {trip_id} is now {new_role.value}")
    return TripMemberOut.model_validate(member)


async def remove_member(db: AsyncSession, trip_id: int, member_id: int) -> None:
    member = await _get_trip_member(db, trip_id, member_id)
    if member.role == MemberRole.OWNER:
        raise ValidationError("Cannot remove the owner")

    await db.delete(member)
    await db.commit()
    logger.info(f"Member {member_id} removed from trip {trip_id}")


async def leave_trip(db: AsyncSession, member: TripMember) -> None:
    if member.role == MemberRole.OWNER:
        raise ValidationError("Owner cannot leave the trip. Delete the trip instead.")

    await db.delete(member)
    await db.commit()
    logger.info(f"User {member.user_id} left trip {member.trip_id}")
