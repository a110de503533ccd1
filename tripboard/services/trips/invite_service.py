from datetime import datetime
from typing import List
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm import selectinload
from tripboard.core.exceptions import ConflictError, NotFoundError, ValidationError
from tripboard.core.logger import logger
from tripboard.models.trips.trip_invite import TripInvite, InviteStatus
from tripboard.models.trips.trip_member import MemberRole
from tripboard.models.user.user import User
from tripboard.schemas.trip.invite import TripInviteCreate, TripInviteResponse
from tripboard.services.access.access_control import get_membership, parse_role
from tripboard.services.trips.trip_member_service import add_member


def _with_users(stmt):
    return stmt.options(
        selectinload(TripInvite.invited_user),
        selectinload(TripInvite.invited_by)
    )


async def _load_invite(db: AsyncSession, invite_id: int) -> TripInvite:
    result = await db.execute(
        _with_users(select(TripInvite).where(TripInvite.id == invite_id)).execution_options(populate_existing=True)
    )
    return result.scalar_one()


async def create_trip_invite(
    db: AsyncSession,
    trip_id: int,
    invite_data: TripInviteCreate,
    current_user: User
) -> TripInviteResponse:
    role = parse_role(invite_data.role)

    result = await db.execute(select(User).where(User.email == invite_data.email))
    invitee = result.scalar_one_or_none()
    if invitee is None:
        raise NotFoundError("User not found")

    if await get_membership(db, trip_id, invitee.id) is not None:
        raise ConflictError("User is already a member")

    result = await db.execute(
        select(TripInvite).where(
            TripInvite.trip_id == trip_id,
            TripInvite.invited_user_id == invitee.id
        )
    )
    invite = result.scalar_one_or_none()

    if invite is not None and invite.status == InviteStatus.pending:
        raise ConflictError("User already has a pending invite")

    if invite is None:
        invite = TripInvite(trip_id=trip_id, invited_user_id=invitee.id)
        db.add(invite)

    # A previously answered invite is reopened rather than duplicated
    invite.invited_by_id = current_user.id
    invite.role = role
    invite.status = InviteStatus.pending
    invite.created_at = datetime.utcnow()
    invite.responded_at = None

    await db.commit()

    logger.info(f"User {current_user.id} invited user {invitee.id} to trip {trip_id} as {role.value}")
    return TripInviteResponse.model_validate(await _load_invite(db, invite.id))


async def get_trip_invites(db: AsyncSession, trip_id: int) -> List[TripInviteResponse]:
    result = await db.execute(
        _with_users(select(TripInvite))
        .where(TripInvite.trip_id == trip_id, TripInvite.status == InviteStatus.pending)
        .order_by(TripInvite.created_at.desc(), TripInvite.id.desc())
    )
    return [TripInviteResponse.model_validate(invite) for invite in result.scalars().all()]


async def cancel_trip_invite(db: AsyncSession, trip_id: int, invite_id: int) -> None:
    result = await db.execute(
        select(TripInvite).where(
            TripInvite.id == invite_id,
            TripInvite.trip_id == trip_id,
            TripInvite.status == InviteStatus.pending
        )
    )
    invite = result.scalar_one_or_none()
    if invite is None:
        raise NotFoundError("Invite not found")

    await db.delete(invite)
    await db.commit()


async def get_user_invites(db: AsyncSession, current_user: User) -> List[TripInviteResponse]:
    result = await db.execute(
        _with_users(select(TripInvite))
        .where(
            TripInvite.invited_user_id == current_user.id,
            TripInvite.status == InviteStatus.pending
        )
        .order_by(TripInvite.created_at.desc(), TripInvite.id.desc())
    )
    return [TripInviteResponse.model_validate(invite) for invite in result.scalars().all()]


async def _get_pending_invite_for(db: AsyncSession, invite_id: int, current_user: User) -> TripInvite:
    result = await db.execute(
        select(TripInvite).where(
            TripInvite.id == invite_id,
            TripInvite.invited_user_id == current_user.id
        )
    )
    invite = result.scalar_one_or_none()
    if invite is None:
        raise NotFoundError("Invite not found")
    if invite.status != InviteStatus.pending:
        raise ValidationError("Invite has already been responded to")
    return invite


async def accept_trip_invite(db: AsyncSession, invite_id: int, current_user: User) -> dict:
    invite = await _get_pending_invite_for(db, invite_id, current_user)

    # Membership may already exist if two accepts raced; the invite still closes
    if await get_membership(db, invite.trip_id, current_user.id) is None:
        await add_member(db, invite.trip_id, current_user.id, MemberRole(invite.role))

    invite.status = InviteStatus.accepted
    invite.responded_at = datetime.utcnow()
    await db.commit()

    logger.info(f"User {current_user.id} joined trip {invite.trip_id} as {invite.role.value}")
    return {"detail": "Invite accepted", "trip_id": invite.trip_id}


async def reject_trip_invite(db: AsyncSession, invite_id: int, current_user: User) -> dict:
    invite = await _get_pending_invite_for(db, invite_id, current_user)

    invite.status = InviteStatus.rejected
    invite.responded_at = datetime.utcnow()
    await db.commit()

    return {"detail": "Invite rejected"}
