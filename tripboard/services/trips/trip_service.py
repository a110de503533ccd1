from collections import defaultdict
from typing import List
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from tripboard.core.exceptions import ForbiddenError, NotFoundError, ValidationError
from tripboard.core.logger import logger
from tripboard.models.itinerary.activity import Activity
from tripboard.models.trips.trip_model import Trip
from tripboard.models.trips.trip_member import TripMember, MemberRole
from tripboard.models.user.user import User
from tripboard.schemas.itinerary.activity import ActivityResponse
from tripboard.schemas.itinerary.day import DayWithActivities
from tripboard.schemas.trip.trip_schema import (
    PublicTripDetail,
    TripCreate,
    TripDetail,
    TripResponse,
    TripSummary,
    TripUpdate,
)
from tripboard.schemas.user.user import UserSummary
from tripboard.services.access.access_control import get_public_trip
from tripboard.services.ordering.fractional_index import OrderScope, ordering_engine


async def create_trip(db: AsyncSession, trip_data: TripCreate, user_id: int) -> Trip:
    new_trip = Trip(**trip_data.model_dump(), owner_id=user_id)
    db.add(new_trip)
    await db.flush()

    # The creator's owner membership lives as long as the trip does
    db.add(TripMember(trip_id=new_trip.id, user_id=user_id, role=MemberRole.OWNER))

    await db.commit()
    await db.refresh(new_trip)

    logger.info(f"Trip {new_trip.id} created by user {user_id}")
    return new_trip


async def get_user_trips(db: AsyncSession, user_id: int) -> List[TripSummary]:
    result = await db.execute(
        select(Trip, TripMember.role)
        .join(TripMember, TripMember.trip_id == Trip.id)
        .where(TripMember.user_id == user_id)
        .order_by(Trip.created_at.desc(), Trip.id.desc())
    )
    return [_summary(row.Trip, row.role) for row in result.all()]


def _summary(trip: Trip, role: MemberRole) -> TripSummary:
    return TripSummary(
        id=trip.id,
        title=trip.title,
        description=trip.description,
        start_date=trip.start_date,
        end_date=trip.end_date,
        owner_id=trip.owner_id,
        is_public=trip.is_public,
        created_at=trip.created_at,
        role=role,
    )


async def _get_trip(db: AsyncSession, trip_id: int) -> Trip:
    trip = await db.get(Trip, trip_id)
    if trip is None:
        raise NotFoundError("Trip not found")
    return trip


async def _ordered_itinerary(db: AsyncSession, trip_id: int):
    """Days in order with their activities in order, plus the unscheduled pool."""
    days = await ordering_engine.ordered(db, OrderScope.days_of(trip_id))

    result = await db.execute(
        select(Activity)
        .where(Activity.trip_id == trip_id)
        .order_by(Activity.order_index, Activity.id)
    )
    by_day = defaultdict(list)
    for activity in result.scalars().all():
        by_day[activity.day_id].append(ActivityResponse.model_validate(activity))

    scheduled = [
        DayWithActivities(**day.to_dict(), activities=by_day.get(day.id, []))
        for day in days
    ]
    return scheduled, by_day.get(None, [])


async def get_trip_detail(db: AsyncSession, trip_id: int, member: TripMember) -> TripDetail:
    trip = await _get_trip(db, trip_id)
    days, unscheduled = await _ordered_itinerary(db, trip_id)

    summary = _summary(trip, member.role)
    return TripDetail(**summary.model_dump(), days=days, unscheduled=unscheduled)


async def get_public_trip_detail(db: AsyncSession, trip_id: int) -> PublicTripDetail:
    trip = await get_public_trip(db, trip_id)
    days, _ = await _ordered_itinerary(db, trip_id)
    owner = await db.get(User, trip.owner_id)

    return PublicTripDetail(
        **TripResponse.model_validate(trip).model_dump(),
        owner=UserSummary.model_validate(owner),
        days=days,
    )


async def update_trip(db: AsyncSession, trip_id: int, trip_data: TripUpdate, member: TripMember) -> Trip:
    trip = await _get_trip(db, trip_id)

    update_data = trip_data.model_dump(exclude_unset=True)
    if "is_public" in update_data and member.role != MemberRole.OWNER:
        raise ForbiddenError("Only the owner can change visibility")

    # Partial updates are checked against the stored dates they leave in place.
    start = update_data.get("start_date", trip.start_date)
    end = update_data.get("end_date", trip.end_date)
    if start is not None and end is not None and end < start:
        raise ValidationError("end_date must not be before start_date")

    for key, value in update_data.items():
        setattr(trip, key, value)

    await db.commit()
    await db.refresh(trip)

    logger.info(f"Trip {trip_id} updated by user {member.user_id}")
    return trip


async def delete_trip(db: AsyncSession, trip_id: int, user_id: int) -> dict:
    trip = await _get_trip(db, trip_id)
    await db.delete(trip)
    await db.commit()

    logger.info(f"Trip {trip_id} deleted by user {user_id}")
    return {"detail": "Trip deleted"}
