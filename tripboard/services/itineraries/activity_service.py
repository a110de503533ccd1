from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from tripboard.core.exceptions import NotFoundError, ValidationError
from tripboard.core.logger import logger
from tripboard.models.itinerary.activity import Activity
from tripboard.models.itinerary.day_model import Day
from tripboard.models.trips.trip_member import MemberRole
from tripboard.models.user.user import User
from tripboard.schemas.itinerary.activity import ActivityCreate, ActivityUpdate, ActivityReorder
from tripboard.services.access.access_control import ResourceRef, check_access
from tripboard.services.ordering.fractional_index import (
    OrderScope,
    append_index,
    compute_insertion_index,
    ordering_engine,
)
from tripboard.services.places.place_resolver import resolve_place
from tripboard.services.trips.category_service import validate_category_for_trip


async def _get_activity(db: AsyncSession, activity_id: int) -> Activity:
    activity = await db.get(Activity, activity_id)
    if activity is None:
        raise NotFoundError("Activity not found")
    return activity


async def _get_day_in_trip(db: AsyncSession, day_id: int, trip_id: int) -> Day:
    day = await db.get(Day, day_id)
    if day is None:
        raise NotFoundError("Day not found")
    if day.trip_id != trip_id:
        raise ValidationError("Day does not belong to this trip")
    return day


async def create_activity(db: AsyncSession, current_user: User, data: ActivityCreate) -> Activity:
    await check_access(db, current_user.id, ResourceRef.trip(data.trip_id), MemberRole.EDITOR)

    if data.day_id is not None:
        await _get_day_in_trip(db, data.day_id, data.trip_id)
    if data.category_id is not None:
        await validate_category_for_trip(db, data.category_id, data.trip_id)

    place_id = await resolve_place(
        db,
        name=data.title,
        lat=data.latitude,
        lng=data.longitude,
        address=data.address,
        external_id=data.external_place_id or data.google_place_id,
        provider=data.place_provider or ("google" if data.google_place_id else None),
    )

    scope = OrderScope.activities_of(data.trip_id, data.day_id)
    order_index = await append_index(db, scope)

    activity = Activity(
        **data.model_dump(exclude={"external_place_id", "place_provider"}),
        order_index=order_index,
        place_id=place_id,
        created_by_id=current_user.id,
    )
    db.add(activity)
    await db.commit()
    await db.refresh(activity)

    logger.info(f"Activity {activity.id} created in scope {scope.key} at {order_index}")
    return activity


async def get_activity(db: AsyncSession, current_user: User, activity_id: int) -> Activity:
    await check_access(db, current_user.id, ResourceRef.activity(activity_id), MemberRole.VIEWER)
    return await _get_activity(db, activity_id)


async def get_unscheduled_activities(db: AsyncSession, current_user: User, trip_id: int) -> List[Activity]:
    await check_access(db, current_user.id, ResourceRef.trip(trip_id), MemberRole.VIEWER)
    return await ordering_engine.ordered(db, OrderScope.activities_of(trip_id, None))


async def update_activity(
    db: AsyncSession,
    current_user: User,
    activity_id: int,
    activity_update: ActivityUpdate
) -> Activity:
    await check_access(db, current_user.id, ResourceRef.activity(activity_id), MemberRole.EDITOR)
    activity = await _get_activity(db, activity_id)

    update_data = activity_update.model_dump(exclude_unset=True)
    if update_data.get("category_id") is not None:
        await validate_category_for_trip(db, update_data["category_id"], activity.trip_id)

    # Coordinates are edited in place; the linked place is kept as created.
    for field, value in update_data.items():
        setattr(activity, field, value)

    await db.commit()
    await db.refresh(activity)
    return activity


async def delete_activity(db: AsyncSession, current_user: User, activity_id: int) -> None:
    await check_access(db, current_user.id, ResourceRef.activity(activity_id), MemberRole.EDITOR)
    activity = await _get_activity(db, activity_id)

    await db.delete(activity)
    await db.commit()
    logger.info(f"Activity {activity_id} deleted by user {current_user.id}")


async def reorder_activity(db: AsyncSession, current_user: User, reorder: ActivityReorder) -> Activity:
    """Reposition an activity inside its current day or unscheduled pool."""
    await check_access(db, current_user.id, ResourceRef.activity(reorder.activity_id), MemberRole.EDITOR)
    activity = await _get_activity(db, reorder.activity_id)

    activity.order_index = await compute_insertion_index(
        db,
        OrderScope.of_activity(activity),
        after_id=reorder.after_activity_id,
        before_id=reorder.before_activity_id,
        moving_id=activity.id,
    )
    await db.commit()
    await db.refresh(activity)
    return activity


async def assign_activity(
    db: AsyncSession,
    current_user: User,
    activity_id: int,
    day_id: Optional[int]
) -> Activity:
    """
    Move an activity to another day, or back to the unscheduled pool when
    ``day_id`` is None. The activity always lands at the end of its new list.
    """
    await check_access(db, current_user.id, ResourceRef.activity(activity_id), MemberRole.EDITOR)
    activity = await _get_activity(db, activity_id)

    if day_id is not None:
        await _get_day_in_trip(db, day_id, activity.trip_id)

    if activity.day_id == day_id:
        return activity

    destination = OrderScope.activities_of(activity.trip_id, day_id)
    # Computed before day_id changes so the moving row is not counted in its destination
    order_index = await append_index(db, destination)

    activity.day_id = day_id
    activity.order_index = order_index
    await db.commit()
    await db.refresh(activity)

    logger.info(f"Activity {activity_id} moved to scope {destination.key} at {order_index}")
    return activity
