from sqlalchemy.ext.asyncio import AsyncSession
from tripboard.core.exceptions import NotFoundError
from tripboard.core.logger import logger
from tripboard.models.itinerary.day_model import Day
from tripboard.models.trips.trip_member import MemberRole
from tripboard.models.user.user import User
from tripboard.schemas.itinerary.activity import ActivityResponse
from tripboard.schemas.itinerary.day import DayCreate, DayUpdate, DayReorder, DayWithActivities
from tripboard.services.access.access_control import ResourceRef, check_access
from tripboard.services.ordering.fractional_index import (
    OrderScope,
    append_index,
    compute_insertion_index,
    ordering_engine,
)


async def _get_day(db: AsyncSession, day_id: int) -> Day:
    day = await db.get(Day, day_id)
    if day is None:
        raise NotFoundError("Day not found")
    return day


async def create_day(db: AsyncSession, current_user: User, day_data: DayCreate) -> Day:
    await check_access(db, current_user.id, ResourceRef.trip(day_data.trip_id), MemberRole.EDITOR)

    order_index = await append_index(db, OrderScope.days_of(day_data.trip_id))
    day = Day(
        trip_id=day_data.trip_id,
        title=day_data.title,
        date=day_data.date,
        order_index=order_index
    )
    db.add(day)
    await db.commit()
    await db.refresh(day)

    logger.info(f"Day {day.id} added to trip {day.trip_id} at {order_index}")
    return day


async def get_day(db: AsyncSession, current_user: User, day_id: int) -> DayWithActivities:
    await check_access(db, current_user.id, ResourceRef.day(day_id), MemberRole.VIEWER)
    day = await _get_day(db, day_id)

    activities = await ordering_engine.ordered(db, OrderScope.activities_of(day.trip_id, day.id))
    return DayWithActivities(
        **day.to_dict(),
        activities=[ActivityResponse.model_validate(activity) for activity in activities]
    )


async def update_day(db: AsyncSession, current_user: User, day_id: int, day_update: DayUpdate) -> Day:
    await check_access(db, current_user.id, ResourceRef.day(day_id), MemberRole.EDITOR)
    day = await _get_day(db, day_id)

    for field, value in day_update.model_dump(exclude_unset=True).items():
        setattr(day, field, value)

    await db.commit()
    await db.refresh(day)
    return day


async def delete_day(db: AsyncSession, current_user: User, day_id: int) -> None:
    await check_access(db, current_user.id, ResourceRef.day(day_id), MemberRole.EDITOR)
    day = await _get_day(db, day_id)

    trip_id = day.trip_id
    await db.delete(day)
    await db.commit()
    logger.info(f"Day {day_id} deleted from trip {trip_id} by user {current_user.id}")


async def reorder_day(db: AsyncSession, current_user: User, day_id: int, reorder: DayReorder) -> Day:
    await check_access(db, current_user.id, ResourceRef.day(day_id), MemberRole.EDITOR)
    day = await _get_day(db, day_id)

    day.order_index = await compute_insertion_index(
        db,
        OrderScope.days_of(day.trip_id),
        after_id=reorder.after_day_id,
        before_id=reorder.before_day_id,
        moving_id=day.id,
    )
    await db.commit()
    await db.refresh(day)
    return day
