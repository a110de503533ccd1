from typing import List, Tuple
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm import selectinload
from tripboard.core.cache import RedisCache
from tripboard.core.exceptions import NotFoundError
from tripboard.core.logger import logger
from tripboard.models.itinerary.activity import Activity
from tripboard.models.places.check_in import CheckIn
from tripboard.models.trips.trip_member import MemberRole
from tripboard.models.user.user import User
from tripboard.services.access.access_control import ResourceRef, check_access
from tripboard.services.places.place_resolver import resolve_place
from tripboard.services.places.place_service import place_stats_key


class CheckInService:
    def __init__(self, cache: RedisCache):
        self.cache = cache

    async def _find(self, db: AsyncSession, place_id: int, user_id: int):
        result = await db.execute(
            select(CheckIn)
            .options(selectinload(CheckIn.user))
            .where(CheckIn.place_id == place_id, CheckIn.user_id == user_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def _place_for_activity(self, db: AsyncSession, activity: Activity) -> int:
        """Activities created before place linking existed get resolved lazily."""
        if activity.place_id is None:
            activity.place_id = await resolve_place(
                db,
                name=activity.title,
                lat=activity.latitude,
                lng=activity.longitude,
                address=activity.address,
            )
            await db.flush()
        return activity.place_id

    async def check_in(self, db: AsyncSession, current_user: User, activity_id: int) -> Tuple[CheckIn, bool]:
        """
        Record that the user has been to the activity's place.

        Returns the check-in and whether it was newly created. Checking in twice
        at the same place is not an error; the first check-in is returned.
        """
        await check_access(db, current_user.id, ResourceRef.activity(activity_id), MemberRole.VIEWER)

        activity = await db.get(Activity, activity_id)
        if activity is None:
            raise NotFoundError("Activity not found")

        place_id = await self._place_for_activity(db, activity)

        existing = await self._find(db, place_id, current_user.id)
        if existing:
            await db.commit()
            return existing, False

        check_in = CheckIn(place_id=place_id, user_id=current_user.id, activity_id=activity_id)
        try:
            async with db.begin_nested():
                db.add(check_in)
        except IntegrityError:
            # A concurrent request from the same user got there first
            existing = await self._find(db, place_id, current_user.id)
            if existing is None:
                raise
            await db.commit()
            return existing, False

        await db.commit()
        await self.cache.delete(place_stats_key(place_id))

        logger.info(f"User {current_user.id} checked in at place {place_id} via activity {activity_id}")
        return await self._find(db, place_id, current_user.id), True

    async def get_activity_check_ins(self, db: AsyncSession, current_user: User, activity_id: int) -> List[CheckIn]:
        """Everyone who has checked in at the place behind an activity."""
        await check_access(db, current_user.id, ResourceRef.activity(activity_id), MemberRole.VIEWER)

        activity = await db.get(Activity, activity_id)
        if activity is None:
            raise NotFoundError("Activity not found")
        if activity.place_id is None:
            return []

        result = await db.execute(
            select(CheckIn)
            .options(selectinload(CheckIn.user))
            .where(CheckIn.place_id == activity.place_id)
            .order_by(CheckIn.created_at.desc(), CheckIn.id.desc())
        )
        return list(result.scalars().all())
