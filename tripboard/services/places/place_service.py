from typing import List
from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm import selectinload
from tripboard.core.cache import RedisCache
from tripboard.core.config import settings
from tripboard.core.exceptions import NotFoundError
from tripboard.core.logger import logger
from tripboard.models.places.check_in import CheckIn
from tripboard.models.places.place import Place
from tripboard.models.places.review import Review
from tripboard.schemas.places.place import PlaceDetail, PlaceResponse


def place_stats_key(place_id: int) -> str:
    return RedisCache.build_key("places", "stats", place_id)


class PlaceService:
    def __init__(self, cache: RedisCache):
        self.cache = cache

    async def _get_place(self, db: AsyncSession, place_id: int) -> Place:
        place = await db.get(Place, place_id)
        if place is None:
            raise NotFoundError("Place not found")
        return place

    async def _stats(self, db: AsyncSession, place_id: int) -> dict:
        cache_key = place_stats_key(place_id)
        cached = await self.cache.get(cache_key)
        if cached:
            logger.info(f"Place {place_id} stats served from cache")
            return cached

        check_in_count = await db.scalar(
            select(func.count(CheckIn.id)).where(CheckIn.place_id == place_id)
        )
        average_rating = await db.scalar(
            select(func.avg(Review.rating)).where(Review.place_id == place_id)
        )
        stats = {
            "check_in_count": check_in_count or 0,
            "average_rating": round(float(average_rating), 2) if average_rating is not None else None,
        }
        await self.cache.set(cache_key, stats, expire=settings.PLACE_STATS_CACHE_TTL)
        return stats

    async def get_place_detail(self, db: AsyncSession, place_id: int) -> PlaceDetail:
        place = await self._get_place(db, place_id)
        stats = await self._stats(db, place_id)
        return PlaceDetail(
            **PlaceResponse.model_validate(place).model_dump(),
            **stats
        )

    async def get_place_check_ins(self, db: AsyncSession, place_id: int) -> List[CheckIn]:
        await self._get_place(db, place_id)
        result = await db.execute(
            select(CheckIn)
            .options(selectinload(CheckIn.user))
            .where(CheckIn.place_id == place_id)
            .order_by(CheckIn.created_at.desc(), CheckIn.id.desc())
        )
        return list(result.scalars().all())

    async def get_place_reviews(self, db: AsyncSession, place_id: int) -> List[Review]:
        await self._get_place(db, place_id)
        result = await db.execute(
            select(Review)
            .options(selectinload(Review.user))
            .where(Review.place_id == place_id)
            .order_by(Review.created_at.desc(), Review.id.desc())
        )
        return list(result.scalars().all())
