from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm import selectinload
from tripboard.core.cache import RedisCache
from tripboard.core.exceptions import ForbiddenError, NotFoundError, ValidationError
from tripboard.core.logger import logger
from tripboard.models.places.check_in import CheckIn
from tripboard.models.places.place import Place
from tripboard.models.places.review import Review
from tripboard.models.user.user import User
from tripboard.schemas.places.place import ReviewCreate
from tripboard.services.places.place_service import place_stats_key


class ReviewService:
    def __init__(self, cache: RedisCache):
        self.cache = cache

    async def _get_review(self, db: AsyncSession, review_id: int) -> Review:
        result = await db.execute(
            select(Review)
            .options(selectinload(Review.user))
            .where(Review.id == review_id)
            .execution_options(populate_existing=True)
        )
        review = result.scalar_one_or_none()
        if review is None:
            raise NotFoundError("Review not found")
        return review

    async def create_review(self, db: AsyncSession, current_user: User, review_data: ReviewCreate) -> Review:
        place = await db.get(Place, review_data.place_id)
        if place is None:
            raise NotFoundError("Place not found")

        checked_in = await db.scalar(
            select(CheckIn.id).where(
                CheckIn.place_id == place.id,
                CheckIn.user_id == current_user.id
            )
        )
        if checked_in is None:
            raise ForbiddenError("You must check in at this place before reviewing it")

        already_reviewed = await db.scalar(
            select(Review.id).where(
                Review.place_id == place.id,
                Review.user_id == current_user.id
            )
        )
        if already_reviewed is not None:
            raise ValidationError("You have already reviewed this place")

        review = Review(
            place_id=place.id,
            user_id=current_user.id,
            rating=review_data.rating,
            content=review_data.content
        )
        db.add(review)
        try:
            await db.commit()
        except IntegrityError:
            await db.rollback()
            raise ValidationError("You have already reviewed this place")

        await self.cache.delete(place_stats_key(place.id))
        logger.info(f"User {current_user.id} reviewed place {place.id} ({review.rating}/5)")
        return await self._get_review(db, review.id)

    async def delete_review(self, db: AsyncSession, current_user: User, review_id: int) -> None:
        review = await self._get_review(db, review_id)
        if review.user_id != current_user.id:
            raise ForbiddenError("You can only delete your own reviews")

        place_id = review.place_id
        await db.delete(review)
        await db.commit()
        await self.cache.delete(place_stats_key(place_id))
