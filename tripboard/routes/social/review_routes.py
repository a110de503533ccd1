from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from tripboard.core.database import get_db
from tripboard.core.redis_lifecycle import get_cache
from tripboard.dependencies.auth import get_current_user
from tripboard.models.user.user import User
from tripboard.schemas.places.place import ReviewCreate, ReviewResponse
from tripboard.services.social.review_service import ReviewService

router = APIRouter(prefix="/reviews", tags=["Reviews"])


async def get_review_service(
    cache=Depends(get_cache)
) -> ReviewService:
    return ReviewService(cache)


@router.post("", response_model=ReviewResponse, status_code=status.HTTP_201_CREATED)
async def create_review_route(
    review: ReviewCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
    review_service: ReviewService = Depends(get_review_service)
):
    return await review_service.create_review(db, current_user, review)


@router.delete("/{review_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_review_route(
    review_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
    review_service: ReviewService = Depends(get_review_service)
):
    await review_service.delete_review(db, current_user, review_id)
