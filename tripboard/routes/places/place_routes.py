from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from tripboard.core.database import get_db
from tripboard.core.redis_lifecycle import get_cache
from tripboard.dependencies.auth import get_current_user
from tripboard.models.user.user import User
from tripboard.schemas.places.place import PlaceDetail, CheckInResponse, ReviewResponse
from tripboard.services.places.place_service import PlaceService

router = APIRouter(prefix="/places", tags=["Places"])


async def get_place_service(
    cache=Depends(get_cache)
) -> PlaceService:
    return PlaceService(cache)


@router.get("/{place_id}", response_model=PlaceDetail)
async def get_place(
    place_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
    place_service: PlaceService = Depends(get_place_service)
):
    return await place_service.get_place_detail(db, place_id)


@router.get("/{place_id}/checkins", response_model=List[CheckInResponse])
async def get_place_check_ins(
    place_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
    place_service: PlaceService = Depends(get_place_service)
):
    return await place_service.get_place_check_ins(db, place_id)


@router.get("/{place_id}/reviews", response_model=List[ReviewResponse])
async def get_place_reviews(
    place_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
    place_service: PlaceService = Depends(get_place_service)
):
    return await place_service.get_place_reviews(db, place_id)
