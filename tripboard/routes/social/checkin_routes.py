from typing import List
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from tripboard.core.database import get_db
from tripboard.core.redis_lifecycle import get_cache
from tripboard.dependencies.auth import get_current_user
from tripboard.models.user.user import User
from tripboard.schemas.places.place import CheckInCreate, CheckInResponse
from tripboard.services.social.checkin_service import CheckInService

router = APIRouter(prefix="/checkins", tags=["Check-ins"])


async def get_checkin_service(
    cache=Depends(get_cache)
) -> CheckInService:
    return CheckInService(cache)


@router.post("", response_model=CheckInResponse, status_code=status.HTTP_201_CREATED)
async def check_in_route(
    payload: CheckInCreate,
    response: Response,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
    checkin_service: CheckInService = Depends(get_checkin_service)
):
    check_in, created = await checkin_service.check_in(db, current_user, payload.activity_id)
    if not created:
        response.status_code = status.HTTP_200_OK
    return check_in


@router.get("/activity/{activity_id}", response_model=List[CheckInResponse])
async def list_activity_check_ins(
    activity_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
    checkin_service: CheckInService = Depends(get_checkin_service)
):
    return await checkin_service.get_activity_check_ins(db, current_user, activity_id)
