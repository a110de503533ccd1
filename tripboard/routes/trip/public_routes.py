from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from tripboard.schemas.trip.trip_schema import PublicTripDetail
from tripboard.core.database import get_db
from tripboard.services.trips import trip_service

# Read-only sharing links; no authentication.
router = APIRouter(prefix="/public", tags=["Public"])


@router.get("/trips/{trip_id}", response_model=PublicTripDetail)
async def get_public_trip(
    trip_id: int,
    db: AsyncSession = Depends(get_db)
):
    return await trip_service.get_public_trip_detail(db, trip_id)
