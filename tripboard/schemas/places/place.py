from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional
from tripboard.schemas.user.user import UserSummary


class PlaceResponse(BaseModel):
    id: int
    name: str
    latitude: float
    longitude: float
    address: Optional[str] = None
    external_id: Optional[str] = None
    provider: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class PlaceDetail(PlaceResponse):
    check_in_count: int
    average_rating: Optional[float] = None


class CheckInCreate(BaseModel):
    activity_id: int


class CheckInResponse(BaseModel):
    id: int
    place_id: int
    user_id: int
    activity_id: Optional[int] = None
    created_at: datetime
    user: UserSummary

    model_config = {"from_attributes": True}


class ReviewCreate(BaseModel):
    place_id: int
    rating: int = Field(ge=1, le=5)
    content: str = Field(min_length=1)


class ReviewResponse(BaseModel):
    id: int
    place_id: int
    user_id: int
    rating: int
    content: str
    created_at: datetime
    user: UserSummary

    model_config = {"from_attributes": True}
