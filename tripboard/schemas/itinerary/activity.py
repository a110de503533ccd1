from pydantic import BaseModel, Field, field_validator
from datetime import datetime
from typing import Optional


class ActivityCreate(BaseModel):
    trip_id: int
    day_id: Optional[int] = None  # None = unscheduled pool
    title: str = Field(min_length=1)
    description: Optional[str] = None
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)
    address: Optional[str] = None
    start_time: Optional[str] = None
    category_id: Optional[int] = None
    google_place_id: Optional[str] = None
    external_place_id: Optional[str] = None
    place_provider: Optional[str] = None


class ActivityUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    start_time: Optional[str] = None
    address: Optional[str] = None
    latitude: Optional[float] = Field(default=None, ge=-90, le=90)
    longitude: Optional[float] = Field(default=None, ge=-180, le=180)
    google_place_id: Optional[str] = None
    category_id: Optional[int] = None

    @field_validator("title", "latitude", "longitude")
    @classmethod
    def not_null(cls, value):
        # The columns are NOT NULL; leave the field out instead.
        if value is None:
            raise ValueError("may be omitted but not null")
        return value


class ActivityReorder(BaseModel):
    activity_id: int
    after_activity_id: Optional[int] = None
    before_activity_id: Optional[int] = None


class ActivityAssign(BaseModel):
    day_id: Optional[int] = None  # None = move back to the unscheduled pool


class ActivityResponse(BaseModel):
    id: int
    trip_id: int
    day_id: Optional[int] = None
    title: str
    description: Optional[str] = None
    order_index: float
    latitude: float
    longitude: float
    address: Optional[str] = None
    start_time: Optional[str] = None
    place_id: Optional[int] = None
    google_place_id: Optional[str] = None
    category_id: Optional[int] = None
    created_by_id: Optional[int] = None
    created_at: datetime

    class Config:
        from_attributes = True
