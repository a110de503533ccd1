from pydantic import BaseModel, Field, field_validator
from datetime import date as dt
from typing import Optional, List
from tripboard.schemas.itinerary.activity import ActivityResponse


class DayCreate(BaseModel):
    trip_id: int
    title: str = Field(min_length=1)
    date: Optional[dt] = None


class DayUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1)
    date: Optional[dt] = None

    @field_validator("title")
    @classmethod
    def title_not_null(cls, value):
        if value is None:
            raise ValueError("title cannot be null")
        return value


class DayReorder(BaseModel):
    after_day_id: Optional[int] = None
    before_day_id: Optional[int] = None


class DayResponse(BaseModel):
    id: int
    trip_id: int
    title: str
    date: Optional[dt] = None
    order_index: float

    class Config:
        from_attributes = True


class DayWithActivities(DayResponse):
    activities: List[ActivityResponse] = []
