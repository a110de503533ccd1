from pydantic import BaseModel, Field, field_validator, model_validator
from typing import Optional, List
from datetime import date, datetime
from tripboard.models.trips.trip_member import MemberRole
from tripboard.schemas.itinerary.day import DayWithActivities
from tripboard.schemas.itinerary.activity import ActivityResponse
from tripboard.schemas.user.user import UserSummary


class TripBase(BaseModel):
    title: str = Field(min_length=1)
    description: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    @model_validator(mode="after")
    def check_dates(self):
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class TripCreate(TripBase):
    is_public: bool = False


class TripUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    is_public: Optional[bool] = None

    @field_validator("title", "is_public")
    @classmethod
    def not_null(cls, value):
        if value is None:
            raise ValueError("may be omitted but not null")
        return value


class TripResponse(TripBase):
    id: int
    owner_id: int
    is_public: bool
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class TripSummary(TripResponse):
    role: MemberRole


class TripDetail(TripResponse):
    role: MemberRole
    days: List[DayWithActivities] = []
    unscheduled: List[ActivityResponse] = []


class PublicTripDetail(TripResponse):
    owner: UserSummary
    days: List[DayWithActivities] = []
