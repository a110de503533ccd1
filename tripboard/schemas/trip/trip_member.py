from pydantic import BaseModel
from datetime import datetime
from typing import List, Literal
from tripboard.models.trips.trip_member import MemberRole
from tripboard.schemas.user.user import UserSummary


class TripMemberOut(BaseModel):
    id: int
    trip_id: int
    user_id: int
    user: UserSummary
    role: MemberRole
    joined_at: datetime

    model_config = {
        "from_attributes": True
    }


class TripMemberResponse(BaseModel):
    members: List[TripMemberOut]


class MemberRoleUpdate(BaseModel):
    # owner is never assignable; ownership is fixed for the trip's lifetime
    role: Literal["viewer", "editor"]
