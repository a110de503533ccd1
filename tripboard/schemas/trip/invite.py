from pydantic import BaseModel, EmailStr
from datetime import datetime
from typing import Literal, Optional
from tripboard.models.trips.trip_member import MemberRole
from tripboard.models.trips.trip_invite import InviteStatus
from tripboard.schemas.user.user import UserSummary


class TripInviteCreate(BaseModel):
    email: EmailStr
    role: Literal["viewer", "editor"] = "viewer"


class TripInviteResponse(BaseModel):
    id: int
    trip_id: int
    role: MemberRole
    status: InviteStatus
    created_at: datetime
    responded_at: Optional[datetime] = None
    invited_user: UserSummary
    invited_by: UserSummary

    model_config = {"from_attributes": True}
