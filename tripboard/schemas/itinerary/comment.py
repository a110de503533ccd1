from pydantic import BaseModel, Field
from datetime import datetime
from tripboard.schemas.user.user import UserSummary


class CommentCreate(BaseModel):
    content: str = Field(min_length=1)


class CommentResponse(BaseModel):
    id: int
    activity_id: int
    user_id: int
    content: str
    created_at: datetime
    user: UserSummary

    model_config = {"from_attributes": True}
