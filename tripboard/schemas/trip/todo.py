from pydantic import BaseModel, Field, field_validator
from datetime import datetime
from typing import Optional


class TodoCreate(BaseModel):
    trip_id: int
    title: str = Field(min_length=1, max_length=500)


class TodoUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=500)
    is_completed: Optional[bool] = None

    @field_validator("title", "is_completed")
    @classmethod
    def not_null(cls, value):
        if value is None:
            raise ValueError("may be omitted but not null")
        return value


class TodoResponse(BaseModel):
    id: int
    trip_id: int
    title: str
    is_completed: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
