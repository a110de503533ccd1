from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from tripboard.core.database import get_db
from tripboard.dependencies.auth import get_current_user
from tripboard.models.user.user import User
from tripboard.schemas.itinerary.comment import CommentCreate, CommentResponse
from tripboard.services.social import comment_service

router = APIRouter(prefix="/comments", tags=["Comments"])


@router.get("/activity/{activity_id}", response_model=List[CommentResponse])
async def list_comments(
    activity_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return await comment_service.get_activity_comments(db, current_user, activity_id)


@router.post("/activity/{activity_id}", response_model=CommentResponse, status_code=status.HTTP_201_CREATED)
async def add_comment(
    activity_id: int,
    comment: CommentCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return await comment_service.create_comment(db, current_user, activity_id, comment)


@router.delete("/{comment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_comment_route(
    comment_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    await comment_service.delete_comment(db, current_user, comment_id)
