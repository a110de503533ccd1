from typing import List
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm import selectinload
from tripboard.core.exceptions import ForbiddenError, NotFoundError
from tripboard.core.logger import logger
from tripboard.models.itinerary.comment import Comment
from tripboard.models.trips.trip_member import MemberRole
from tripboard.models.user.user import User
from tripboard.schemas.itinerary.comment import CommentCreate
from tripboard.services.access.access_control import ResourceRef, check_access


async def _get_comment(db: AsyncSession, comment_id: int) -> Comment:
    result = await db.execute(
        select(Comment)
        .options(selectinload(Comment.user))
        .where(Comment.id == comment_id)
        .execution_options(populate_existing=True)
    )
    comment = result.scalar_one_or_none()
    if comment is None:
        raise NotFoundError("Comment not found")
    return comment


async def get_activity_comments(db: AsyncSession, current_user: User, activity_id: int) -> List[Comment]:
    await check_access(db, current_user.id, ResourceRef.activity(activity_id), MemberRole.VIEWER)
    result = await db.execute(
        select(Comment)
        .options(selectinload(Comment.user))
        .where(Comment.activity_id == activity_id)
        .order_by(Comment.created_at, Comment.id)
    )
    return list(result.scalars().all())


async def create_comment(
    db: AsyncSession,
    current_user: User,
    activity_id: int,
    comment_data: CommentCreate
) -> Comment:
    # Any member may discuss an activity, viewers included
    await check_access(db, current_user.id, ResourceRef.activity(activity_id), MemberRole.VIEWER)

    comment = Comment(activity_id=activity_id, user_id=current_user.id, content=comment_data.content)
    db.add(comment)
    await db.commit()

    logger.info(f"User {current_user.id} commented on activity {activity_id}")
    return await _get_comment(db, comment.id)


async def delete_comment(db: AsyncSession, current_user: User, comment_id: int) -> None:
    await check_access(db, current_user.id, ResourceRef.comment(comment_id), MemberRole.VIEWER)
    comment = await _get_comment(db, comment_id)

    if comment.user_id != current_user.id:
        raise ForbiddenError("Only the author can delete this comment")

    await db.delete(comment)
    await db.commit()
