from typing import List
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from tripboard.core.exceptions import NotFoundError
from tripboard.core.logger import logger
from tripboard.models.trips.todo import Todo
from tripboard.models.trips.trip_member import MemberRole
from tripboard.models.user.user import User
from tripboard.schemas.trip.todo import TodoCreate, TodoUpdate
from tripboard.services.access.access_control import ResourceRef, check_access


async def _get_todo(db: AsyncSession, todo_id: int) -> Todo:
    todo = await db.get(Todo, todo_id)
    if todo is None:
        raise NotFoundError("Todo not found")
    return todo


async def get_trip_todos(db: AsyncSession, current_user: User, trip_id: int) -> List[Todo]:
    await check_access(db, current_user.id, ResourceRef.trip(trip_id), MemberRole.VIEWER)

    result = await db.execute(
        select(Todo)
        .where(Todo.trip_id == trip_id)
        .order_by(Todo.created_at.desc(), Todo.id.desc())
    )
    return list(result.scalars().all())


async def create_todo(db: AsyncSession, current_user: User, data: TodoCreate) -> Todo:
    await check_access(db, current_user.id, ResourceRef.trip(data.trip_id), MemberRole.EDITOR)

    todo = Todo(trip_id=data.trip_id, title=data.title)
    db.add(todo)
    await db.commit()
    await db.refresh(todo)

    logger.info(f"Todo {todo.id} created in trip {data.trip_id} by user {current_user.id}")
    return todo


async def update_todo(db: AsyncSession, current_user: User, todo_id: int, todo_update: TodoUpdate) -> Todo:
    await check_access(db, current_user.id, ResourceRef.todo(todo_id), MemberRole.EDITOR)
    todo = await _get_todo(db, todo_id)

    for field, value in todo_update.model_dump(exclude_unset=True).items():
        setattr(todo, field, value)

    await db.commit()
    await db.refresh(todo)
    return todo


async def delete_todo(db: AsyncSession, current_user: User, todo_id: int) -> None:
    await check_access(db, current_user.id, ResourceRef.todo(todo_id), MemberRole.EDITOR)
    todo = await _get_todo(db, todo_id)

    await db.delete(todo)
    await db.commit()
    logger.info(f"Todo {todo_id} deleted by user {current_user.id}")
