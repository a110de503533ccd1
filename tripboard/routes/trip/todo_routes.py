from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from tripboard.core.database import get_db
from tripboard.dependencies.auth import get_current_user
from tripboard.models.user.user import User
from tripboard.schemas.trip.todo import TodoCreate, TodoUpdate, TodoResponse
from tripboard.services.trips import todo_service

router = APIRouter(prefix="/todos", tags=["Todos"])


@router.get("", response_model=List[TodoResponse])
async def get_todos_route(
    trip_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return await todo_service.get_trip_todos(db, current_user, trip_id)


@router.post("", response_model=TodoResponse, status_code=status.HTTP_201_CREATED)
async def create_todo_route(
    todo: TodoCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return await todo_service.create_todo(db, current_user, todo)


@router.patch("/{todo_id}", response_model=TodoResponse)
async def update_todo_route(
    todo_id: int,
    todo_update: TodoUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return await todo_service.update_todo(db, current_user, todo_id, todo_update)


@router.delete("/{todo_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_todo_route(
    todo_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    await todo_service.delete_todo(db, current_user, todo_id)
