from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from tripboard.schemas.user.user import UserCreate, UserLogin, UserOut, TokenResponse
from tripboard.services.auth import auth as auth_service
from tripboard.core.database import get_db

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post("/register", response_model=UserOut, status_code=status.HTTP_201_CREATED)
async def register(
    user: UserCreate,
    db: AsyncSession = Depends(get_db)
):
    return await auth_service.register_user(user, db)


@router.post("/login", response_model=TokenResponse)
async def login_route(
    user_data: UserLogin,
    db: AsyncSession = Depends(get_db)
):
    return await auth_service.login_user(user_data.email, user_data.password, db)
