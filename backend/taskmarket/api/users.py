"""Users API router: registration and the caller's own account."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from taskmarket.database import get_db
from taskmarket.api.deps import get_current_user
from taskmarket.models.user import User
from taskmarket.schemas.user import UserCreate, UserResponse, UserRegisterResponse
from taskmarket.services.user_service import create_user

router = APIRouter()


@router.post("", response_model=UserRegisterResponse, status_code=status.HTTP_201_CREATED)
async def register_user(
    user_data: UserCreate,
    db: AsyncSession = Depends(get_db)
):
    """
    Register a new company or worker (public endpoint).

    Returns the API key ONLY ONCE - save it securely!
    """
    user, api_key = await create_user(db, user_data)

    return UserRegisterResponse(
        user_id=user.id,
        name=user.name,
        role=user.role,
        api_key=api_key,
        created_at=user.created_at
    )


@router.get("/me", response_model=UserResponse)
async def get_me(current_user: User = Depends(get_current_user)):
    """Get the authenticated user's account."""
    return current_user
