"""Pydantic schemas for User validation."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class UserCreate(BaseModel):
    """Schema for registering a new user."""
    name: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., max_length=254, pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
    role: str = Field(..., pattern="^(admin|company|worker)$")


class UserStatusUpdate(BaseModel):
    status: str = Field(..., pattern="^(active|blocked)$")


class UserRoleUpdate(BaseModel):
    role: str = Field(..., pattern="^(admin|company|worker)$")


class UserResponse(BaseModel):
    """User response schema."""
    id: str
    name: str
    email: str
    role: str
    status: str
    created_at: datetime
    last_seen_at: datetime

    model_config = {"from_attributes": True}


class UserRegisterResponse(BaseModel):
    """Response when registering a new user (includes API key)."""
    user_id: str
    name: str
    role: str
    api_key: str  # ONLY shown once during registration
    created_at: datetime


class UserListResponse(BaseModel):
    items: list[UserResponse]
    total: int
    limit: int
    offset: int


class UserFilters(BaseModel):
    """Admin user listing filters."""
    role: Optional[str] = None
    status: Optional[str] = None
    search: Optional[str] = None
