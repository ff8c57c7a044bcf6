"""Pydantic schemas for Task validation."""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field


class TaskCreate(BaseModel):
    """Schema for posting a new task. Any client-supplied status is ignored."""
    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1)
    required_skills: List[str] = Field(default_factory=list)
    category: str = Field(default="General", min_length=1, max_length=100)
    duration: int = Field(default=1, ge=1, le=3, description="Expected duration in days")
    payment_amount: Decimal = Field(..., ge=0, decimal_places=2)
    deadline: datetime
    number_of_workers: int = Field(default=1, ge=1)


class TaskUpdate(BaseModel):
    """Partial task update; absent or null fields leave the task unchanged."""
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, min_length=1)
    required_skills: Optional[List[str]] = None
    category: Optional[str] = Field(None, min_length=1, max_length=100)
    duration: Optional[int] = Field(None, ge=1, le=3)
    payment_amount: Optional[Decimal] = Field(None, ge=0, decimal_places=2)
    deadline: Optional[datetime] = None
    number_of_workers: Optional[int] = Field(None, ge=1)


class TaskReject(BaseModel):
    reason: Optional[str] = None


class TaskFilters(BaseModel):
    """Discovery filters. `status` defaults to open for public and worker browsing."""
    status: Optional[str] = "open"
    skills: List[str] = Field(default_factory=list)
    category: Optional[str] = None
    min_payment: Optional[Decimal] = None
    max_payment: Optional[Decimal] = None
    duration: Optional[int] = None
    search: Optional[str] = None
    company_id: Optional[str] = None


class TaskResponse(BaseModel):
    """Full task response schema."""
    id: str
    company_id: str
    title: str
    description: str
    required_skills: List[str]
    category: str
    duration: int
    payment_amount: Decimal
    deadline: datetime
    number_of_workers: int
    assigned_workers: List[str]
    status: str
    rejection_reason: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class WorkerTaskResponse(TaskResponse):
    """Task detail as seen by a worker."""
    has_applied: bool = False


class TaskListResponse(BaseModel):
    items: List[TaskResponse]
    total: int
    limit: int
    offset: int
