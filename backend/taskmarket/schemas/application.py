"""Pydantic schemas for Application validation."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class ApplicationCreate(BaseModel):
    """Schema for applying to a task."""
    proposal: str = Field(..., min_length=1)
    expected_delivery_time: str = Field(..., min_length=1, max_length=100)
    attachment: Optional[str] = Field(None, max_length=500, description="Stored file path")


class ApplicationResponse(BaseModel):
    id: str
    task_id: str
    worker_id: str
    proposal: str
    expected_delivery_time: str
    attachment: str
    status: str
    created_at: datetime

    model_config = {"from_attributes": True}
