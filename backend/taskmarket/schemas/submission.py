"""Pydantic schemas for Submission validation."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class FileRef(BaseModel):
    """Reference to an already stored file."""
    filename: str = Field(..., min_length=1)
    path: str = Field(..., min_length=1)
    uploaded_at: datetime = Field(default_factory=datetime.utcnow)


class SubmissionCreate(BaseModel):
    """Schema for submitting (or resubmitting) work."""
    description: Optional[str] = None
    files: List[FileRef] = Field(default_factory=list)


class SubmissionReview(BaseModel):
    """Schema for reviewing a submission.

    review_status is validated by the workflow so an unknown value surfaces as
    INVALID_REVIEW_STATUS rather than a generic validation error.
    """
    review_status: str
    review_notes: Optional[str] = None


class SubmissionResponse(BaseModel):
    id: str
    task_id: str
    worker_id: str
    files: List[FileRef]
    description: str
    submitted_at: datetime
    review_status: str
    review_notes: str
    revision_count: int

    model_config = {"from_attributes": True}
