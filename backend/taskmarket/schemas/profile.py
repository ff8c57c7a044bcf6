"""Pydantic schemas for worker and company profiles."""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field


class WorkerProfileUpdate(BaseModel):
    skills: Optional[List[str]] = None
    bio: Optional[str] = None
    availability_status: Optional[str] = Field(None, pattern="^(available|busy|unavailable)$")


class WorkerProfileResponse(BaseModel):
    user_id: str
    skills: List[str]
    bio: str
    availability_status: str
    completed_tasks: int
    rating: Decimal
    total_ratings: int
    total_earnings: Decimal
    created_at: datetime

    model_config = {"from_attributes": True}


class CompanyProfileUpdate(BaseModel):
    company_name: Optional[str] = Field(None, max_length=200)
    domain: Optional[str] = Field(None, max_length=200)
    description: Optional[str] = None
    logo: Optional[str] = Field(None, max_length=500)


class CompanyProfileResponse(BaseModel):
    user_id: str
    company_name: str
    domain: str
    description: str
    logo: str
    verification_status: str
    rating: Decimal
    total_ratings: int
    created_at: datetime

    model_config = {"from_attributes": True}


class CompanyVerify(BaseModel):
    """Admin decision on a company's verification."""
    verification_status: str = Field(..., pattern="^(pending|approved|rejected)$")


class CompanyListResponse(BaseModel):
    items: List[CompanyProfileResponse]
    total: int
    limit: int
    offset: int
