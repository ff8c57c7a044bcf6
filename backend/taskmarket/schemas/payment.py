"""Pydantic schemas for Payment validation."""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field


class PaymentConfirm(BaseModel):
    """Schema for a company confirming it paid the worker."""
    proof: Optional[str] = Field(None, max_length=500, description="Stored file path of the payment proof")
    transaction_id: Optional[str] = Field(None, max_length=200)


class PaymentAdjust(BaseModel):
    """Admin correction of a pending payment."""
    amount: Optional[Decimal] = Field(None, ge=0, decimal_places=2)
    platform_commission: Optional[Decimal] = Field(None, ge=0, le=100, decimal_places=2)


class PaymentResponse(BaseModel):
    id: str
    task_id: str
    submission_id: str
    worker_id: str
    company_id: str
    amount: Decimal
    platform_commission: Decimal
    platform_fee: Decimal
    worker_payout: Decimal
    status: str
    proof: str
    transaction_id: str
    payment_method: str
    escrow_status: str
    created_at: datetime
    confirmed_at: Optional[datetime]

    model_config = {"from_attributes": True}


class EarningsResponse(BaseModel):
    """Worker earnings summary."""
    total_earnings: Decimal
    total_pending: Decimal
    total_earned: Decimal
    completed_tasks: int
    payments: List[PaymentResponse]
