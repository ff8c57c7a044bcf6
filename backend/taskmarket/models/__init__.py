"""Database models package."""

from taskmarket.models.user import User, UserRole, UserStatus
from taskmarket.models.task import Task, TaskStatus
from taskmarket.models.application import Application, ApplicationStatus
from taskmarket.models.submission import Submission, ReviewStatus
from taskmarket.models.payment import Payment, PaymentStatus, EscrowStatus
from taskmarket.models.profile import (
    WorkerProfile,
    CompanyProfile,
    AvailabilityStatus,
    VerificationStatus,
)
from taskmarket.models.activity_log import ActivityLog

__all__ = [
    "User",
    "UserRole",
    "UserStatus",
    "Task",
    "TaskStatus",
    "Application",
    "ApplicationStatus",
    "Submission",
    "ReviewStatus",
    "Payment",
    "PaymentStatus",
    "EscrowStatus",
    "WorkerProfile",
    "CompanyProfile",
    "AvailabilityStatus",
    "VerificationStatus",
    "ActivityLog",
]
