"""Pydantic schemas package."""

from taskmarket.schemas.user import (
    UserCreate,
    UserStatusUpdate,
    UserRoleUpdate,
    UserResponse,
    UserRegisterResponse,
    UserListResponse,
    UserFilters,
)
from taskmarket.schemas.task import (
    TaskCreate,
    TaskUpdate,
    TaskReject,
    TaskFilters,
    TaskResponse,
    WorkerTaskResponse,
    TaskListResponse,
)
from taskmarket.schemas.application import ApplicationCreate, ApplicationResponse
from taskmarket.schemas.submission import (
    FileRef,
    SubmissionCreate,
    SubmissionReview,
    SubmissionResponse,
)
from taskmarket.schemas.payment import (
    PaymentConfirm,
    PaymentAdjust,
    PaymentResponse,
    EarningsResponse,
)
from taskmarket.schemas.profile import (
    WorkerProfileUpdate,
    WorkerProfileResponse,
    CompanyProfileUpdate,
    CompanyProfileResponse,
    CompanyVerify,
    CompanyListResponse,
)

__all__ = [
    # User schemas
    "UserCreate",
    "UserStatusUpdate",
    "UserRoleUpdate",
    "UserResponse",
    "UserRegisterResponse",
    "UserListResponse",
    "UserFilters",
    # Task schemas
    "TaskCreate",
    "TaskUpdate",
    "TaskReject",
    "TaskFilters",
    "TaskResponse",
    "WorkerTaskResponse",
    "TaskListResponse",
    # Application schemas
    "ApplicationCreate",
    "ApplicationResponse",
    # Submission schemas
    "FileRef",
    "SubmissionCreate",
    "SubmissionReview",
    "SubmissionResponse",
    # Payment schemas
    "PaymentConfirm",
    "PaymentAdjust",
    "PaymentResponse",
    "EarningsResponse",
    # Profile schemas
    "WorkerProfileUpdate",
    "WorkerProfileResponse",
    "CompanyProfileUpdate",
    "CompanyProfileResponse",
    "CompanyVerify",
    "CompanyListResponse",
]
