"""Application configuration management using Pydantic Settings."""

from typing import List
from decimal import Decimal
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
import json


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database
    DATABASE_URL: str = "sqlite+aiosqlite:///./taskmarket.db"

    # API
    API_V1_PREFIX: str = "/api"

    # CORS
    CORS_ORIGINS: List[str] = ['http://localhost:3000']

    # Environment
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # Payments
    PLATFORM_COMMISSION_PERCENT: Decimal = Decimal("0")  # 0-100, applied to new payments
    CURRENCY_PRECISION: Decimal = Decimal("0.01")  # Quantum for platform fee rounding

    # Workflow
    ENFORCE_TASK_CAPACITY: bool = True  # Refuse acceptances beyond number_of_workers
    DEFAULT_REJECTION_REASON: str = "Rejected by admin"

    # Identity
    ALLOW_ADMIN_SIGNUP: bool = False  # Allow POST /users with role=admin (bootstrap only)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore"
    )

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def parse_cors_origins(cls, v) -> List[str]:
        """Parse CORS_ORIGINS from JSON string to list."""
        if isinstance(v, str):
            return json.loads(v)
        return v

    @field_validator("PLATFORM_COMMISSION_PERCENT", "CURRENCY_PRECISION", mode="before")
    @classmethod
    def parse_decimal(cls, v) -> Decimal:
        """Parse string to Decimal for precise arithmetic."""
        if isinstance(v, str):
            return Decimal(v)
        return v

    @field_validator("PLATFORM_COMMISSION_PERCENT")
    @classmethod
    def validate_commission(cls, v: Decimal) -> Decimal:
        """Commission is a percentage."""
        if not Decimal("0") <= v <= Decimal("100"):
            raise ValueError("PLATFORM_COMMISSION_PERCENT must be between 0 and 100")
        return v

    @field_validator("CURRENCY_PRECISION")
    @classmethod
    def validate_precision(cls, v: Decimal) -> Decimal:
        """Money columns hold two decimal places."""
        if v <= 0 or v != v.quantize(Decimal("0.01")):
            raise ValueError("CURRENCY_PRECISION must be positive with at most 2 decimal places")
        return v


# Global settings instance
settings = Settings()
