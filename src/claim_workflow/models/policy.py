"""Pydantic models for the policy lifecycle."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class PolicyStatus(str, Enum):
    """Lifecycle state of an insurance policy."""

    PENDING = "PENDING"
    ACTIVE = "ACTIVE"
    EXPIRED = "EXPIRED"
    CANCELLED = "CANCELLED"


class PolicyValidationResult(BaseModel):
    """Outcome of a policy update validation."""

    model_config = ConfigDict(frozen=True)

    valid: bool = Field(..., description="Whether the update may be persisted")
    error: Optional[str] = Field(default=None, description="User-facing rejection message")
    error_code: Optional[str] = Field(default=None, description="Error taxonomy name")
    create_expiration: bool = Field(
        default=False, description="Caller must record an expiration (ACTIVE -> EXPIRED)"
    )
