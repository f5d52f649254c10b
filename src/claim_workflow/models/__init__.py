"""Pydantic models for claims and policies."""

from claim_workflow.models.claim import (
    CareType,
    ClaimCreate,
    ClaimStatus,
    ClaimUpdate,
    ReprocessPayload,
    Role,
    ValidationResult,
)
from claim_workflow.models.policy import PolicyStatus, PolicyValidationResult

__all__ = [
    "CareType",
    "ClaimCreate",
    "ClaimStatus",
    "ClaimUpdate",
    "PolicyStatus",
    "PolicyValidationResult",
    "ReprocessPayload",
    "Role",
    "ValidationResult",
]
