"""Claim workflow validation: lifecycle rules for claims and policies."""

from claim_workflow.models import ClaimStatus, PolicyStatus, Role, ValidationResult
from claim_workflow.workflow import validate, validate_or_raise, validate_policy_update

__all__ = [
    "ClaimStatus",
    "PolicyStatus",
    "Role",
    "ValidationResult",
    "validate",
    "validate_or_raise",
    "validate_policy_update",
]
