"""Claim and policy workflow validation."""

from claim_workflow.workflow.engine import split_updates, validate, validate_or_raise
from claim_workflow.workflow.errors import (
    ClaimWorkflowError,
    ClearedRequiredFields,
    DateOrderingViolation,
    FinancialReconciliationMismatch,
    ForbiddenFields,
    IllegalTransition,
    MissingTransitionRequirements,
    PermissionDenied,
    ViolatedInvariants,
)
from claim_workflow.workflow.lifecycle import (
    TERMINAL_STATES,
    can_transition,
    get_allowed_transitions,
    get_editable_fields,
    get_non_nullable_fields,
    is_terminal,
)
from claim_workflow.workflow.permissions import can_edit
from claim_workflow.workflow.policy import validate_policy_update
from claim_workflow.workflow.requirements import (
    get_state_invariants,
    get_transition_requirement,
    get_transition_requirements,
)

__all__ = [
    # Engine
    "split_updates",
    "validate",
    "validate_or_raise",
    "validate_policy_update",
    # Errors
    "ClaimWorkflowError",
    "ClearedRequiredFields",
    "DateOrderingViolation",
    "FinancialReconciliationMismatch",
    "ForbiddenFields",
    "IllegalTransition",
    "MissingTransitionRequirements",
    "PermissionDenied",
    "ViolatedInvariants",
    # Tables
    "TERMINAL_STATES",
    "can_edit",
    "can_transition",
    "get_allowed_transitions",
    "get_editable_fields",
    "get_non_nullable_fields",
    "get_state_invariants",
    "get_transition_requirement",
    "get_transition_requirements",
    "is_terminal",
]
