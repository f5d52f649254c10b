"""Policy lifecycle: a plain transition graph with field-level edit rules.

Flow::

    PENDING -> ACTIVE <-> EXPIRED   (payment toggles activity)
    any non-terminal status -> CANCELLED (terminal)
"""

import logging
from typing import Any, Mapping

from claim_workflow.models.policy import PolicyStatus, PolicyValidationResult
from claim_workflow.utils.dates import to_date
from claim_workflow.workflow.errors import (
    ClaimWorkflowError,
    ClearedRequiredFields,
    DateOrderingViolation,
    ForbiddenFields,
    IllegalTransition,
    MissingTransitionRequirements,
    PermissionDenied,
    ViolatedInvariants,
)
from claim_workflow.workflow.fields import STATUS_FIELD, is_empty, union
from claim_workflow.workflow.requirements import ANY_STATUS

logger = logging.getLogger(__name__)

POLICY_TRANSITIONS: dict[PolicyStatus, tuple[PolicyStatus, ...]] = {
    PolicyStatus.PENDING: (PolicyStatus.ACTIVE, PolicyStatus.CANCELLED),
    PolicyStatus.ACTIVE: (PolicyStatus.EXPIRED, PolicyStatus.CANCELLED),
    PolicyStatus.EXPIRED: (PolicyStatus.ACTIVE, PolicyStatus.CANCELLED),
    PolicyStatus.CANCELLED: (),
}

POLICY_TERMINAL_STATES = frozenset({PolicyStatus.CANCELLED})

# Only editable while PENDING
POLICY_REQUIRED_FIELDS = ("policy_number", "start_date", "end_date")

# Editable in any non-terminal status
POLICY_OPTIONAL_FIELDS = (
    "type",
    "amb_copay",
    "hosp_copay",
    "maternity",
    "t_premium",
    "tplus1_premium",
    "tplusf_premium",
    "benefits_cost",
)

POLICY_ACTIVATION_FIELDS = union(POLICY_REQUIRED_FIELDS, POLICY_OPTIONAL_FIELDS)

POLICY_TRANSITION_ONLY_FIELDS = ("expiration_reason", "cancellation_reason")

POLICY_TRANSITION_REQUIREMENTS: dict[tuple[Any, PolicyStatus], tuple[str, ...]] = {
    (PolicyStatus.PENDING, PolicyStatus.ACTIVE): POLICY_ACTIVATION_FIELDS,
    (PolicyStatus.ACTIVE, PolicyStatus.EXPIRED): ("expiration_reason",),
    (ANY_STATUS, PolicyStatus.CANCELLED): ("cancellation_reason",),
}

POLICY_STATE_INVARIANTS: dict[PolicyStatus, tuple[str, ...]] = {
    PolicyStatus.PENDING: (),
    PolicyStatus.ACTIVE: POLICY_ACTIVATION_FIELDS,
    PolicyStatus.EXPIRED: POLICY_ACTIVATION_FIELDS,
    PolicyStatus.CANCELLED: (),
}


def _coerce(value: Any) -> PolicyStatus | None:
    if isinstance(value, PolicyStatus):
        return value
    try:
        return PolicyStatus(value)
    except ValueError:
        return None


def is_policy_terminal(status: PolicyStatus) -> bool:
    return status in POLICY_TERMINAL_STATES


def can_policy_transition(from_status: PolicyStatus, to_status: PolicyStatus) -> bool:
    return to_status in POLICY_TRANSITIONS[from_status]


def get_allowed_policy_transitions(status: PolicyStatus) -> tuple[PolicyStatus, ...]:
    return POLICY_TRANSITIONS[status]


def get_policy_editable_fields(status: PolicyStatus) -> tuple[str, ...]:
    if is_policy_terminal(status):
        return ()
    if status == PolicyStatus.PENDING:
        return POLICY_ACTIVATION_FIELDS
    return POLICY_OPTIONAL_FIELDS


def get_policy_transition_requirements(
    from_status: PolicyStatus, to_status: PolicyStatus
) -> tuple[str, ...]:
    if to_status == PolicyStatus.CANCELLED:
        return POLICY_TRANSITION_REQUIREMENTS[(ANY_STATUS, PolicyStatus.CANCELLED)]
    return POLICY_TRANSITION_REQUIREMENTS.get((from_status, to_status), ())


def _run_policy_gates(
    current: Mapping[str, Any], updates: Mapping[str, Any]
) -> PolicyValidationResult:
    raw_status = current.get(STATUS_FIELD)
    status = _coerce(raw_status)
    if status is None or is_policy_terminal(status):
        raise PermissionDenied(status if status is not None else raw_status, entity="policies")

    field_updates = {
        k: v
        for k, v in updates.items()
        if k != STATUS_FIELD and k not in POLICY_TRANSITION_ONLY_FIELDS
    }
    attempted = list(field_updates)
    editable = get_policy_editable_fields(status)
    forbidden = [f for f in attempted if f not in editable]
    if forbidden:
        raise ForbiddenFields(status, forbidden)

    merged = {**current, **field_updates}
    start = to_date(merged.get("start_date"))
    end = to_date(merged.get("end_date"))
    if start is not None and end is not None and end < start:
        raise DateOrderingViolation(
            "end_not_before_start",
            f"End date ({end.isoformat()}) must be on or after the start date "
            f"({start.isoformat()})",
            (end, start),
        )

    invariants = POLICY_STATE_INVARIANTS[status]
    cleared = [f for f in attempted if f in invariants and is_empty(field_updates[f])]
    if cleared:
        raise ClearedRequiredFields(cleared)
    broken = [f for f in invariants if is_empty(merged.get(f))]
    if broken:
        raise ViolatedInvariants(broken)

    raw_target = updates.get(STATUS_FIELD)
    target = _coerce(raw_target)
    if is_empty(raw_target) or target == status:
        return PolicyValidationResult(valid=True)
    if target is None or not can_policy_transition(status, target):
        raise IllegalTransition(status, target if target is not None else raw_target)

    source = {**merged}
    for key in POLICY_TRANSITION_ONLY_FIELDS:
        if key in updates:
            source[key] = updates[key]
    missing = [
        f for f in get_policy_transition_requirements(status, target) if is_empty(source.get(f))
    ]
    if missing:
        raise MissingTransitionRequirements(status, target, missing)

    return PolicyValidationResult(
        valid=True,
        create_expiration=(status == PolicyStatus.ACTIVE and target == PolicyStatus.EXPIRED),
    )


def validate_policy_update(
    current: Mapping[str, Any], updates: Mapping[str, Any]
) -> PolicyValidationResult:
    """Validate a partial policy update. Same contract as the claim engine, minus roles."""
    try:
        return _run_policy_gates(current, updates)
    except ClaimWorkflowError as exc:
        logger.debug("Policy update rejected (%s): %s", exc.code, exc)
        return PolicyValidationResult(valid=False, error=str(exc), error_code=exc.code)
