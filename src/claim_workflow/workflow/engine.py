"""Claim workflow validation engine.

``validate`` decides whether a partial update to a claim is legal for the
caller's role and, when it changes status, which side effects the caller has
to perform. It is a pure function: it reads only its arguments, never mutates
them, and performs no I/O, so it is safe to call concurrently.

Gates run in a fixed order and the first failure wins:

1. permission (role vs. current status)
2. editable fields
3. non-nullable fields
4. state invariants on the merged record
5. business rules (date ordering, financial reconciliation)
6. transition graph and transition requirements
"""

import logging
from typing import Any, Mapping, Optional, Union

from claim_workflow.models.claim import ClaimStatus, ReprocessPayload, Role, ValidationResult
from claim_workflow.workflow.errors import (
    ClaimWorkflowError,
    ClearedRequiredFields,
    ForbiddenFields,
    IllegalTransition,
    MissingTransitionRequirements,
    PermissionDenied,
    ViolatedInvariants,
)
from claim_workflow.workflow.fields import (
    REPROCESS_FIELDS,
    STATUS_FIELD,
    TRANSITION_ONLY_FIELDS,
    is_empty,
)
from claim_workflow.workflow.lifecycle import (
    can_transition,
    get_editable_fields,
    get_non_nullable_fields,
)
from claim_workflow.workflow.permissions import can_edit
from claim_workflow.workflow.requirements import (
    get_state_invariants,
    get_transition_requirement,
)
from claim_workflow.workflow.rules import check_business_rules

logger = logging.getLogger(__name__)


def _coerce_status(value: Any) -> Optional[ClaimStatus]:
    if isinstance(value, ClaimStatus):
        return value
    try:
        return ClaimStatus(value)
    except ValueError:
        return None


def split_updates(updates: Mapping[str, Any]) -> tuple[dict[str, Any], dict[str, Any]]:
    """Separate persisted field updates from transition-only fields.

    ``status`` goes to neither side.
    """
    field_updates: dict[str, Any] = {}
    transition_fields: dict[str, Any] = {}
    for key, value in updates.items():
        if key == STATUS_FIELD:
            continue
        if key in TRANSITION_ONLY_FIELDS:
            transition_fields[key] = value
        else:
            field_updates[key] = value
    return field_updates, transition_fields


def _check_permission(role: Union[Role, str, None], status: Optional[ClaimStatus], raw: Any) -> None:
    if status is None or not can_edit(role, status):
        raise PermissionDenied(status if status is not None else raw)


def _check_editable(status: ClaimStatus, attempted: list[str]) -> None:
    editable = get_editable_fields(status)
    forbidden = [f for f in attempted if f not in editable]
    if forbidden:
        raise ForbiddenFields(status, forbidden)


def _check_non_nullable(
    status: ClaimStatus, attempted: list[str], field_updates: Mapping[str, Any]
) -> None:
    non_nullable = get_non_nullable_fields(status)
    cleared = [f for f in attempted if f in non_nullable and is_empty(field_updates[f])]
    if cleared:
        raise ClearedRequiredFields(cleared)


def _check_invariants(status: ClaimStatus, merged: Mapping[str, Any]) -> None:
    violated = [f for f in get_state_invariants(status) if is_empty(merged.get(f))]
    if violated:
        raise ViolatedInvariants(violated)


def _check_transition(
    status: ClaimStatus,
    raw_target: Any,
    merged: Mapping[str, Any],
    transition_fields: Mapping[str, Any],
) -> ValidationResult:
    target = _coerce_status(raw_target)
    if target is None or not can_transition(status, target):
        raise IllegalTransition(status, target if target is not None else raw_target)

    requirement = get_transition_requirement(status, target)
    source = {**merged, **transition_fields}
    missing = [f for f in requirement.fields if is_empty(source.get(f))]
    if missing:
        raise MissingTransitionRequirements(status, target, missing)

    payload = None
    if requirement.creates_linked_record:
        payload = ReprocessPayload(**{f: transition_fields.get(f) for f in REPROCESS_FIELDS})
    return ValidationResult(
        valid=True,
        create_linked_record=requirement.creates_linked_record,
        recompute_derived_duration=requirement.recomputes_derived_duration,
        linked_record_payload=payload,
    )


def _run_gates(
    current: Mapping[str, Any],
    updates: Mapping[str, Any],
    role: Union[Role, str, None],
) -> ValidationResult:
    raw_status = current.get(STATUS_FIELD)
    status = _coerce_status(raw_status)
    _check_permission(role, status, raw_status)

    field_updates, transition_fields = split_updates(updates)
    attempted = list(field_updates)

    _check_editable(status, attempted)
    _check_non_nullable(status, attempted, field_updates)

    merged = {**current, **field_updates}
    _check_invariants(status, merged)
    check_business_rules(merged)

    raw_target = updates.get(STATUS_FIELD)
    if is_empty(raw_target) or _coerce_status(raw_target) == status:
        return ValidationResult(valid=True)
    return _check_transition(status, raw_target, merged, transition_fields)


def validate(
    current: Mapping[str, Any],
    updates: Mapping[str, Any],
    role: Union[Role, str, None],
) -> ValidationResult:
    """Validate a proposed partial update against the claim workflow.

    Args:
        current: The persisted claim as a flat mapping, including ``status``.
        updates: Only the keys the caller intends to change. May include
            ``status`` and transition-only fields such as ``cancellation_reason``
            or ``reprocess_date``. A key set to None or "" is an intentional clear.
        role: The caller's role (Role or its string value).

    Returns:
        ValidationResult. On failure ``error`` holds a user-facing message and
        ``error_code`` the error class name. On success the side-effect flags
        tell the caller what else to persist in the same transaction.
    """
    try:
        return _run_gates(current, updates, role)
    except ClaimWorkflowError as exc:
        logger.debug("Claim update rejected (%s): %s", exc.code, exc)
        return ValidationResult(valid=False, error=str(exc), error_code=exc.code)


def validate_or_raise(
    current: Mapping[str, Any],
    updates: Mapping[str, Any],
    role: Union[Role, str, None],
) -> ValidationResult:
    """Like ``validate`` but raises the ClaimWorkflowError instead of returning it."""
    return _run_gates(current, updates, role)
