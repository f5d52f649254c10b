"""Claim lifecycle table: editable fields, allowed transitions, non-nullable fields.

Flow::

    DRAFT -> VALIDATION -> SUBMITTED -> SETTLED
                        -> RETURNED
             SUBMITTED -> PENDING_INFO -> SUBMITTED   (reprocess loop)
    any non-terminal status -> CANCELLED

RETURNED, SETTLED and CANCELLED are terminal.
"""

from dataclasses import dataclass

from claim_workflow.models.claim import ClaimStatus
from claim_workflow.workflow.fields import (
    DRAFT_FIELDS,
    SETTLEMENT_FIELDS,
    VALIDATION_EXTRA_FIELDS,
    union,
)


@dataclass(frozen=True)
class LifecycleEntry:
    """What may happen to a claim while it sits in one status."""

    editable_fields: tuple[str, ...] = ()
    allowed_next: tuple[ClaimStatus, ...] = ()
    non_nullable_fields: tuple[str, ...] = ()


TERMINAL_STATES = frozenset(
    {ClaimStatus.RETURNED, ClaimStatus.SETTLED, ClaimStatus.CANCELLED}
)

LIFECYCLE: dict[ClaimStatus, LifecycleEntry] = {
    ClaimStatus.DRAFT: LifecycleEntry(
        editable_fields=DRAFT_FIELDS,
        allowed_next=(ClaimStatus.VALIDATION, ClaimStatus.CANCELLED),
    ),
    ClaimStatus.VALIDATION: LifecycleEntry(
        editable_fields=union(DRAFT_FIELDS, VALIDATION_EXTRA_FIELDS),
        allowed_next=(
            ClaimStatus.SUBMITTED,
            ClaimStatus.RETURNED,
            ClaimStatus.CANCELLED,
        ),
        non_nullable_fields=DRAFT_FIELDS,
    ),
    ClaimStatus.SUBMITTED: LifecycleEntry(
        editable_fields=SETTLEMENT_FIELDS,
        allowed_next=(
            ClaimStatus.PENDING_INFO,
            ClaimStatus.SETTLED,
            ClaimStatus.CANCELLED,
        ),
        non_nullable_fields=("diagnosis_code", "diagnosis_description"),
    ),
    ClaimStatus.PENDING_INFO: LifecycleEntry(
        allowed_next=(ClaimStatus.SUBMITTED, ClaimStatus.CANCELLED),
    ),
    ClaimStatus.RETURNED: LifecycleEntry(),
    ClaimStatus.SETTLED: LifecycleEntry(),
    ClaimStatus.CANCELLED: LifecycleEntry(),
}

_missing = set(ClaimStatus) - set(LIFECYCLE)
if _missing:
    raise RuntimeError(f"Lifecycle table has no entry for: {sorted(s.value for s in _missing)}")
for _status in TERMINAL_STATES:
    if LIFECYCLE[_status].editable_fields or LIFECYCLE[_status].allowed_next:
        raise RuntimeError(f"Terminal status {_status.value} must not be editable or transition")


def is_terminal(status: ClaimStatus) -> bool:
    return status in TERMINAL_STATES


def can_transition(from_status: ClaimStatus, to_status: ClaimStatus) -> bool:
    return to_status in LIFECYCLE[from_status].allowed_next


def get_editable_fields(status: ClaimStatus) -> tuple[str, ...]:
    return LIFECYCLE[status].editable_fields


def get_non_nullable_fields(status: ClaimStatus) -> tuple[str, ...]:
    return LIFECYCLE[status].non_nullable_fields


def get_allowed_transitions(status: ClaimStatus) -> tuple[ClaimStatus, ...]:
    """Statuses a claim may move to from ``status``, in display order."""
    return LIFECYCLE[status].allowed_next
