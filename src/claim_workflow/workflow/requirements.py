"""Entry requirements, transition requirements, and per-status invariants."""

from dataclasses import dataclass
from typing import Union

from claim_workflow.models.claim import ClaimStatus
from claim_workflow.workflow.fields import (
    DRAFT_FIELDS,
    RELATION_FIELDS,
    SETTLEMENT_AMOUNT_FIELDS,
    SETTLEMENT_RECORD_FIELDS,
    VALIDATION_EXTRA_FIELDS,
    union,
)

# Wildcard "from" status for transitions keyed only on their target
ANY_STATUS = "*"

TransitionKey = tuple[Union[ClaimStatus, str], ClaimStatus]


@dataclass(frozen=True)
class TransitionRequirement:
    """Extra fields one (from, to) edge needs, plus the side effects it signals."""

    fields: tuple[str, ...]
    creates_linked_record: bool = False
    recomputes_derived_duration: bool = False


_IDENTIFIED = union(RELATION_FIELDS, ("policy_id",), DRAFT_FIELDS)
_PRESENTED = union(_IDENTIFIED, VALIDATION_EXTRA_FIELDS)

# Fields that must already hold a value to enter a status
ENTRY_REQUIREMENTS: dict[ClaimStatus, tuple[str, ...]] = {
    ClaimStatus.VALIDATION: _IDENTIFIED,
    ClaimStatus.SUBMITTED: VALIDATION_EXTRA_FIELDS,
    ClaimStatus.SETTLED: union(SETTLEMENT_AMOUNT_FIELDS, SETTLEMENT_RECORD_FIELDS),
}

TRANSITION_REQUIREMENTS: dict[TransitionKey, TransitionRequirement] = {
    (ClaimStatus.SUBMITTED, ClaimStatus.PENDING_INFO): TransitionRequirement(
        fields=("pending_reason",),
    ),
    (ClaimStatus.PENDING_INFO, ClaimStatus.SUBMITTED): TransitionRequirement(
        fields=("reprocess_date", "reprocess_description"),
        creates_linked_record=True,
        recomputes_derived_duration=True,
    ),
    (ClaimStatus.VALIDATION, ClaimStatus.RETURNED): TransitionRequirement(
        fields=("return_reason",),
    ),
    (ANY_STATUS, ClaimStatus.CANCELLED): TransitionRequirement(
        fields=("cancellation_reason",),
    ),
}

# Fields that must hold a value for as long as the claim is in a status
STATE_INVARIANTS: dict[ClaimStatus, tuple[str, ...]] = {
    ClaimStatus.DRAFT: RELATION_FIELDS,
    ClaimStatus.VALIDATION: _IDENTIFIED,
    ClaimStatus.SUBMITTED: _PRESENTED,
    ClaimStatus.PENDING_INFO: union(_PRESENTED, ("pending_reason",)),
    ClaimStatus.RETURNED: union(_IDENTIFIED, ("return_reason",)),
    ClaimStatus.SETTLED: union(
        _PRESENTED, SETTLEMENT_AMOUNT_FIELDS, SETTLEMENT_RECORD_FIELDS
    ),
    ClaimStatus.CANCELLED: ("cancellation_reason",),
}

_NO_REQUIREMENT = TransitionRequirement(fields=())


def get_transition_requirement(
    from_status: ClaimStatus, to_status: ClaimStatus
) -> TransitionRequirement:
    """Resolve the single requirement source for an edge.

    The exact (from, to) pair wins; otherwise a move to CANCELLED uses the
    wildcard rule; otherwise the target's entry requirements apply. Sources
    are never combined.
    """
    special = TRANSITION_REQUIREMENTS.get((from_status, to_status))
    if special is not None:
        return special
    if to_status == ClaimStatus.CANCELLED:
        return TRANSITION_REQUIREMENTS.get((ANY_STATUS, ClaimStatus.CANCELLED), _NO_REQUIREMENT)
    entry = ENTRY_REQUIREMENTS.get(to_status)
    if entry is None:
        return _NO_REQUIREMENT
    return TransitionRequirement(fields=entry)


def get_transition_requirements(
    from_status: ClaimStatus, to_status: ClaimStatus
) -> tuple[str, ...]:
    return get_transition_requirement(from_status, to_status).fields


def get_state_invariants(status: ClaimStatus) -> tuple[str, ...]:
    return STATE_INVARIANTS[status]
