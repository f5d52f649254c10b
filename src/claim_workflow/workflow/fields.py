"""Claim field groups.

Groups overlap on purpose (diagnosis fields are both draft and settlement
fields). The lifecycle and requirement tables reference these groups instead
of repeating names, so a field name is spelled exactly once.
"""


def union(*groups: tuple[str, ...]) -> tuple[str, ...]:
    """Concatenate field groups, dropping duplicates and keeping first-seen order."""
    seen: dict[str, None] = {}
    for group in groups:
        for field in group:
            seen.setdefault(field, None)
    return tuple(seen)


RELATION_FIELDS = ("client_id", "affiliate_id", "patient_id")

DRAFT_FIELDS = (
    "policy_id",
    "description",
    "care_type",
    "diagnosis_code",
    "diagnosis_description",
    "incident_date",
)

VALIDATION_EXTRA_FIELDS = ("amount_submitted", "submitted_date")

SETTLEMENT_AMOUNT_FIELDS = (
    "amount_approved",
    "amount_denied",
    "amount_unprocessed",
    "deductible_applied",
    "copay_applied",
)

SETTLEMENT_RECORD_FIELDS = ("settlement_date", "settlement_number", "settlement_notes")

SETTLEMENT_FIELDS = union(
    ("diagnosis_code", "diagnosis_description"),
    SETTLEMENT_AMOUNT_FIELDS,
    SETTLEMENT_RECORD_FIELDS,
)

# Persisted on the claim, but only ever written by a transition
REASON_FIELDS = ("pending_reason", "return_reason", "cancellation_reason")

# Not persisted on the claim at all; copied into the linked reprocess record
REPROCESS_FIELDS = ("reprocess_date", "reprocess_description")

TRANSITION_ONLY_FIELDS = union(REASON_FIELDS, REPROCESS_FIELDS)

STATUS_FIELD = "status"

CLAIM_FIELDS = union(
    RELATION_FIELDS,
    DRAFT_FIELDS,
    VALIDATION_EXTRA_FIELDS,
    SETTLEMENT_FIELDS,
    TRANSITION_ONLY_FIELDS,
)

DATE_FIELDS = ("incident_date", "submitted_date", "settlement_date")


def is_empty(value: object) -> bool:
    """A field is empty when it is None or the empty string."""
    return value is None or value == ""
