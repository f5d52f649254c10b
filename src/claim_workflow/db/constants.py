"""Claim table columns and audit actions."""

from claim_workflow.workflow.fields import (
    DRAFT_FIELDS,
    REASON_FIELDS,
    RELATION_FIELDS,
    SETTLEMENT_FIELDS,
    VALIDATION_EXTRA_FIELDS,
    union,
)

# Columns a validated update may write (transition-only reprocess fields go elsewhere)
CLAIM_WRITABLE_COLUMNS = union(
    ("status",),
    DRAFT_FIELDS,
    VALIDATION_EXTRA_FIELDS,
    SETTLEMENT_FIELDS,
    REASON_FIELDS,
)

CLAIM_INSERT_COLUMNS = union(RELATION_FIELDS, DRAFT_FIELDS)

AUDIT_CREATED = "created"
AUDIT_UPDATE = "update"
AUDIT_STATUS_CHANGE = "status_change"
