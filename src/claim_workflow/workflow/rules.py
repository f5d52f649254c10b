"""Cross-field business rules evaluated against the merged claim record.

Each rule is an independent veto that raises on the first violation. Rules
only fire when every field they compare is present.
"""

import math
from decimal import Decimal
from typing import Any, Mapping

from claim_workflow.utils.dates import format_instant, to_instant
from claim_workflow.workflow.errors import (
    DateOrderingViolation,
    FinancialReconciliationMismatch,
)
from claim_workflow.workflow.fields import SETTLEMENT_AMOUNT_FIELDS, is_empty

# Absolute tolerance, in currency units, used by finance for settlement reconciliation
RECONCILIATION_TOLERANCE = 0.01

RULE_INCIDENT_BEFORE_SUBMITTED = "incident_not_after_submitted"
RULE_SETTLEMENT_AFTER_SUBMITTED = "settlement_after_submitted"


def check_date_ordering(merged: Mapping[str, Any]) -> None:
    """Incident on or before submission; settlement strictly after submission.

    Values are compared as UTC instants; a plain date is midnight UTC. So an
    incident may share the submission date, while a settlement needs a later
    day or a later time.
    """
    incident = to_instant(merged.get("incident_date"))
    submitted = to_instant(merged.get("submitted_date"))
    settlement = to_instant(merged.get("settlement_date"))

    if incident is not None and submitted is not None and incident > submitted:
        raise DateOrderingViolation(
            RULE_INCIDENT_BEFORE_SUBMITTED,
            f"Incident date ({format_instant(incident)}) cannot be after the "
            f"submitted date ({format_instant(submitted)})",
            (incident, submitted),
        )

    if settlement is not None and submitted is not None and settlement <= submitted:
        raise DateOrderingViolation(
            RULE_SETTLEMENT_AFTER_SUBMITTED,
            f"Settlement date ({format_instant(settlement)}) must be after the "
            f"submitted date ({format_instant(submitted)})",
            (settlement, submitted),
        )


def _amount(value: Any) -> float:
    if isinstance(value, bool):
        raise ValueError(f"Invalid amount: {value!r}")
    if isinstance(value, (int, float, Decimal)):
        amount = float(value)
    else:
        amount = float(str(value).strip())
    if not math.isfinite(amount):
        raise ValueError(f"Invalid amount: {value!r}")
    return amount


def check_financial_reconciliation(merged: Mapping[str, Any]) -> None:
    """Submitted amount must equal approved + denied + unprocessed + deductible + copay."""
    submitted_raw = merged.get("amount_submitted")
    parts_raw = [merged.get(field) for field in SETTLEMENT_AMOUNT_FIELDS]
    if is_empty(submitted_raw) or any(is_empty(p) for p in parts_raw):
        return

    submitted = _amount(submitted_raw)
    computed_sum = sum(_amount(p) for p in parts_raw)
    if abs(submitted - computed_sum) > RECONCILIATION_TOLERANCE:
        raise FinancialReconciliationMismatch(submitted, computed_sum)


BUSINESS_RULES = (check_date_ordering, check_financial_reconciliation)


def check_business_rules(merged: Mapping[str, Any]) -> None:
    for rule in BUSINESS_RULES:
        rule(merged)
