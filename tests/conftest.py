"""Shared pytest fixtures for all test files."""

import os
import tempfile
from typing import Any

import pytest

from claim_workflow.db.database import init_db
from claim_workflow.models.claim import ClaimStatus

RELATIONS = {
    "client_id": "CLI-001",
    "affiliate_id": "AFF-001",
    "patient_id": "PAT-001",
}

DRAFT_DATA = {
    "policy_id": "POL-001",
    "description": "Outpatient consultation and lab work",
    "care_type": "AMBULATORY",
    "diagnosis_code": "J06.9",
    "diagnosis_description": "Acute upper respiratory infection",
    "incident_date": "2024-03-01",
}

PRESENTED_DATA = {
    "amount_submitted": 100.0,
    "submitted_date": "2024-03-05",
}

SETTLEMENT_DATA = {
    "amount_approved": 60.0,
    "amount_denied": 20.0,
    "amount_unprocessed": 10.0,
    "deductible_applied": 5.0,
    "copay_applied": 5.0,
    "settlement_date": "2024-03-20",
    "settlement_number": "LIQ-2024-001",
    "settlement_notes": "Paid per policy schedule",
}


def make_claim(status: ClaimStatus, **overrides: Any) -> dict[str, Any]:
    """A persisted claim record that satisfies every invariant of ``status``."""
    record: dict[str, Any] = {"id": "CLM-TEST0001", "status": status.value, **RELATIONS, **DRAFT_DATA}
    if status in (
        ClaimStatus.VALIDATION,
        ClaimStatus.SUBMITTED,
        ClaimStatus.PENDING_INFO,
        ClaimStatus.SETTLED,
    ):
        record.update(PRESENTED_DATA)
    if status == ClaimStatus.PENDING_INFO:
        record["pending_reason"] = "Missing itemized invoice"
    if status == ClaimStatus.RETURNED:
        record["return_reason"] = "Incomplete documents"
    if status == ClaimStatus.SETTLED:
        record.update(SETTLEMENT_DATA)
    if status == ClaimStatus.CANCELLED:
        record["cancellation_reason"] = "Duplicate claim"
    record.update(overrides)
    return record


@pytest.fixture
def claim_factory():
    return make_claim


@pytest.fixture(autouse=True)
def temp_db():
    """Use a temporary SQLite DB for tests."""
    fd, path = tempfile.mkstemp(suffix=".db")
    os.close(fd)
    init_db(path)
    prev = os.environ.get("CLAIMS_DB_PATH")
    os.environ["CLAIMS_DB_PATH"] = path
    try:
        yield path
    finally:
        if prev is None:
            os.environ.pop("CLAIMS_DB_PATH", None)
        else:
            os.environ["CLAIMS_DB_PATH"] = prev
        try:
            os.unlink(path)
        except OSError:
            # Already removed
            pass
