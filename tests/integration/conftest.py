"""Shared fixtures for integration tests."""

import os
import tempfile
from typing import Generator

import pytest


@pytest.fixture
def integration_db() -> Generator[str, None, None]:
    """Create a temporary SQLite database for integration tests.

    Yields:
        str: Path to the temporary database file.
    """
    from claim_workflow.db.database import init_db

    fd, path = tempfile.mkstemp(suffix=".db")
    os.close(fd)
    prev = os.environ.get("CLAIMS_DB_PATH")
    try:
        init_db(path)
        os.environ["CLAIMS_DB_PATH"] = path
        yield path
    finally:
        if prev is None:
            os.environ.pop("CLAIMS_DB_PATH", None)
        else:
            os.environ["CLAIMS_DB_PATH"] = prev
        try:
            os.unlink(path)
        except OSError:
            pass


@pytest.fixture
def repo(integration_db):
    from claim_workflow.db.repository import ClaimRepository

    return ClaimRepository(db_path=integration_db)


@pytest.fixture
def draft_claim(repo) -> str:
    """A DRAFT claim with every field needed to move to VALIDATION."""
    from claim_workflow.models.claim import ClaimCreate

    return repo.create_claim(
        ClaimCreate(
            client_id="CLI-100",
            affiliate_id="AFF-100",
            patient_id="PAT-100",
            policy_id="POL-100",
            description="Emergency visit after a fall",
            care_type="EMERGENCY",
            diagnosis_code="S52.5",
            diagnosis_description="Fracture of lower end of radius",
            incident_date="2024-03-01",
        ),
        user_id="intake",
    )
