"""SQLite persistence for claims, reprocess records, and the audit log."""

from claim_workflow.db.database import get_connection, init_db
from claim_workflow.db.repository import ClaimNotFoundError, ClaimRepository, EditOutcome

__all__ = [
    "ClaimNotFoundError",
    "ClaimRepository",
    "EditOutcome",
    "get_connection",
    "init_db",
]
