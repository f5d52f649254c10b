"""SQLite connection and schema initialization."""

import sqlite3
import threading
from contextlib import contextmanager
from pathlib import Path

from claim_workflow.config.settings import get_db_path

# Database paths that already have the schema applied
_schema_initialized: set[str] = set()
_schema_lock = threading.Lock()

SCHEMA_SQL = """
-- Claims (one row per claim, all editable fields flattened)
CREATE TABLE IF NOT EXISTS claims (
    id TEXT PRIMARY KEY,
    client_id TEXT NOT NULL,
    affiliate_id TEXT NOT NULL,
    patient_id TEXT NOT NULL,
    policy_id TEXT,
    status TEXT NOT NULL DEFAULT 'DRAFT',
    description TEXT,
    care_type TEXT,
    diagnosis_code TEXT,
    diagnosis_description TEXT,
    incident_date TEXT,
    amount_submitted REAL,
    submitted_date TEXT,
    amount_approved REAL,
    amount_denied REAL,
    amount_unprocessed REAL,
    deductible_applied REAL,
    copay_applied REAL,
    settlement_date TEXT,
    settlement_number TEXT,
    settlement_notes TEXT,
    pending_reason TEXT,
    return_reason TEXT,
    cancellation_reason TEXT,
    version INTEGER NOT NULL DEFAULT 1,
    created_at TEXT DEFAULT (datetime('now')),
    updated_at TEXT DEFAULT (datetime('now'))
);

-- Reprocess records created on PENDING_INFO -> SUBMITTED
CREATE TABLE IF NOT EXISTS claim_reprocesses (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    claim_id TEXT NOT NULL,
    reprocess_date TEXT NOT NULL,
    reprocess_description TEXT NOT NULL,
    business_days INTEGER,
    created_by TEXT,
    created_at TEXT DEFAULT (datetime('now')),
    FOREIGN KEY (claim_id) REFERENCES claims(id)
);

-- Audit log (edits and status changes)
CREATE TABLE IF NOT EXISTS claim_audit_log (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    claim_id TEXT NOT NULL,
    action TEXT NOT NULL,
    old_status TEXT,
    new_status TEXT,
    details TEXT,
    user_id TEXT,
    created_at TEXT DEFAULT (datetime('now')),
    FOREIGN KEY (claim_id) REFERENCES claims(id)
);
CREATE INDEX IF NOT EXISTS idx_claims_status ON claims(status);
CREATE INDEX IF NOT EXISTS idx_reprocesses_claim ON claim_reprocesses(claim_id);
"""


def init_db(path: str | None = None) -> None:
    """Create tables if they do not exist."""
    db_path = path or get_db_path()
    Path(db_path).parent.mkdir(parents=True, exist_ok=True)
    with sqlite3.connect(db_path) as conn:
        conn.executescript(SCHEMA_SQL)
    with _schema_lock:
        _schema_initialized.add(db_path)


def _ensure_schema(db_path: str) -> None:
    with _schema_lock:
        if db_path in _schema_initialized:
            return
    init_db(db_path)


@contextmanager
def get_connection(path: str | None = None):
    """Yield a connection; commits on success, rolls back on error."""
    db_path = path or get_db_path()
    Path(db_path).parent.mkdir(parents=True, exist_ok=True)
    _ensure_schema(db_path)
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    try:
        yield conn
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()
