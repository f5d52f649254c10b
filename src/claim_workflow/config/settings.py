"""Centralized configuration from environment variables with defaults."""

import os

from dotenv import load_dotenv

load_dotenv()


def _float(key: str, default: float) -> float:
    raw = os.environ.get(key)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _int(key: str, default: int) -> int:
    raw = os.environ.get(key)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


# ---------------------------------------------------------------------------
# Database
# ---------------------------------------------------------------------------

def get_db_path() -> str:
    """Path to the SQLite database (CLAIMS_DB_PATH, default data/claims.db)."""
    return os.environ.get("CLAIMS_DB_PATH", "data/claims.db")


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

def get_log_format() -> str:
    """Log format: "human" (default) or "json"."""
    return os.environ.get("CLAIM_WORKFLOW_LOG_FORMAT", "human").strip().lower()


def get_log_level() -> str:
    return os.environ.get("CLAIM_WORKFLOW_LOG_LEVEL", "INFO").strip().upper()


# ---------------------------------------------------------------------------
# Optimistic-concurrency retry for claim edits
# ---------------------------------------------------------------------------

EDIT_MAX_ATTEMPTS = _int("CLAIM_WORKFLOW_EDIT_MAX_ATTEMPTS", 3)
EDIT_RETRY_MIN_WAIT = _float("CLAIM_WORKFLOW_RETRY_MIN_WAIT", 0.05)
EDIT_RETRY_MAX_WAIT = _float("CLAIM_WORKFLOW_RETRY_MAX_WAIT", 1.0)
