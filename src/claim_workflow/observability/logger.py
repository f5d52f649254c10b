"""Structured logging with claim context.

- ClaimLogger: LoggerAdapter that attaches claim_id (and status) to records
- claim_context: context manager setting claim context for a block
- log_claim_event: helper for named workflow events
"""

import json
import logging
import sys
import threading
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any

from claim_workflow.config.settings import get_log_format, get_log_level

_CONTEXT_KEYS = ("claim_id", "status", "role")

_context = threading.local()


def _get_claim_context() -> dict[str, Any]:
    return getattr(_context, "claim_data", {})


def _set_claim_context(data: dict[str, Any]) -> None:
    _context.claim_data = data


def _context_fields(record: logging.LogRecord) -> dict[str, Any]:
    """Record attributes win over the thread-local context."""
    ctx = _get_claim_context()
    fields = {}
    for key in _CONTEXT_KEYS:
        value = getattr(record, key, None) or ctx.get(key)
        if value:
            fields[key] = value
    return fields


class StructuredFormatter(logging.Formatter):
    """One JSON object per line."""

    def __init__(self, include_timestamp: bool = True):
        super().__init__()
        self.include_timestamp = include_timestamp

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if self.include_timestamp:
            log_data["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_data.update(_context_fields(record))
        if getattr(record, "extra_data", None):
            log_data["data"] = record.extra_data
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)
        log_data["source"] = {
            "file": record.filename,
            "line": record.lineno,
            "function": record.funcName,
        }
        return json.dumps(log_data, default=str)


class HumanReadableFormatter(logging.Formatter):
    """``<timestamp> LEVEL [claim=..., status=...] logger: message``"""

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S")
        fields = _context_fields(record)
        ctx_str = ""
        if fields:
            labels = {"claim_id": "claim"}
            ctx_str = " [" + ", ".join(f"{labels.get(k, k)}={v}" for k, v in fields.items()) + "]"
        message = record.getMessage()
        if getattr(record, "extra_data", None):
            message += f" | {record.extra_data}"
        text = f"{timestamp} {record.levelname:8}{ctx_str} {record.name}: {message}"
        if record.exc_info:
            text += "\n" + self.formatException(record.exc_info)
        return text


class ClaimLogger(logging.LoggerAdapter):
    """Logger adapter that adds claim_id and status to every record."""

    def __init__(self, logger: logging.Logger, claim_id: str | None = None):
        super().__init__(logger, {})
        self._claim_id = claim_id
        self._status: str | None = None

    def set_claim_id(self, claim_id: str) -> None:
        self._claim_id = claim_id

    def set_status(self, status: Any) -> None:
        self._status = getattr(status, "value", status)

    def process(self, msg: str, kwargs: dict[str, Any]) -> tuple[str, dict[str, Any]]:
        extra = kwargs.get("extra", {})
        if self._claim_id and not extra.get("claim_id"):
            extra["claim_id"] = self._claim_id
        if self._status and not extra.get("status"):
            extra["status"] = self._status
        kwargs["extra"] = extra
        return msg, kwargs

    def log_event(self, event: str, level: int = logging.INFO, **data: Any) -> None:
        """Log a named event with key=value details."""
        claim_id = data.pop("claim_id", None) or self._claim_id
        log_claim_event(self, event, claim_id=claim_id, level=level, **data)


def get_logger(
    name: str,
    claim_id: str | None = None,
    structured: bool | None = None,
) -> ClaimLogger:
    """Get a ClaimLogger, configuring a stdout handler on first use.

    Args:
        name: Logger name (typically __name__)
        claim_id: Optional claim ID attached to every record
        structured: JSON output if True, human-readable if False, and
            CLAIM_WORKFLOW_LOG_FORMAT when None
    """
    logger = logging.getLogger(name)
    if not logger.handlers:
        if structured is None:
            structured = get_log_format() == "json"
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(StructuredFormatter() if structured else HumanReadableFormatter())
        logger.addHandler(handler)
        logger.setLevel(getattr(logging, get_log_level(), logging.INFO))
        logger.propagate = False
    return ClaimLogger(logger, claim_id)


@contextmanager
def claim_context(claim_id: str, status: Any = None, role: Any = None, **extra: Any):
    """Attach claim context to every record logged inside the block.

    Usage:
        with claim_context(claim_id="CLM-123", status="DRAFT"):
            logger.info("Editing claim")
    """
    old_context = _get_claim_context()
    _set_claim_context(
        {
            "claim_id": claim_id,
            "status": getattr(status, "value", status),
            "role": getattr(role, "value", role),
            **extra,
        }
    )
    try:
        yield
    finally:
        _set_claim_context(old_context)


def log_claim_event(
    logger: logging.Logger | ClaimLogger,
    event: str,
    claim_id: str | None = None,
    level: int = logging.INFO,
    **data: Any,
) -> None:
    """Log ``[event] k=v, ...`` with the event data attached as extra_data."""
    message = f"[{event}]"
    if data:
        message = f"{message} " + ", ".join(f"{k}={v}" for k, v in data.items())
    extra = {"claim_id": claim_id, "extra_data": {"event": event, **data}}
    logger.log(level, message, extra=extra)
