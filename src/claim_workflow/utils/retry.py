"""Retry with backoff for claim edits that lose an optimistic-concurrency race."""

import logging
import sqlite3
from typing import Callable, TypeVar

from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ConcurrentModificationError(RuntimeError):
    """The claim changed between load and write; reload and validate again."""

    def __init__(self, claim_id: str, expected_version: int):
        self.claim_id = claim_id
        self.expected_version = expected_version
        super().__init__(
            f"Claim {claim_id} was modified concurrently (expected version {expected_version})"
        )


RETRYABLE_EXCEPTIONS = (ConcurrentModificationError,)

# Transient SQLite conditions; other OperationalErrors (no such table, ...) are permanent
TRANSIENT_SQLITE_MESSAGES = ("database is locked", "database table is locked", "database is busy")


def is_transient_sqlite_error(exc: BaseException) -> bool:
    if not isinstance(exc, sqlite3.OperationalError):
        return False
    message = str(exc).lower()
    return any(m in message for m in TRANSIENT_SQLITE_MESSAGES)


def with_conflict_retry(
    max_attempts: int = 3,
    min_wait: float = 0.05,
    max_wait: float = 1.0,
    multiplier: float = 1.0,
):
    """Decorator that re-runs a load-validate-write function on conflict.

    The wrapped function must reload the claim on every call so the engine
    validates against fresh state. Validation errors are never retried.
    """

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @retry(
            stop=stop_after_attempt(max_attempts),
            wait=wait_exponential(multiplier=multiplier, min=min_wait, max=max_wait),
            retry=(
                retry_if_exception_type(RETRYABLE_EXCEPTIONS)
                | retry_if_exception(is_transient_sqlite_error)
            ),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )
        def wrapper(*args, **kwargs) -> T:
            return func(*args, **kwargs)

        return wrapper

    return decorator
