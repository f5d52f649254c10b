"""Claim repository: create, read, and workflow-validated edits.

``edit_claim`` is the caller side of the validation engine: it loads the
claim, asks the engine whether the update is legal, and on success writes the
claim, any linked reprocess record, and an audit entry in one transaction. A
version column detects concurrent writers; on conflict the whole
load-validate-write cycle is retried against fresh state.
"""

import json
import uuid
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Union

from claim_workflow.config import settings
from claim_workflow.db.constants import (
    AUDIT_CREATED,
    AUDIT_STATUS_CHANGE,
    AUDIT_UPDATE,
    CLAIM_INSERT_COLUMNS,
    CLAIM_WRITABLE_COLUMNS,
)
from claim_workflow.db.database import get_connection
from claim_workflow.models.claim import ClaimCreate, ClaimStatus, ClaimUpdate, Role, ValidationResult
from claim_workflow.observability import claim_context, get_logger
from claim_workflow.utils.dates import calculate_business_days, to_date
from claim_workflow.utils.retry import ConcurrentModificationError, with_conflict_retry
from claim_workflow.workflow.engine import validate_or_raise
from claim_workflow.workflow.errors import ClaimWorkflowError
from claim_workflow.workflow.fields import DATE_FIELDS

logger = get_logger(__name__)


class ClaimNotFoundError(LookupError):
    def __init__(self, claim_id: str):
        self.claim_id = claim_id
        super().__init__(f"Claim not found: {claim_id}")


@dataclass(frozen=True)
class EditOutcome:
    """What an accepted edit wrote."""

    claim: dict[str, Any]
    result: ValidationResult
    reprocess_id: Optional[int] = None
    business_days: Optional[int] = None


def _generate_claim_id(prefix: str = "CLM") -> str:
    return f"{prefix}-{uuid.uuid4().hex[:8].upper()}"


def _column_value(column: str, value: Any) -> Any:
    """Normalize a validated value for storage."""
    value = getattr(value, "value", value)
    if column in DATE_FIELDS and value not in (None, ""):
        return to_date(value).isoformat()
    return value


class ClaimRepository:
    """Repository for claim persistence, reprocess records, and audit logging."""

    def __init__(self, db_path: str | None = None):
        self._db_path = db_path

    def create_claim(self, claim_input: ClaimCreate, user_id: str | None = None) -> str:
        """Insert a DRAFT claim and its 'created' audit entry. Returns claim_id."""
        claim_id = _generate_claim_id()
        data = claim_input.model_dump(mode="json")
        columns = ("id", "status", *CLAIM_INSERT_COLUMNS)
        values = [claim_id, ClaimStatus.DRAFT.value, *(data.get(c) for c in CLAIM_INSERT_COLUMNS)]
        with get_connection(self._db_path) as conn:
            conn.execute(
                f"INSERT INTO claims ({', '.join(columns)}) "
                f"VALUES ({', '.join('?' for _ in columns)})",
                values,
            )
            conn.execute(
                """
                INSERT INTO claim_audit_log (claim_id, action, new_status, details, user_id)
                VALUES (?, ?, ?, ?, ?)
                """,
                (claim_id, AUDIT_CREATED, ClaimStatus.DRAFT.value, "Claim record created", user_id),
            )
        logger.log_event("claim_created", claim_id=claim_id)
        return claim_id

    def get_claim(self, claim_id: str) -> dict[str, Any] | None:
        with get_connection(self._db_path) as conn:
            row = conn.execute("SELECT * FROM claims WHERE id = ?", (claim_id,)).fetchone()
        return None if row is None else dict(row)

    def get_claim_history(self, claim_id: str) -> list[dict[str, Any]]:
        """Audit log entries for a claim, oldest first."""
        with get_connection(self._db_path) as conn:
            rows = conn.execute(
                """
                SELECT id, claim_id, action, old_status, new_status, details, user_id, created_at
                FROM claim_audit_log
                WHERE claim_id = ?
                ORDER BY id ASC
                """,
                (claim_id,),
            ).fetchall()
        return [dict(r) for r in rows]

    def get_reprocesses(self, claim_id: str) -> list[dict[str, Any]]:
        with get_connection(self._db_path) as conn:
            rows = conn.execute(
                """
                SELECT id, claim_id, reprocess_date, reprocess_description, business_days,
                       created_by, created_at
                FROM claim_reprocesses
                WHERE claim_id = ?
                ORDER BY reprocess_date ASC, id ASC
                """,
                (claim_id,),
            ).fetchall()
        return [dict(r) for r in rows]

    def list_claims(self, status: Union[ClaimStatus, str, None] = None) -> list[dict[str, Any]]:
        with get_connection(self._db_path) as conn:
            if status is None:
                rows = conn.execute("SELECT * FROM claims ORDER BY created_at, id").fetchall()
            else:
                rows = conn.execute(
                    "SELECT * FROM claims WHERE status = ? ORDER BY created_at, id",
                    (getattr(status, "value", status),),
                ).fetchall()
        return [dict(r) for r in rows]

    def edit_claim(
        self,
        claim_id: str,
        updates: Union[ClaimUpdate, Mapping[str, Any]],
        role: Union[Role, str],
        user_id: str | None = None,
    ) -> EditOutcome:
        """Validate and apply a partial update.

        Raises:
            ClaimNotFoundError: no claim with this ID.
            ClaimWorkflowError: the engine rejected the update (nothing written).
            pydantic.ValidationError: ``updates`` is malformed.
            ConcurrentModificationError: the claim kept changing under us after
                EDIT_MAX_ATTEMPTS attempts.
        """
        if not isinstance(updates, ClaimUpdate):
            updates = ClaimUpdate.model_validate(dict(updates))
        update_map = updates.to_updates()

        attempt = with_conflict_retry(
            max_attempts=settings.EDIT_MAX_ATTEMPTS,
            min_wait=settings.EDIT_RETRY_MIN_WAIT,
            max_wait=settings.EDIT_RETRY_MAX_WAIT,
        )(self._edit_once)
        return attempt(claim_id, update_map, role, user_id)

    def _edit_once(
        self,
        claim_id: str,
        update_map: dict[str, Any],
        role: Union[Role, str],
        user_id: str | None,
    ) -> EditOutcome:
        current = self.get_claim(claim_id)
        if current is None:
            raise ClaimNotFoundError(claim_id)
        old_status = current["status"]

        with claim_context(claim_id=claim_id, status=old_status, role=role):
            try:
                result = validate_or_raise(current, update_map, role)
            except ClaimWorkflowError as exc:
                logger.log_event("claim_edit_rejected", claim_id=claim_id, error=str(exc))
                raise

            columns = [c for c in CLAIM_WRITABLE_COLUMNS if c in update_map]
            assignments = [f"{c} = ?" for c in columns]
            params: list[Any] = [_column_value(c, update_map[c]) for c in columns]
            new_status = update_map.get("status") or old_status

            reprocess_id = None
            business_days = None
            with get_connection(self._db_path) as conn:
                if result.create_linked_record and result.linked_record_payload is not None:
                    reprocess_id, business_days = self._insert_reprocess(
                        conn, current, result, user_id
                    )

                set_clause = ", ".join(
                    [*assignments, "version = version + 1", "updated_at = datetime('now')"]
                )
                cursor = conn.execute(
                    f"UPDATE claims SET {set_clause} WHERE id = ? AND version = ?",
                    [*params, claim_id, current["version"]],
                )
                if cursor.rowcount == 0:
                    raise ConcurrentModificationError(claim_id, current["version"])

                changes = {c: update_map[c] for c in columns if c != "status"}
                conn.execute(
                    """
                    INSERT INTO claim_audit_log
                        (claim_id, action, old_status, new_status, details, user_id)
                    VALUES (?, ?, ?, ?, ?, ?)
                    """,
                    (
                        claim_id,
                        AUDIT_STATUS_CHANGE if new_status != old_status else AUDIT_UPDATE,
                        old_status,
                        new_status,
                        json.dumps(changes, default=str),
                        user_id,
                    ),
                )

            logger.log_event(
                "claim_edited",
                claim_id=claim_id,
                old_status=old_status,
                new_status=new_status,
                fields=",".join(columns),
            )
            return EditOutcome(
                claim=self.get_claim(claim_id),
                result=result,
                reprocess_id=reprocess_id,
                business_days=business_days,
            )

    def _insert_reprocess(
        self,
        conn,
        current: Mapping[str, Any],
        result: ValidationResult,
        user_id: str | None,
    ) -> tuple[int, Optional[int]]:
        """Write the linked reprocess record; business days run from the previous cycle start."""
        payload = result.linked_record_payload
        reprocess_date = to_date(payload.reprocess_date)
        business_days = None
        if result.recompute_derived_duration:
            previous = conn.execute(
                """
                SELECT reprocess_date FROM claim_reprocesses
                WHERE claim_id = ?
                ORDER BY reprocess_date DESC, id DESC
                LIMIT 1
                """,
                (current["id"],),
            ).fetchone()
            cycle_start = previous["reprocess_date"] if previous else current.get("submitted_date")
            if cycle_start:
                business_days = calculate_business_days(cycle_start, reprocess_date)

        cursor = conn.execute(
            """
            INSERT INTO claim_reprocesses
                (claim_id, reprocess_date, reprocess_description, business_days, created_by)
            VALUES (?, ?, ?, ?, ?)
            """,
            (
                current["id"],
                reprocess_date.isoformat(),
                payload.reprocess_description,
                business_days,
                user_id,
            ),
        )
        logger.log_event(
            "reprocess_created",
            claim_id=current["id"],
            reprocess_date=reprocess_date.isoformat(),
            business_days=business_days,
        )
        return cursor.lastrowid, business_days
