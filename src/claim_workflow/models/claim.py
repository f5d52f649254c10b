"""Pydantic models for claim statuses, roles, and validation results."""

from datetime import date
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class ClaimStatus(str, Enum):
    """Lifecycle state of a claim."""

    DRAFT = "DRAFT"
    VALIDATION = "VALIDATION"
    SUBMITTED = "SUBMITTED"
    PENDING_INFO = "PENDING_INFO"
    RETURNED = "RETURNED"
    SETTLED = "SETTLED"
    CANCELLED = "CANCELLED"


class Role(str, Enum):
    """Caller role as resolved by the authentication layer."""

    SUPERADMIN = "superadmin"
    CLAIMS_ADMIN = "claims_admin"
    CLAIMS_EMPLOYEE = "claims_employee"
    OPERATIONS_EMPLOYEE = "operations_employee"
    CLIENT_ADMIN = "client_admin"
    CLIENT_AFFILIATE = "client_affiliate"


class CareType(str, Enum):
    """Kind of medical care a claim covers."""

    AMBULATORY = "AMBULATORY"
    HOSPITALIZATION = "HOSPITALIZATION"
    MATERNITY = "MATERNITY"
    EMERGENCY = "EMERGENCY"
    OTHER = "OTHER"


class ReprocessPayload(BaseModel):
    """Linked reprocess record the caller must persist alongside the claim."""

    model_config = ConfigDict(frozen=True)

    reprocess_date: Any = Field(..., description="Date the missing information arrived")
    reprocess_description: Any = Field(..., description="What was supplied")


class ValidationResult(BaseModel):
    """Outcome of a single workflow validation call."""

    model_config = ConfigDict(frozen=True)

    valid: bool = Field(..., description="Whether the update may be persisted")
    error: Optional[str] = Field(default=None, description="User-facing rejection message")
    error_code: Optional[str] = Field(
        default=None, description="Error taxonomy name, e.g. ForbiddenFields"
    )
    create_linked_record: bool = Field(
        default=False, description="Caller must persist linked_record_payload"
    )
    recompute_derived_duration: bool = Field(
        default=False, description="Caller must recompute the business-day duration"
    )
    linked_record_payload: Optional[ReprocessPayload] = Field(
        default=None, description="Reprocess record data when create_linked_record is set"
    )


class ClaimCreate(BaseModel):
    """Input payload for creating a DRAFT claim."""

    client_id: str = Field(..., description="Owning client ID")
    affiliate_id: str = Field(..., description="Policy holder affiliate ID")
    patient_id: str = Field(..., description="Patient (affiliate or dependent) ID")
    policy_id: Optional[str] = Field(default=None, description="Covering policy ID")
    description: Optional[str] = Field(default=None, description="Free-text claim description")
    care_type: Optional[CareType] = Field(default=None, description="Kind of care")
    diagnosis_code: Optional[str] = Field(default=None, description="ICD diagnosis code")
    diagnosis_description: Optional[str] = Field(
        default=None, description="Diagnosis description"
    )
    incident_date: Optional[date] = Field(default=None, description="Date of incurrence")


class ClaimUpdate(BaseModel):
    """Partial update to a claim.

    Only fields explicitly set are part of the update; an explicit None is a
    clear. Use ``to_updates()`` rather than ``model_dump()`` to keep that
    distinction.
    """

    model_config = ConfigDict(extra="forbid")

    status: Optional[ClaimStatus] = None
    policy_id: Optional[str] = None
    description: Optional[str] = None
    care_type: Optional[CareType] = None
    diagnosis_code: Optional[str] = None
    diagnosis_description: Optional[str] = None
    incident_date: Optional[date] = None
    amount_submitted: Optional[float] = None
    submitted_date: Optional[date] = None
    amount_approved: Optional[float] = None
    amount_denied: Optional[float] = None
    amount_unprocessed: Optional[float] = None
    deductible_applied: Optional[float] = None
    copay_applied: Optional[float] = None
    settlement_date: Optional[date] = None
    settlement_number: Optional[str] = None
    settlement_notes: Optional[str] = None
    pending_reason: Optional[str] = None
    return_reason: Optional[str] = None
    cancellation_reason: Optional[str] = None
    reprocess_date: Optional[date] = None
    reprocess_description: Optional[str] = None

    def to_updates(self) -> dict[str, Any]:
        """The explicitly set fields, JSON-compatible (dates as ISO strings)."""
        return self.model_dump(mode="json", exclude_unset=True)
