"""Validation errors raised by the workflow gates.

Every error is a recoverable, user-facing rejection. The engine converts them
into a ValidationResult; ``validate_or_raise`` and the repository let them
propagate. ``code`` is the class name and is stable for callers to match on.
"""

from typing import Any, Iterable, Sequence


def _status_name(status: Any) -> str:
    return getattr(status, "value", None) or str(status)


class ClaimWorkflowError(ValueError):
    """Base class for workflow validation failures."""

    @property
    def code(self) -> str:
        return type(self).__name__


class PermissionDenied(ClaimWorkflowError):
    def __init__(self, status: Any, entity: str = "claims"):
        self.status = status
        super().__init__(
            f"You do not have permission to edit {entity} in status {_status_name(status)}"
        )


class ForbiddenFields(ClaimWorkflowError):
    def __init__(self, status: Any, fields: Iterable[str]):
        self.status = status
        self.fields = list(fields)
        super().__init__(
            f"These fields cannot be edited in status {_status_name(status)}: "
            f"{', '.join(self.fields)}"
        )


class ClearedRequiredFields(ClaimWorkflowError):
    def __init__(self, fields: Iterable[str]):
        self.fields = list(fields)
        super().__init__(f"These fields cannot be cleared: {', '.join(self.fields)}")


class ViolatedInvariants(ClaimWorkflowError):
    def __init__(self, fields: Iterable[str]):
        self.fields = list(fields)
        super().__init__(f"Required fields cannot be empty: {', '.join(self.fields)}")


class DateOrderingViolation(ClaimWorkflowError):
    def __init__(self, rule: str, message: str, values: Sequence[Any] = ()):
        self.rule = rule
        self.values = tuple(values)
        super().__init__(message)


class FinancialReconciliationMismatch(ClaimWorkflowError):
    def __init__(self, submitted: float, computed_sum: float):
        self.submitted = submitted
        self.computed_sum = computed_sum
        super().__init__(
            f"Submitted amount ({submitted:.2f}) must equal the sum of the "
            f"settlement amounts ({computed_sum:.2f})"
        )


class IllegalTransition(ClaimWorkflowError):
    def __init__(self, from_status: Any, to_status: Any):
        self.from_status = from_status
        self.to_status = to_status
        super().__init__(
            f"Cannot change from {_status_name(from_status)} to {_status_name(to_status)}"
        )


class MissingTransitionRequirements(ClaimWorkflowError):
    def __init__(self, from_status: Any, to_status: Any, fields: Iterable[str]):
        self.from_status = from_status
        self.to_status = to_status
        self.fields = list(fields)
        super().__init__(
            f"Missing required fields to change to {_status_name(to_status)}: "
            f"{', '.join(self.fields)}"
        )
