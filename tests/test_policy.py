"""Tests for the policy lifecycle."""

import pytest

from claim_workflow.models.policy import PolicyStatus
from claim_workflow.workflow.policy import (
    POLICY_ACTIVATION_FIELDS,
    POLICY_OPTIONAL_FIELDS,
    can_policy_transition,
    get_allowed_policy_transitions,
    get_policy_editable_fields,
    get_policy_transition_requirements,
    validate_policy_update,
)

TERMS = {
    "policy_number": "POL-2024-0001",
    "start_date": "2024-01-01",
    "end_date": "2024-12-31",
    "type": "INDIVIDUAL",
    "amb_copay": 10,
    "hosp_copay": 20,
    "maternity": 1500,
    "t_premium": 120,
    "tplus1_premium": 210,
    "tplusf_premium": 330,
    "benefits_cost": 45,
}


def make_policy(status: PolicyStatus, **overrides):
    record = {"id": "POL-1", "status": status.value}
    if status != PolicyStatus.PENDING:
        record.update(TERMS)
    record.update(overrides)
    return record


def test_graph():
    assert set(get_allowed_policy_transitions(PolicyStatus.PENDING)) == {
        PolicyStatus.ACTIVE,
        PolicyStatus.CANCELLED,
    }
    assert can_policy_transition(PolicyStatus.EXPIRED, PolicyStatus.ACTIVE)
    assert not can_policy_transition(PolicyStatus.ACTIVE, PolicyStatus.PENDING)
    assert get_allowed_policy_transitions(PolicyStatus.CANCELLED) == ()


def test_required_fields_only_editable_while_pending():
    assert "policy_number" in get_policy_editable_fields(PolicyStatus.PENDING)
    assert "policy_number" not in get_policy_editable_fields(PolicyStatus.ACTIVE)
    assert get_policy_editable_fields(PolicyStatus.EXPIRED) == POLICY_OPTIONAL_FIELDS
    assert get_policy_editable_fields(PolicyStatus.CANCELLED) == ()


def test_cancel_requirement_is_shared():
    for status in (PolicyStatus.PENDING, PolicyStatus.ACTIVE, PolicyStatus.EXPIRED):
        assert get_policy_transition_requirements(status, PolicyStatus.CANCELLED) == (
            "cancellation_reason",
        )
    assert get_policy_transition_requirements(PolicyStatus.EXPIRED, PolicyStatus.ACTIVE) == ()


def test_activate_requires_full_terms():
    result = validate_policy_update(
        make_policy(PolicyStatus.PENDING), {"status": "ACTIVE", "policy_number": "P-1"}
    )
    assert result.valid is False
    assert result.error_code == "MissingTransitionRequirements"
    assert "policy_number" not in result.error
    assert "start_date" in result.error


def test_activate_with_terms():
    result = validate_policy_update(make_policy(PolicyStatus.PENDING), {**TERMS, "status": "ACTIVE"})
    assert result.valid is True
    assert result.create_expiration is False


def test_cannot_edit_policy_number_once_active():
    result = validate_policy_update(make_policy(PolicyStatus.ACTIVE), {"policy_number": "X"})
    assert result.error_code == "ForbiddenFields"


def test_cannot_clear_optional_term_once_active():
    result = validate_policy_update(make_policy(PolicyStatus.ACTIVE), {"amb_copay": None})
    assert result.error_code == "ClearedRequiredFields"


def test_active_policy_must_keep_its_terms():
    current = make_policy(PolicyStatus.ACTIVE, benefits_cost="")
    result = validate_policy_update(current, {})
    assert result.error_code == "ViolatedInvariants"
    assert "benefits_cost" in result.error


def test_end_date_before_start_rejected():
    result = validate_policy_update(
        make_policy(PolicyStatus.PENDING),
        {"start_date": "2024-06-01", "end_date": "2024-05-31"},
    )
    assert result.error_code == "DateOrderingViolation"


def test_end_date_on_start_date_allowed():
    result = validate_policy_update(
        make_policy(PolicyStatus.PENDING),
        {"start_date": "2024-06-01", "end_date": "2024-06-01"},
    )
    assert result.valid is True


def test_expire_requires_reason_and_signals_expiration():
    current = make_policy(PolicyStatus.ACTIVE)
    missing = validate_policy_update(current, {"status": "EXPIRED"})
    assert missing.error_code == "MissingTransitionRequirements"
    assert "expiration_reason" in missing.error

    result = validate_policy_update(
        current, {"status": "EXPIRED", "expiration_reason": "Premium unpaid"}
    )
    assert result.valid is True
    assert result.create_expiration is True


def test_reactivate_expired_policy():
    result = validate_policy_update(make_policy(PolicyStatus.EXPIRED), {"status": "ACTIVE"})
    assert result.valid is True
    assert result.create_expiration is False


@pytest.mark.parametrize("status", [PolicyStatus.PENDING, PolicyStatus.ACTIVE, PolicyStatus.EXPIRED])
def test_cancel_requires_reason(status):
    current = make_policy(status)
    assert validate_policy_update(current, {"status": "CANCELLED"}).valid is False
    assert validate_policy_update(
        current, {"status": "CANCELLED", "cancellation_reason": "Client request"}
    ).valid


def test_cancelled_policy_is_frozen():
    result = validate_policy_update(make_policy(PolicyStatus.CANCELLED), {"status": "ACTIVE"})
    assert result.error_code == "PermissionDenied"
    assert "policies" in result.error


def test_illegal_policy_transition():
    result = validate_policy_update(make_policy(PolicyStatus.PENDING), {"status": "EXPIRED"})
    assert result.error_code == "IllegalTransition"
    assert result.error == "Cannot change from PENDING to EXPIRED"


def test_activation_fields_cover_required_and_optional():
    assert set(POLICY_ACTIVATION_FIELDS) == {*TERMS}
