"""Tests for the claim lifecycle table."""

import pytest

from claim_workflow.models.claim import ClaimStatus
from claim_workflow.workflow.fields import CLAIM_FIELDS, TRANSITION_ONLY_FIELDS
from claim_workflow.workflow.lifecycle import (
    LIFECYCLE,
    TERMINAL_STATES,
    can_transition,
    get_allowed_transitions,
    get_editable_fields,
    get_non_nullable_fields,
    is_terminal,
)

EXPECTED_GRAPH = {
    ClaimStatus.DRAFT: {ClaimStatus.VALIDATION, ClaimStatus.CANCELLED},
    ClaimStatus.VALIDATION: {ClaimStatus.SUBMITTED, ClaimStatus.RETURNED, ClaimStatus.CANCELLED},
    ClaimStatus.SUBMITTED: {ClaimStatus.PENDING_INFO, ClaimStatus.SETTLED, ClaimStatus.CANCELLED},
    ClaimStatus.PENDING_INFO: {ClaimStatus.SUBMITTED, ClaimStatus.CANCELLED},
    ClaimStatus.RETURNED: set(),
    ClaimStatus.SETTLED: set(),
    ClaimStatus.CANCELLED: set(),
}


def test_every_status_has_an_entry():
    assert set(LIFECYCLE) == set(ClaimStatus)


def test_transition_graph_matches_claim_flow():
    for status, expected in EXPECTED_GRAPH.items():
        assert set(get_allowed_transitions(status)) == expected


@pytest.mark.parametrize("status", list(ClaimStatus))
def test_editable_fields_are_known_fields(status):
    """No typos: every editable or non-nullable field exists in the field universe."""
    assert set(get_editable_fields(status)) <= set(CLAIM_FIELDS)
    assert set(get_non_nullable_fields(status)) <= set(CLAIM_FIELDS)


@pytest.mark.parametrize("status", list(ClaimStatus))
def test_transition_only_fields_are_never_editable(status):
    assert not set(get_editable_fields(status)) & set(TRANSITION_ONLY_FIELDS)


@pytest.mark.parametrize("status", list(ClaimStatus))
def test_non_nullable_fields_are_editable(status):
    assert set(get_non_nullable_fields(status)) <= set(get_editable_fields(status))


def test_terminal_states_are_closed():
    assert TERMINAL_STATES == {ClaimStatus.RETURNED, ClaimStatus.SETTLED, ClaimStatus.CANCELLED}
    for status in TERMINAL_STATES:
        assert is_terminal(status)
        assert get_allowed_transitions(status) == ()
        assert get_editable_fields(status) == ()


def test_no_status_leads_back_to_draft():
    for status in ClaimStatus:
        assert not can_transition(status, ClaimStatus.DRAFT)


def test_only_pending_info_is_not_editable_among_open_statuses():
    assert get_editable_fields(ClaimStatus.PENDING_INFO) == ()
    assert "amount_submitted" in get_editable_fields(ClaimStatus.VALIDATION)
    assert "amount_submitted" not in get_editable_fields(ClaimStatus.DRAFT)
    assert "settlement_number" in get_editable_fields(ClaimStatus.SUBMITTED)
    assert "description" not in get_editable_fields(ClaimStatus.SUBMITTED)


def test_editable_fields_are_stable():
    assert get_editable_fields(ClaimStatus.VALIDATION) == get_editable_fields(ClaimStatus.VALIDATION)
    assert len(get_editable_fields(ClaimStatus.VALIDATION)) == len(
        set(get_editable_fields(ClaimStatus.VALIDATION))
    )
