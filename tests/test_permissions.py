"""Tests for role tiers."""

import pytest

from claim_workflow.models.claim import ClaimStatus, Role
from claim_workflow.workflow.permissions import ADMIN_ROLES, INTERNAL_ROLES, can_edit, coerce_role


def test_admin_roles_are_internal():
    assert ADMIN_ROLES < INTERNAL_ROLES


@pytest.mark.parametrize("role", list(INTERNAL_ROLES))
def test_internal_roles_edit_open_claims(role):
    assert can_edit(role, ClaimStatus.DRAFT)
    assert can_edit(role, ClaimStatus.PENDING_INFO)


@pytest.mark.parametrize(
    "role,allowed",
    [
        (Role.SUPERADMIN, True),
        (Role.CLAIMS_ADMIN, True),
        (Role.CLAIMS_EMPLOYEE, False),
        (Role.OPERATIONS_EMPLOYEE, False),
        (Role.CLIENT_ADMIN, False),
    ],
)
def test_terminal_claims_need_admin(role, allowed):
    for status in (ClaimStatus.RETURNED, ClaimStatus.SETTLED, ClaimStatus.CANCELLED):
        assert can_edit(role, status) is allowed


@pytest.mark.parametrize("role", [Role.CLIENT_ADMIN, Role.CLIENT_AFFILIATE, "intern", "", None])
def test_external_and_unknown_roles_cannot_edit(role):
    assert can_edit(role, ClaimStatus.DRAFT) is False


def test_coerce_role_accepts_strings():
    assert coerce_role("claims_employee") is Role.CLAIMS_EMPLOYEE
    assert coerce_role(" Claims_Admin ") is Role.CLAIMS_ADMIN
    assert coerce_role(Role.SUPERADMIN) is Role.SUPERADMIN
    assert coerce_role("nobody") is None
    assert coerce_role(None) is None
