"""Role tiers that decide who may edit a claim in a given status."""

import logging
from typing import Optional, Union

from claim_workflow.models.claim import ClaimStatus, Role
from claim_workflow.workflow.lifecycle import is_terminal

logger = logging.getLogger(__name__)

# May edit claims in terminal statuses
ADMIN_ROLES = frozenset({Role.SUPERADMIN, Role.CLAIMS_ADMIN})

# May edit claims in non-terminal statuses
INTERNAL_ROLES = frozenset(
    {
        Role.SUPERADMIN,
        Role.CLAIMS_ADMIN,
        Role.CLAIMS_EMPLOYEE,
        Role.OPERATIONS_EMPLOYEE,
    }
)


def coerce_role(role: Union[Role, str, None]) -> Optional[Role]:
    """Map a raw role string to a Role; unknown or empty values give None."""
    if role is None or isinstance(role, Role):
        return role
    try:
        return Role(str(role).strip().lower())
    except ValueError:
        logger.debug("Unknown role %r treated as having no permissions", role)
        return None


def can_edit(role: Union[Role, str, None], status: ClaimStatus) -> bool:
    resolved = coerce_role(role)
    if resolved is None:
        return False
    if is_terminal(status):
        return resolved in ADMIN_ROLES
    return resolved in INTERNAL_ROLES
