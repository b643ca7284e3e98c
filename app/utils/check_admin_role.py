from typing import Optional

from app.core.security import Identity
from app.models.leave import LeaveRequest


def is_admin(identity: Identity) -> bool:
    """Check if the caller holds the admin role."""
    return identity.is_admin


def can_access_leave_request(identity: Identity, record: LeaveRequest) -> bool:
    """Admins see every leave request, everyone else only their own."""
    return is_admin(identity) or record.employee_id == identity.id


def scoped_employee_id(identity: Identity, requested: Optional[int] = None) -> Optional[int]:
    """Effective employee filter for listing queries.

    Non-admins are always pinned to their own id, whatever they asked for.
    """
    if is_admin(identity):
        return requested
    return identity.id
