"""Constants for user roles, leave request statuses and leave request limits."""

from enum import Enum


class UserRole(str, Enum):
    """Enumeration of roles carried in the auth token."""

    admin = "admin"
    employee = "employee"
    user = "user"


class RequestStatus(str, Enum):
    """Enumeration of leave request statuses."""

    pending = "pending"
    approved = "approved"
    rejected = "rejected"


# Statuses that block an overlapping request for the same employee
ACTIVE_REQUEST_STATUSES = (RequestStatus.pending, RequestStatus.approved)

DECIDED_REQUEST_STATUSES = (RequestStatus.approved, RequestStatus.rejected)

MAX_REASON_LENGTH = 500
