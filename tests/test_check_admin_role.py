from app.core.security import Identity
from app.models.leave import LeaveRequest
from app.utils.check_admin_role import can_access_leave_request, is_admin, scoped_employee_id

ADMIN = Identity(id=1, role="admin")
EMPLOYEE = Identity(id=7, role="employee")


def test_admin_role_detection():
    assert is_admin(ADMIN)
    assert not is_admin(EMPLOYEE)
    assert not is_admin(Identity(id=7, role="user"))


def test_owner_and_admin_can_access_request():
    own = LeaveRequest(employee_id=7)
    other = LeaveRequest(employee_id=8)

    assert can_access_leave_request(EMPLOYEE, own)
    assert not can_access_leave_request(EMPLOYEE, other)
    assert can_access_leave_request(ADMIN, other)


def test_non_admin_scope_overrides_requested_employee():
    assert scoped_employee_id(EMPLOYEE, 8) == 7
    assert scoped_employee_id(EMPLOYEE) == 7


def test_admin_scope_follows_request():
    assert scoped_employee_id(ADMIN, 8) == 8
    assert scoped_employee_id(ADMIN) is None
