from datetime import date
from itertools import count

from app.core.security import Identity, create_identity_token
from app.models.base import utcnow
from app.models.employee import Employee

ADMIN = Identity(id=9000, role="admin")

_codes = count(1)


async def make_employee(db, **overrides) -> Employee:
    n = next(_codes)
    now = utcnow()
    data = {
        "employee_code": f"EMP-{n:04d}",
        "first_name": "Test",
        "last_name": f"Employee{n}",
        "email": f"employee{n}@example.com",
        "department": "Engineering",
        "position": "Developer",
        "hire_date": date(2023, 1, 9),
        "is_active": True,
        "created_at": now,
        "updated_at": now,
    }
    data.update(overrides)
    employee = Employee(**data)
    db.add(employee)
    await db.commit()
    return employee


def identity_for(employee: Employee, role: str = "employee") -> Identity:
    return Identity(id=employee.id, role=role)


def auth_headers(identity_id: int, role: str = "employee") -> dict:
    return {"Authorization": f"Bearer {create_identity_token(identity_id, role)}"}


def admin_headers() -> dict:
    return auth_headers(ADMIN.id, "admin")
