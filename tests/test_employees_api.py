from app.core.config import settings
from tests.helpers import admin_headers, auth_headers, make_employee

BASE = f"{settings.API_PREFIX}/employees"


def _employee_body(**overrides):
    body = {
        "employee_code": "EMP-9001",
        "first_name": "Katherine",
        "last_name": "Johnson",
        "email": "katherine@example.com",
        "department": "Research",
        "position": "Analyst",
        "hire_date": "2022-06-01",
    }
    body.update(overrides)
    return body


async def test_admin_creates_employee(client):
    response = await client.post(BASE, json=_employee_body(), headers=admin_headers())

    assert response.status_code == 201
    employee = response.json()["employee"]
    assert employee["employee_code"] == "EMP-9001"
    assert employee["is_active"] is True


async def test_non_admin_cannot_create_employee(client, db):
    emp = await make_employee(db)

    response = await client.post(BASE, json=_employee_body(), headers=auth_headers(emp.id))

    assert response.status_code == 403
    assert response.json() == {"error": "Admin access required"}


async def test_duplicate_email_is_rejected(client):
    await client.post(BASE, json=_employee_body(), headers=admin_headers())

    response = await client.post(
        BASE, json=_employee_body(employee_code="EMP-9002"), headers=admin_headers()
    )

    assert response.status_code == 400
    assert response.json() == {"error": "Employee already exists with this code or email"}


async def test_invalid_email_is_validation_error(client):
    response = await client.post(
        BASE, json=_employee_body(email="not-an-email"), headers=admin_headers()
    )

    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "email"


async def test_list_and_filter_employees(client, db):
    await make_employee(db, last_name="Zeta", department="Sales")
    await make_employee(db, last_name="Alpha", department="Sales")
    await make_employee(db, last_name="Beta", department="Finance", is_active=False)

    everyone = await client.get(BASE, headers=auth_headers(1))
    sales = await client.get(BASE, params={"department": "Sales"}, headers=auth_headers(1))
    inactive = await client.get(BASE, params={"is_active": "false"}, headers=auth_headers(1))

    assert [e["last_name"] for e in everyone.json()["employees"]] == ["Alpha", "Beta", "Zeta"]
    assert [e["last_name"] for e in sales.json()["employees"]] == ["Alpha", "Zeta"]
    assert [e["last_name"] for e in inactive.json()["employees"]] == ["Beta"]


async def test_get_unknown_employee(client):
    response = await client.get(f"{BASE}/999999", headers=admin_headers())

    assert response.status_code == 404
    assert response.json() == {"error": "Employee not found"}


async def test_deactivated_employee_cannot_file_leave(client, db):
    emp = await make_employee(db)

    deactivated = await client.delete(f"{BASE}/{emp.id}", headers=admin_headers())
    fetched = await client.get(f"{BASE}/{emp.id}", headers=admin_headers())
    filed = await client.post(
        f"{settings.API_PREFIX}/leave-requests",
        json={
            "employee_id": emp.id,
            "leave_type": "vacation",
            "start_date": "2025-03-10",
            "end_date": "2025-03-11",
        },
        headers=auth_headers(emp.id),
    )

    assert deactivated.status_code == 200
    assert fetched.json()["employee"]["is_active"] is False
    assert filed.status_code == 404


async def test_deactivate_unknown_employee(client):
    response = await client.delete(f"{BASE}/999999", headers=admin_headers())

    assert response.status_code == 404
