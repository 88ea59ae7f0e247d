from datetime import date

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from hradmin.core.models import Offset


@pytest.mark.asyncio
async def test_create_and_get_employee(client: AsyncClient, hr) -> None:
    _, headers = hr
    payload = {
        "idno": "2025-001",
        "Lname": "Cruz",
        "Fname": "Ana",
        "Email": "ana.cruz@example.com",
        "Department": "Finance",
        "Jobtitle": "Accountant",
        "HiredDate": "2025-01-06",
    }
    response = await client.post("/api/v1/employees", json=payload, headers=headers)
    assert response.status_code == 201
    data = response.json()
    assert data["JobStatus"] == "Active"
    assert data["Department"] == "Finance"

    response = await client.get(f"/api/v1/employees/{data['id']}", headers=headers)
    assert response.status_code == 200
    assert response.json()["idno"] == "2025-001"


@pytest.mark.asyncio
async def test_duplicate_idno_conflicts(client: AsyncClient, hr, make_employee) -> None:
    _, headers = hr
    await make_employee(idno="DUP-1")
    response = await client.post(
        "/api/v1/employees", json={"idno": "DUP-1", "Lname": "Other", "Fname": "Person"}, headers=headers
    )
    assert response.status_code == 409


@pytest.mark.asyncio
async def test_list_filters_by_status(client: AsyncClient, hr, make_employee) -> None:
    _, headers = hr
    await make_employee(Lname="Alpha", JobStatus="Active")
    await make_employee(Lname="Bravo", JobStatus="Blocked")
    await make_employee(Lname="Charlie", JobStatus="Active")

    response = await client.get("/api/v1/employees", params={"status": "all"}, headers=headers)
    assert [e["Lname"] for e in response.json()] == ["Alpha", "Bravo", "Charlie"]

    response = await client.get("/api/v1/employees", params={"status": "Blocked"}, headers=headers)
    assert [e["Lname"] for e in response.json()] == ["Bravo"]


@pytest.mark.asyncio
async def test_departments_are_distinct_and_sorted(client: AsyncClient, hr, make_employee) -> None:
    _, headers = hr
    await make_employee(Department="Ops")
    await make_employee(Department="HR")
    await make_employee(Department="Ops")
    await make_employee(Department=None)
    response = await client.get("/api/v1/employees/departments", headers=headers)
    assert response.json() == ["HR", "Ops"]


@pytest.mark.asyncio
async def test_update_employee(client: AsyncClient, hr, make_employee) -> None:
    _, headers = hr
    emp_id = (await make_employee()).id
    response = await client.put(
        f"/api/v1/employees/{emp_id}", json={"Jobtitle": "Lead Engineer"}, headers=headers
    )
    assert response.status_code == 200
    assert response.json()["Jobtitle"] == "Lead Engineer"


@pytest.mark.parametrize(
    "current, action, expected_code, expected_status",
    [
        ("Active", "mark-blocked", 200, "Blocked"),
        ("Inactive", "mark-blocked", 200, "Blocked"),
        ("On Leave", "mark-blocked", 200, "Blocked"),
        ("Blocked", "mark-blocked", 400, "Blocked"),
        ("Active", "mark-inactive", 200, "Inactive"),
        ("Blocked", "mark-inactive", 400, "Blocked"),
        ("Inactive", "mark-active", 200, "Active"),
        ("Blocked", "mark-active", 200, "Active"),
        ("Active", "mark-active", 400, "Active"),
        ("On Leave", "mark-active", 400, "On Leave"),
    ],
)
@pytest.mark.asyncio
async def test_status_transitions_follow_row_actions(
    client: AsyncClient, hr, make_employee, current, action, expected_code, expected_status
) -> None:
    _, headers = hr
    emp_id = (await make_employee(JobStatus=current)).id
    response = await client.post(f"/api/v1/employees/{emp_id}/{action}", headers=headers)
    assert response.status_code == expected_code

    response = await client.get(f"/api/v1/employees/{emp_id}", headers=headers)
    assert response.json()["JobStatus"] == expected_status


@pytest.mark.asyncio
async def test_delete_employee(client: AsyncClient, hr, make_employee) -> None:
    _, headers = hr
    emp_id = (await make_employee()).id
    response = await client.delete(f"/api/v1/employees/{emp_id}", headers=headers)
    assert response.status_code == 204
    response = await client.get(f"/api/v1/employees/{emp_id}", headers=headers)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_delete_employee_with_requests_conflicts(
    client: AsyncClient, db_session: AsyncSession, hr, make_employee, offset_type
) -> None:
    _, headers = hr
    emp_id = (await make_employee()).id
    db_session.add(Offset(
        employee_id=emp_id,
        offset_type_id=offset_type,
        date=date(2025, 5, 10),
        workday=date(2025, 5, 12),
        hours=8,
        reason="Weekend support",
    ))
    await db_session.commit()
    response = await client.delete(f"/api/v1/employees/{emp_id}", headers=headers)
    assert response.status_code == 409


@pytest.mark.asyncio
async def test_unknown_employee_is_404(client: AsyncClient, hr) -> None:
    _, headers = hr
    response = await client.get("/api/v1/employees/12345", headers=headers)
    assert response.status_code == 404
    assert response.json()["detail"] == "Employee not found"
