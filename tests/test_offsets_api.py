from datetime import date
from decimal import Decimal
from io import BytesIO

import pytest
from httpx import AsyncClient
from openpyxl import load_workbook
from sqlalchemy.ext.asyncio import AsyncSession

from hradmin.core.models import Offset


async def add_offset(db: AsyncSession, employee_id: int, offset_type_id: int, **overrides) -> int:
    data = {
        "employee_id": employee_id,
        "offset_type_id": offset_type_id,
        "date": date(2025, 5, 10),
        "workday": date(2025, 5, 12),
        "hours": Decimal("8"),
        "reason": "Weekend deployment",
        "status": "pending",
        "transaction_type": "credit",
    }
    data.update(overrides)
    offset = Offset(**data)
    db.add(offset)
    await db.commit()
    return offset.id


def offset_payload(employee_ids, offset_type_id, **overrides):
    payload = {
        "employee_ids": employee_ids,
        "date": "2025-05-10",
        "workday": "2025-05-12",
        "offset_type_id": offset_type_id,
        "hours": 8,
        "reason": "Weekend deployment",
    }
    payload.update(overrides)
    return payload


@pytest.mark.asyncio
async def test_hr_batch_is_auto_approved_and_credits_bank(
    client: AsyncClient, hr, make_employee, offset_type
) -> None:
    hr_id, headers = hr
    a = (await make_employee()).id
    b = (await make_employee()).id

    response = await client.post("/api/v1/offsets", json=offset_payload([a, b, a], offset_type), headers=headers)
    assert response.status_code == 201
    data = response.json()
    assert data["message"] == "Offset requests created and auto-approved successfully"
    assert [o["employee_id"] for o in data["offsets"]] == [a, b]
    for o in data["offsets"]:
        assert o["status"] == "approved"
        assert o["approved_by"] == hr_id
        assert o["remarks"] == "Auto-approved: Filed by Hrd"
        assert o["is_bank_updated"] is True
        assert o["offset_type"]["name"] == "Regular Day Offset"

    response = await client.get(f"/api/v1/offsets/bank/{a}", headers=headers)
    bank = response.json()
    assert Decimal(bank["total_hours"]) == Decimal("8")
    assert Decimal(bank["remaining_hours"]) == Decimal("8")


@pytest.mark.asyncio
async def test_superadmin_remark(client: AsyncClient, superadmin, make_employee, offset_type) -> None:
    _, headers = superadmin
    emp_id = (await make_employee()).id
    response = await client.post("/api/v1/offsets", json=offset_payload([emp_id], offset_type), headers=headers)
    assert response.json()["offsets"][0]["remarks"] == "Auto-approved: Filed by Superadmin"


@pytest.mark.asyncio
async def test_department_manager_files_pending_for_own_department(
    client: AsyncClient, make_user, make_employee, offset_type
) -> None:
    _, headers = await make_user("department_manager", departments=["IT"])
    it_id = (await make_employee(Department="IT")).id
    ops_id = (await make_employee(Department="Ops")).id

    response = await client.post("/api/v1/offsets", json=offset_payload([it_id], offset_type), headers=headers)
    assert response.status_code == 201
    data = response.json()
    assert data["message"] == "Offset requests created successfully"
    assert data["offsets"][0]["status"] == "pending"
    assert data["offsets"][0]["approved_by"] is None

    response = await client.post(
        "/api/v1/offsets", json=offset_payload([it_id, ops_id], offset_type), headers=headers
    )
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_create_validation(client: AsyncClient, hr, make_employee, offset_type) -> None:
    _, headers = hr
    emp_id = (await make_employee()).id

    response = await client.post("/api/v1/offsets", json=offset_payload([emp_id, 999], offset_type), headers=headers)
    assert response.status_code == 400
    response = await client.post("/api/v1/offsets", json=offset_payload([emp_id], 999), headers=headers)
    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid offset type"
    response = await client.post("/api/v1/offsets", json=offset_payload([], offset_type), headers=headers)
    assert response.status_code == 422
    response = await client.post("/api/v1/offsets", json=offset_payload([emp_id], offset_type, hours=0), headers=headers)
    assert response.status_code == 422
    response = await client.post("/api/v1/offsets", json=offset_payload([emp_id], offset_type, reason=""), headers=headers)
    assert response.status_code == 422
    response = await client.post(
        "/api/v1/offsets", json=offset_payload([emp_id], offset_type, reason="   "), headers=headers
    )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_approve_pending_offset_once(
    client: AsyncClient, db_session: AsyncSession, hr, make_employee, offset_type
) -> None:
    hr_id, headers = hr
    emp_id = (await make_employee()).id
    offset_id = await add_offset(db_session, emp_id, offset_type, hours=Decimal("4.5"))

    response = await client.post(
        f"/api/v1/offsets/{offset_id}/status", json={"status": "approved", "remarks": "ok"}, headers=headers
    )
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "approved"
    assert data["approved_by"] == hr_id
    assert data["approved_at"] is not None
    assert data["remarks"] == "ok"

    response = await client.post(
        f"/api/v1/offsets/{offset_id}/status", json={"status": "rejected"}, headers=headers
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "Cannot update offset that has already been approved"

    bank = (await client.get(f"/api/v1/offsets/bank/{emp_id}", headers=headers)).json()
    assert Decimal(bank["total_hours"]) == Decimal("4.5")


@pytest.mark.asyncio
async def test_reject_does_not_touch_bank(
    client: AsyncClient, db_session: AsyncSession, hr, make_employee, offset_type
) -> None:
    _, headers = hr
    emp_id = (await make_employee()).id
    offset_id = await add_offset(db_session, emp_id, offset_type)
    response = await client.post(
        f"/api/v1/offsets/{offset_id}/status", json={"status": "rejected"}, headers=headers
    )
    assert response.json()["status"] == "rejected"
    assert response.json()["is_bank_updated"] is False
    bank = (await client.get(f"/api/v1/offsets/bank/{emp_id}", headers=headers)).json()
    assert Decimal(bank["total_hours"]) == 0


@pytest.mark.asyncio
async def test_debit_needs_enough_hours(
    client: AsyncClient, db_session: AsyncSession, hr, make_employee, offset_type
) -> None:
    _, headers = hr
    emp_id = (await make_employee()).id
    debit_id = await add_offset(db_session, emp_id, offset_type, transaction_type="debit", hours=Decimal("6"))

    response = await client.post(f"/api/v1/offsets/{debit_id}/status", json={"status": "approved"}, headers=headers)
    assert response.status_code == 400
    assert response.json()["detail"].startswith("Insufficient offset hours")

    listed = (await client.get("/api/v1/offsets", params={"employee_id": emp_id}, headers=headers)).json()
    assert listed[0]["status"] == "pending"

    response = await client.post(
        "/api/v1/offsets", json=offset_payload([emp_id], offset_type, hours=8), headers=headers
    )
    assert response.status_code == 201

    response = await client.post(f"/api/v1/offsets/{debit_id}/status", json={"status": "approved"}, headers=headers)
    assert response.status_code == 200
    bank = (await client.get(f"/api/v1/offsets/bank/{emp_id}", headers=headers)).json()
    assert Decimal(bank["total_hours"]) == Decimal("8")
    assert Decimal(bank["used_hours"]) == Decimal("6")
    assert Decimal(bank["remaining_hours"]) == Decimal("2")


@pytest.mark.asyncio
async def test_update_and_delete_only_while_pending(
    client: AsyncClient, db_session: AsyncSession, hr, make_employee, offset_type
) -> None:
    _, headers = hr
    emp_id = (await make_employee()).id
    pending_id = await add_offset(db_session, emp_id, offset_type)
    approved_id = await add_offset(db_session, emp_id, offset_type, status="approved")

    response = await client.put(
        f"/api/v1/offsets/{pending_id}", json={"hours": 2, "reason": " Half shift "}, headers=headers
    )
    assert response.status_code == 200
    assert Decimal(response.json()["hours"]) == Decimal("2")
    assert response.json()["reason"] == "Half shift"

    response = await client.put(f"/api/v1/offsets/{pending_id}", json={"reason": "   "}, headers=headers)
    assert response.status_code == 422

    response = await client.put(f"/api/v1/offsets/{approved_id}", json={"hours": 2}, headers=headers)
    assert response.status_code == 400

    response = await client.delete(f"/api/v1/offsets/{approved_id}", headers=headers)
    assert response.status_code == 400
    response = await client.delete(f"/api/v1/offsets/{pending_id}", headers=headers)
    assert response.status_code == 204
    response = await client.delete(f"/api/v1/offsets/{pending_id}", headers=headers)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_list_date_range_needs_both_ends(
    client: AsyncClient, db_session: AsyncSession, hr, make_employee, offset_type
) -> None:
    _, headers = hr
    emp_id = (await make_employee()).id
    await add_offset(db_session, emp_id, offset_type, date=date(2025, 1, 5))
    await add_offset(db_session, emp_id, offset_type, date=date(2025, 3, 5))

    response = await client.get("/api/v1/offsets", params={"from_date": "2025-02-01"}, headers=headers)
    assert len(response.json()) == 2
    response = await client.get(
        "/api/v1/offsets", params={"from_date": "2025-02-01", "to_date": "2025-04-01"}, headers=headers
    )
    assert [o["date"] for o in response.json()] == ["2025-03-05"]


@pytest.mark.asyncio
async def test_bank_defaults_to_zero(client: AsyncClient, hr, make_employee) -> None:
    _, headers = hr
    emp_id = (await make_employee()).id
    bank = (await client.get(f"/api/v1/offsets/bank/{emp_id}", headers=headers)).json()
    assert bank["employee_id"] == emp_id
    assert Decimal(bank["remaining_hours"]) == 0
    response = await client.get("/api/v1/offsets/bank/999", headers=headers)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_types_listing(client: AsyncClient, hr, offset_type) -> None:
    _, headers = hr
    response = await client.get("/api/v1/offsets/types", headers=headers)
    assert [t["name"] for t in response.json()] == ["Regular Day Offset"]


@pytest.mark.asyncio
async def test_export_workbook(
    client: AsyncClient, db_session: AsyncSession, hr, make_employee, offset_type
) -> None:
    _, headers = hr
    cruz = (await make_employee(Lname="Cruz", Fname="Ana")).id
    reyes = (await make_employee(Lname="Reyes", Fname="Ben")).id
    await add_offset(db_session, cruz, offset_type)
    await add_offset(db_session, reyes, offset_type, reason="Inventory count")

    response = await client.get("/api/v1/offsets/export", params={"search": "cruz"}, headers=headers)
    assert response.status_code == 200
    assert response.headers["content-type"].startswith(
        "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
    )
    assert "attachment; filename=Offset_Requests_" in response.headers["content-disposition"]

    ws = load_workbook(BytesIO(response.content)).active
    rows = list(ws.iter_rows(values_only=True))
    assert rows[0][0] == "ID"
    assert rows[0][-1] == "Approved/Rejected By"
    assert len(rows) == 2
    assert rows[1][2] == "Cruz, Ana"

    response = await client.get("/api/v1/offsets/export", params={"search": "inventory"}, headers=headers)
    rows = list(load_workbook(BytesIO(response.content)).active.iter_rows(values_only=True))
    assert [r[2] for r in rows[1:]] == ["Reyes, Ben"]
