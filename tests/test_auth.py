import pytest
from httpx import AsyncClient

from hradmin.auth.security import create_access_token


@pytest.mark.asyncio
async def test_missing_token_is_rejected(client: AsyncClient) -> None:
    response = await client.get("/api/v1/employees")
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_garbage_token_is_rejected(client: AsyncClient) -> None:
    response = await client.get("/api/v1/employees", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_expired_token_is_rejected(client: AsyncClient, hr) -> None:
    user_id, _ = hr
    token = create_access_token(subject={"sub": str(user_id)}, expires_minutes=-1)
    response = await client.get("/api/v1/employees", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_unknown_user_is_rejected(client: AsyncClient, headers_for) -> None:
    response = await client.get("/api/v1/employees", headers=headers_for(999))
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_inactive_user_is_rejected(client: AsyncClient, make_user) -> None:
    _, headers = await make_user("hrd_manager", status="DISABLED")
    response = await client.get("/api/v1/employees", headers=headers)
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_role_gate(client: AsyncClient, make_user, superadmin) -> None:
    payload = {"Lname": "Cruz", "Fname": "Ana"}
    _, employee_headers = await make_user("employee")
    response = await client.post("/api/v1/employees", json=payload, headers=employee_headers)
    assert response.status_code == 403
    assert response.json()["detail"] == "Insufficient permissions"

    response = await client.get("/api/v1/employees", headers=employee_headers)
    assert response.status_code == 200

    _, admin_headers = superadmin
    response = await client.post("/api/v1/employees", json=payload, headers=admin_headers)
    assert response.status_code == 201
