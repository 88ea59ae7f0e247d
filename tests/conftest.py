import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")

from datetime import date
from typing import AsyncGenerator, Dict, Iterable, Optional

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from hradmin.auth.security import create_access_token
from hradmin.core.models import DepartmentManager, Employee, OffsetType, ScheduleType, User
from hradmin.db.session import Base, get_db
from hradmin.main import app


TEST_DATABASE_URL = "sqlite+aiosqlite://"


@pytest.fixture()
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Fresh in-memory database per test; the app shares the test's session."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        future=True,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async_session = async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session() as session:

        async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
            yield session

        app.dependency_overrides[get_db] = override_get_db
        yield session

    app.dependency_overrides.pop(get_db, None)
    await engine.dispose()


@pytest.fixture()
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client bound to the FastAPI app."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


def auth_headers(user_id: int) -> Dict[str, str]:
    token = create_access_token(subject={"sub": str(user_id)})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def make_employee(db_session: AsyncSession):
    counter = {"n": 0}

    async def _make(**overrides) -> Employee:
        counter["n"] += 1
        n = counter["n"]
        data = {
            "idno": f"E{n:04d}",
            "Lname": f"Last{n}",
            "Fname": f"First{n}",
            "Email": f"employee{n}@example.com",
            "Department": "IT",
            "Jobtitle": "Engineer",
            "JobStatus": "Active",
            "HiredDate": date(2023, 1, 9),
        }
        data.update(overrides)
        emp = Employee(**data)
        db_session.add(emp)
        await db_session.commit()
        await db_session.refresh(emp)
        return emp

    return _make


@pytest.fixture()
def make_user(db_session: AsyncSession):
    """Create a user and return (user_id, auth headers)."""
    counter = {"n": 0}

    async def _make(
        role: str = "hrd_manager",
        employee_id: Optional[int] = None,
        departments: Iterable[str] = (),
        status: str = "ACTIVE",
    ):
        counter["n"] += 1
        user = User(
            name=f"{role} {counter['n']}",
            email=f"{role}{counter['n']}@example.com",
            role=role,
            employee_id=employee_id,
            status=status,
        )
        db_session.add(user)
        await db_session.flush()
        for department in departments:
            db_session.add(DepartmentManager(manager_id=user.id, department=department))
        await db_session.commit()
        return user.id, auth_headers(user.id)

    return _make


@pytest.fixture()
async def hr(make_user):
    return await make_user("hrd_manager")


@pytest.fixture()
async def superadmin(make_user):
    return await make_user("superadmin")


@pytest.fixture()
async def offset_type(db_session: AsyncSession) -> int:
    ot = OffsetType(name="Regular Day Offset", description="Time off in lieu of working on a regular day")
    db_session.add(ot)
    await db_session.commit()
    return ot.id


@pytest.fixture()
async def schedule_type(db_session: AsyncSession) -> int:
    st = ScheduleType(name="Night Shift", description="Evening/night work hours")
    db_session.add(st)
    await db_session.commit()
    return st.id


@pytest.fixture()
def headers_for():
    return auth_headers
