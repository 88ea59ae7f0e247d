from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from hradmin.auth.dependencies import get_current_user
from hradmin.auth.rbac import require_roles
from hradmin.auth.schemas import CurrentUser
from hradmin.core.enums import JobStatus
from hradmin.core.exceptions import ServiceError
from hradmin.db.session import get_db

from .schemas import EmployeeCreate, EmployeeResponse, EmployeeUpdate
from . import service

router = APIRouter(prefix="/api/v1/employees", tags=["employees"])

HR_ROLES = ("hrd_manager",)


@router.get("", response_model=List[EmployeeResponse])
async def list_employees(
    status_filter: Optional[str] = Query(
        None, alias="status", description="all | Active | Inactive | Blocked | On Leave"
    ),
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
) -> List[EmployeeResponse]:
    return await service.list_employees(db, status_filter)


@router.get("/departments", response_model=List[str])
async def list_departments(
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
) -> List[str]:
    """Distinct departments, for filter dropdowns."""
    return await service.list_departments(db)


@router.get("/{employee_id}", response_model=EmployeeResponse)
async def get_employee(
    employee_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
) -> EmployeeResponse:
    try:
        return await service.get_employee(db, employee_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.post(
    "",
    response_model=EmployeeResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_employee(
    payload: EmployeeCreate,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(require_roles(*HR_ROLES)),
) -> EmployeeResponse:
    try:
        return await service.create_employee(db, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.put("/{employee_id}", response_model=EmployeeResponse)
async def update_employee(
    employee_id: int,
    payload: EmployeeUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(require_roles(*HR_ROLES)),
) -> EmployeeResponse:
    try:
        return await service.update_employee(db, employee_id, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.delete("/{employee_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_employee(
    employee_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(require_roles(*HR_ROLES)),
) -> None:
    try:
        await service.delete_employee(db, employee_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


async def _mark(db: AsyncSession, employee_id: int, new_status: JobStatus) -> EmployeeResponse:
    try:
        return await service.update_job_status(db, employee_id, new_status)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.post("/{employee_id}/mark-active", response_model=EmployeeResponse)
async def mark_active(
    employee_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(require_roles(*HR_ROLES)),
) -> EmployeeResponse:
    return await _mark(db, employee_id, JobStatus.ACTIVE)


@router.post("/{employee_id}/mark-inactive", response_model=EmployeeResponse)
async def mark_inactive(
    employee_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(require_roles(*HR_ROLES)),
) -> EmployeeResponse:
    return await _mark(db, employee_id, JobStatus.INACTIVE)


@router.post("/{employee_id}/mark-blocked", response_model=EmployeeResponse)
async def mark_blocked(
    employee_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(require_roles(*HR_ROLES)),
) -> EmployeeResponse:
    return await _mark(db, employee_id, JobStatus.BLOCKED)
