import logging
from typing import List, Optional

from fastapi import status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from hradmin.core.enums import JobStatus
from hradmin.core.exceptions import ServiceError, bad_request, not_found
from hradmin.core.models import SLVL, Employee, Offset, TimeSchedule

from .schemas import EmployeeCreate, EmployeeResponse, EmployeeUpdate

log = logging.getLogger(__name__)

STATUS_FILTER_ALL = "all"

# Target status -> statuses it may be reached from. Mirrors the row actions of the employee list.
ALLOWED_TRANSITIONS = {
    JobStatus.BLOCKED.value: (JobStatus.ACTIVE.value, JobStatus.INACTIVE.value, JobStatus.ON_LEAVE.value),
    JobStatus.INACTIVE.value: (JobStatus.ACTIVE.value,),
    JobStatus.ACTIVE.value: (JobStatus.INACTIVE.value, JobStatus.BLOCKED.value),
}


async def list_employees(
    db: AsyncSession,
    job_status: Optional[str] = None,
) -> List[EmployeeResponse]:
    stmt = select(Employee)
    if job_status and job_status != STATUS_FILTER_ALL:
        stmt = stmt.where(Employee.JobStatus == job_status)
    stmt = stmt.order_by(Employee.Lname, Employee.Fname)
    result = await db.execute(stmt)
    return [EmployeeResponse.model_validate(e) for e in result.scalars().all()]


async def list_departments(db: AsyncSession) -> List[str]:
    result = await db.execute(
        select(Employee.Department)
        .where(Employee.Department.is_not(None))
        .distinct()
        .order_by(Employee.Department)
    )
    return [d for d in result.scalars().all() if d]


async def get_employee(db: AsyncSession, employee_id: int) -> EmployeeResponse:
    emp = await db.get(Employee, employee_id)
    if not emp:
        raise not_found("Employee")
    return EmployeeResponse.model_validate(emp)


async def create_employee(db: AsyncSession, payload: EmployeeCreate) -> EmployeeResponse:
    data = payload.model_dump()
    data["JobStatus"] = payload.JobStatus.value
    emp = Employee(**data)
    db.add(emp)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise ServiceError("Employee ID number or email already exists", status.HTTP_409_CONFLICT)
    await db.refresh(emp)
    log.info("[employees.create] employee_id=%s idno=%s", emp.id, emp.idno)
    return EmployeeResponse.model_validate(emp)


async def update_employee(
    db: AsyncSession,
    employee_id: int,
    payload: EmployeeUpdate,
) -> EmployeeResponse:
    emp = await db.get(Employee, employee_id)
    if not emp:
        raise not_found("Employee")
    for field, value in payload.model_dump(exclude_unset=True).items():
        setattr(emp, field, value)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise ServiceError("Employee ID number or email already exists", status.HTTP_409_CONFLICT)
    await db.refresh(emp)
    return EmployeeResponse.model_validate(emp)


async def delete_employee(db: AsyncSession, employee_id: int) -> None:
    emp = await db.get(Employee, employee_id)
    if not emp:
        raise not_found("Employee")
    for model in (Offset, SLVL, TimeSchedule):
        has_rows = (
            await db.execute(select(model.id).where(model.employee_id == employee_id).limit(1))
        ).scalar_one_or_none()
        if has_rows:
            raise ServiceError(
                "Employee has leave, offset or schedule records and cannot be deleted",
                status.HTTP_409_CONFLICT,
            )
    await db.delete(emp)
    await db.commit()
    log.info("[employees.delete] employee_id=%s", employee_id)


async def update_job_status(
    db: AsyncSession,
    employee_id: int,
    new_status: JobStatus,
) -> EmployeeResponse:
    """Move an employee to Active / Inactive / Blocked if the current status allows it."""
    emp = await db.get(Employee, employee_id)
    if not emp:
        raise not_found("Employee")
    allowed_from = ALLOWED_TRANSITIONS.get(new_status.value, ())
    if emp.JobStatus not in allowed_from:
        log.warning(
            "[employees.status] rejected employee_id=%s %s -> %s",
            employee_id, emp.JobStatus, new_status.value,
        )
        raise bad_request(f"Cannot change status from {emp.JobStatus} to {new_status.value}")
    emp.JobStatus = new_status.value
    await db.commit()
    await db.refresh(emp)
    log.info("[employees.status] employee_id=%s -> %s", employee_id, new_status.value)
    return EmployeeResponse.model_validate(emp)
