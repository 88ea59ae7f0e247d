import logging
from datetime import date
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from hradmin.auth.schemas import CurrentUser
from hradmin.auth.scope import resolve_filing_employees
from hradmin.core.enums import AUTO_APPROVE_ROLES, RequestStatus
from hradmin.core.exceptions import bad_request, not_found
from hradmin.core.export import build_xlsx
from hradmin.core.filters import clean_text, employee_search_clause
from hradmin.core.models import Employee, ScheduleType, TimeSchedule
from hradmin.core.workflow import auto_approve, decide, ensure_pending

from .schemas import (
    ScheduleTypeResponse,
    TimeScheduleBatchResponse,
    TimeScheduleCreate,
    TimeScheduleResponse,
    TimeScheduleStatusUpdate,
)

log = logging.getLogger(__name__)

EXPORT_HEADERS = [
    "ID", "Employee ID", "Employee Name", "Department", "Schedule Type", "Effective Date",
    "End Date", "Current Schedule", "New Schedule", "Start Time", "End Time", "Reason",
    "Status", "Approved By", "Approved Date", "Remarks", "Filed Date",
]


def _schedule_query():
    return select(TimeSchedule).options(
        selectinload(TimeSchedule.employee),
        selectinload(TimeSchedule.schedule_type),
        selectinload(TimeSchedule.approver),
    )


async def _load(db: AsyncSession, schedule_id: int) -> TimeSchedule:
    result = await db.execute(_schedule_query().where(TimeSchedule.id == schedule_id))
    schedule = result.scalar_one_or_none()
    if not schedule:
        raise not_found("Time schedule")
    return schedule


async def list_schedule_types(db: AsyncSession, active_only: bool = True) -> List[ScheduleTypeResponse]:
    stmt = select(ScheduleType)
    if active_only:
        stmt = stmt.where(ScheduleType.is_active.is_(True))
    result = await db.execute(stmt.order_by(ScheduleType.id))
    return [ScheduleTypeResponse.model_validate(t) for t in result.scalars().all()]


async def list_time_schedules(
    db: AsyncSession,
    employee_id: Optional[int] = None,
    status: Optional[str] = None,
) -> List[TimeScheduleResponse]:
    stmt = _schedule_query()
    if employee_id is not None:
        stmt = stmt.where(TimeSchedule.employee_id == employee_id)
    if status:
        stmt = stmt.where(TimeSchedule.status == status)
    stmt = stmt.order_by(TimeSchedule.created_at.desc(), TimeSchedule.id.desc())
    result = await db.execute(stmt)
    return [TimeScheduleResponse.model_validate(s) for s in result.scalars().all()]


async def create_time_schedules(
    db: AsyncSession,
    current_user: CurrentUser,
    payload: TimeScheduleCreate,
) -> TimeScheduleBatchResponse:
    """File one schedule change per selected employee; HR and superadmin filings are approved immediately."""
    if not await db.get(ScheduleType, payload.schedule_type_id):
        raise bad_request("Invalid schedule type")
    employee_ids = await resolve_filing_employees(db, current_user, payload.employee_ids)

    is_auto_approved = current_user.role in AUTO_APPROVE_ROLES
    created: List[TimeSchedule] = []
    for employee_id in employee_ids:
        schedule = TimeSchedule(
            employee_id=employee_id,
            schedule_type_id=payload.schedule_type_id,
            effective_date=payload.effective_date,
            end_date=payload.end_date,
            current_schedule=clean_text(payload.current_schedule),
            new_schedule=clean_text(payload.new_schedule),
            new_start_time=payload.new_start_time,
            new_end_time=payload.new_end_time,
            reason=payload.reason,
            status=RequestStatus.PENDING.value,
            created_by=current_user.id,
        )
        if is_auto_approved:
            auto_approve(schedule, current_user.id, current_user.role_label)
        db.add(schedule)
        created.append(schedule)
    await db.commit()

    log.info(
        "[time_schedules.create] user_id=%s records=%s auto_approved=%s",
        current_user.id, len(created), is_auto_approved,
    )
    message = (
        "Time schedule requests created and auto-approved successfully"
        if is_auto_approved
        else "Time schedule requests created successfully"
    )
    schedules = [TimeScheduleResponse.model_validate(await _load(db, s.id)) for s in created]
    return TimeScheduleBatchResponse(message=message, time_schedules=schedules)


async def update_time_schedule_status(
    db: AsyncSession,
    schedule_id: int,
    current_user: CurrentUser,
    payload: TimeScheduleStatusUpdate,
) -> TimeScheduleResponse:
    schedule = await _load(db, schedule_id)
    ensure_pending(schedule, "a schedule change")
    decide(schedule, payload.status, current_user.id, clean_text(payload.remarks))
    await db.commit()
    log.info(
        "[time_schedules.status] schedule_id=%s -> %s by user_id=%s",
        schedule_id, schedule.status, current_user.id,
    )
    db.expire(schedule)
    return TimeScheduleResponse.model_validate(await _load(db, schedule_id))


async def delete_time_schedule(db: AsyncSession, schedule_id: int) -> None:
    schedule = await _load(db, schedule_id)
    ensure_pending(schedule, "a schedule change", action="delete")
    await db.delete(schedule)
    await db.commit()
    log.info("[time_schedules.delete] schedule_id=%s", schedule_id)


async def export_time_schedules(
    db: AsyncSession,
    status: Optional[str] = None,
    search: Optional[str] = None,
    from_date: Optional[date] = None,
    to_date: Optional[date] = None,
) -> bytes:
    stmt = (
        _schedule_query()
        .join(Employee, TimeSchedule.employee_id == Employee.id)
        .join(ScheduleType, TimeSchedule.schedule_type_id == ScheduleType.id)
    )
    if status:
        stmt = stmt.where(TimeSchedule.status == status)
    if search and search.strip():
        stmt = stmt.where(employee_search_clause(search, TimeSchedule.reason, ScheduleType.name))
    if from_date:
        stmt = stmt.where(TimeSchedule.effective_date >= from_date)
    if to_date:
        stmt = stmt.where(TimeSchedule.effective_date <= to_date)
    stmt = stmt.order_by(TimeSchedule.created_at.desc(), TimeSchedule.id.desc())
    schedules = (await db.execute(stmt)).scalars().all()

    rows = []
    for s in schedules:
        emp = s.employee
        rows.append([
            s.id,
            emp.idno if emp else "",
            f"{emp.Lname}, {emp.Fname}" if emp else "",
            emp.Department if emp else "",
            s.schedule_type.name if s.schedule_type else "",
            s.effective_date,
            s.end_date,
            s.current_schedule,
            s.new_schedule,
            s.new_start_time,
            s.new_end_time,
            s.reason,
            s.status.capitalize(),
            s.approver.name if s.approver else "",
            s.approved_at,
            s.remarks,
            s.created_at,
        ])
    return build_xlsx("Time Schedules", EXPORT_HEADERS, rows)
