"""Leave (SLVL) filing, role-scoped visibility and approval decisions."""

import logging
from datetime import date, datetime
from typing import List, Optional

from sqlalchemy import false, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from hradmin.auth.schemas import CurrentUser
from hradmin.auth.scope import sees_all_departments
from hradmin.core.enums import LEAVE_TYPE_LABELS, RequestStatus
from hradmin.core.exceptions import ServiceError, bad_request, forbidden, not_found
from hradmin.core.export import build_xlsx
from hradmin.core.filters import clean_text, employee_search_clause
from hradmin.core.models import SLVL, Employee
from hradmin.core.workflow import decide, ensure_pending

from .bank import draws_from_bank, ensure_balance, remaining_days_by_employee
from .schemas import (
    LeaveTypeOption,
    SLVLBulkResult,
    SLVLBulkStatusUpdate,
    SLVLCreate,
    SLVLResponse,
    SLVLStatusUpdate,
)

log = logging.getLogger(__name__)

FORCE_APPROVED = "force_approved"

EXPORT_HEADERS = [
    "ID", "Employee ID", "Employee Name", "Department", "Leave Type", "Start Date", "End Date",
    "Total Days", "Half Day", "AM/PM", "With Pay", "Reason", "Status", "Approved By",
    "Approved Date", "Remarks", "Created Date",
]


def compute_total_days(start_date: date, end_date: date, half_day: bool) -> float:
    """0.5 for a half day, otherwise the inclusive count of calendar days."""
    if half_day:
        return 0.5
    return float((end_date - start_date).days + 1)


def _slvl_query():
    return select(SLVL).options(
        selectinload(SLVL.employee),
        selectinload(SLVL.approver),
    )


def _scoped(stmt, current_user: CurrentUser):
    """Restrict a query to the requests the caller may see. The query must join Employee."""
    if sees_all_departments(current_user):
        return stmt
    if current_user.managed_departments:
        return stmt.where(Employee.Department.in_(current_user.managed_departments))
    if current_user.employee_id is None:
        return stmt.where(false())
    return stmt.where(SLVL.employee_id == current_user.employee_id)


def _can_act_for(current_user: CurrentUser, employee: Employee) -> bool:
    if sees_all_departments(current_user):
        return True
    if employee.Department in current_user.managed_departments:
        return True
    return current_user.employee_id == employee.id


def _can_decide(current_user: CurrentUser, employee: Employee) -> bool:
    if sees_all_departments(current_user):
        return True
    return employee.Department in current_user.managed_departments


async def _load(db: AsyncSession, slvl_id: int) -> SLVL:
    result = await db.execute(_slvl_query().where(SLVL.id == slvl_id))
    slvl = result.scalar_one_or_none()
    if not slvl:
        raise not_found("SLVL request")
    return slvl


async def _to_responses(db: AsyncSession, slvls: List[SLVL]) -> List[SLVLResponse]:
    remaining = await remaining_days_by_employee(db, (s.employee_id for s in slvls), datetime.now().year)
    responses = []
    for s in slvls:
        item = SLVLResponse.model_validate(s)
        if draws_from_bank(s):
            item.employee_remaining_days = remaining.get((s.employee_id, s.type), 0)
        responses.append(item)
    return responses


async def _respond(db: AsyncSession, slvl_id: int) -> SLVLResponse:
    return (await _to_responses(db, [await _load(db, slvl_id)]))[0]


def list_leave_types() -> List[LeaveTypeOption]:
    return [LeaveTypeOption(value=k, label=v) for k, v in LEAVE_TYPE_LABELS.items()]


async def list_slvls(
    db: AsyncSession,
    current_user: CurrentUser,
    status: Optional[str] = None,
    leave_type: Optional[str] = None,
) -> List[SLVLResponse]:
    stmt = _scoped(_slvl_query().join(Employee, SLVL.employee_id == Employee.id), current_user)
    if status:
        stmt = stmt.where(SLVL.status == status)
    if leave_type:
        stmt = stmt.where(SLVL.type == leave_type)
    stmt = stmt.order_by(SLVL.created_at.desc(), SLVL.id.desc())
    slvls = list((await db.execute(stmt)).scalars().all())
    return await _to_responses(db, slvls)


async def _find_overlap(db: AsyncSession, employee_id: int, start_date: date, end_date: date) -> Optional[SLVL]:
    result = await db.execute(
        select(SLVL)
        .where(
            SLVL.employee_id == employee_id,
            SLVL.status != RequestStatus.REJECTED.value,
            SLVL.start_date <= end_date,
            SLVL.end_date >= start_date,
        )
        .limit(1)
    )
    return result.scalar_one_or_none()


async def create_slvl(
    db: AsyncSession,
    current_user: CurrentUser,
    payload: SLVLCreate,
) -> SLVLResponse:
    employee = await db.get(Employee, payload.employee_id)
    if not employee:
        raise not_found("Employee")
    if not _can_act_for(current_user, employee):
        raise forbidden("You can only file leave for yourself or your department")

    if await _find_overlap(db, employee.id, payload.start_date, payload.end_date):
        raise bad_request("Employee already has a leave request overlapping these dates")

    slvl = SLVL(
        employee_id=employee.id,
        type=payload.type.value,
        start_date=payload.start_date,
        end_date=payload.end_date,
        half_day=payload.half_day,
        am_pm=payload.am_pm if payload.half_day else None,
        total_days=compute_total_days(payload.start_date, payload.end_date, payload.half_day),
        with_pay=payload.with_pay,
        reason=payload.reason.strip(),
        documents_path=clean_text(payload.documents_path),
        status=RequestStatus.PENDING.value,
        created_by=current_user.id,
    )
    try:
        await ensure_balance(db, slvl, created_by=current_user.id)
    except ServiceError:
        await db.rollback()
        raise
    db.add(slvl)
    await db.commit()
    log.info(
        "[slvl.create] slvl_id=%s employee_id=%s type=%s days=%s by user_id=%s",
        slvl.id, slvl.employee_id, slvl.type, slvl.total_days, current_user.id,
    )
    return await _respond(db, slvl.id)


async def _apply_decision(
    db: AsyncSession,
    current_user: CurrentUser,
    slvl: SLVL,
    requested: str,
    remarks: Optional[str],
    default_remarks: Optional[str] = None,
) -> None:
    """Check permission, state and balance, then record the decision. Nothing is written if a check fails."""
    force = requested == FORCE_APPROVED
    if force:
        if not current_user.is_superadmin:
            raise forbidden("Only administrators can force approve leave requests")
    elif not _can_decide(current_user, slvl.employee):
        raise forbidden("You do not have permission to decide this leave request")
    ensure_pending(slvl, "a leave request")

    new_status = RequestStatus.APPROVED.value if force else requested
    if force:
        remarks = "Administrative override: " + (remarks or "Force approved by admin")
    elif not remarks:
        remarks = default_remarks

    bank = None
    if new_status == RequestStatus.APPROVED.value:
        bank = await ensure_balance(db, slvl, created_by=current_user.id)
    if bank is not None:
        bank.used_days = (bank.used_days or 0) + slvl.total_days
    decide(slvl, new_status, current_user.id, remarks)


async def update_slvl_status(
    db: AsyncSession,
    slvl_id: int,
    current_user: CurrentUser,
    payload: SLVLStatusUpdate,
) -> SLVLResponse:
    slvl = await _load(db, slvl_id)
    try:
        await _apply_decision(db, current_user, slvl, payload.status, clean_text(payload.remarks))
    except ServiceError:
        await db.rollback()
        raise
    await db.commit()
    log.info("[slvl.status] slvl_id=%s %s -> %s by user_id=%s", slvl_id, payload.status, slvl.status, current_user.id)
    db.expire(slvl)
    return await _respond(db, slvl_id)


async def bulk_update_slvl_status(
    db: AsyncSession,
    current_user: CurrentUser,
    payload: SLVLBulkStatusUpdate,
) -> SLVLBulkResult:
    """Decide each request independently; failures are reported per id and do not stop the batch."""
    remarks = clean_text(payload.remarks)
    verb = "approved" if payload.status == FORCE_APPROVED else payload.status
    success_count = 0
    errors: List[str] = []
    for slvl_id in dict.fromkeys(payload.slvl_ids):
        try:
            slvl = await _load(db, slvl_id)
            await _apply_decision(db, current_user, slvl, payload.status, remarks, f"Bulk {verb}")
            success_count += 1
        except ServiceError as e:
            errors.append(f"ID {slvl_id}: {e.message}")
    await db.commit()

    log.info(
        "[slvl.bulk_status] status=%s success=%s failed=%s by user_id=%s",
        payload.status, success_count, len(errors), current_user.id,
    )
    if success_count and not errors:
        message = f"Successfully {verb} {success_count} leave requests"
    elif success_count:
        message = f"{verb.capitalize()} {success_count} leave requests, {len(errors)} failed"
    else:
        message = "Failed to update any leave requests"
    return SLVLBulkResult(
        message=message,
        success_count=success_count,
        fail_count=len(errors),
        errors=errors,
    )


async def delete_slvl(db: AsyncSession, slvl_id: int, current_user: CurrentUser) -> None:
    slvl = await _load(db, slvl_id)
    if not _can_act_for(current_user, slvl.employee):
        raise forbidden("You do not have permission to delete this leave request")
    ensure_pending(slvl, "a leave request", action="delete")
    await db.delete(slvl)
    await db.commit()
    log.info("[slvl.delete] slvl_id=%s by user_id=%s", slvl_id, current_user.id)


async def export_slvls(
    db: AsyncSession,
    current_user: CurrentUser,
    status: Optional[str] = None,
    search: Optional[str] = None,
    from_date: Optional[date] = None,
    to_date: Optional[date] = None,
) -> bytes:
    stmt = _scoped(_slvl_query().join(Employee, SLVL.employee_id == Employee.id), current_user)
    if status:
        stmt = stmt.where(SLVL.status == status)
    if search and search.strip():
        stmt = stmt.where(employee_search_clause(search, SLVL.reason))
    if from_date:
        stmt = stmt.where(SLVL.start_date >= from_date)
    if to_date:
        stmt = stmt.where(SLVL.end_date <= to_date)
    stmt = stmt.order_by(SLVL.created_at.desc(), SLVL.id.desc())
    slvls = (await db.execute(stmt)).scalars().all()

    rows = []
    for s in slvls:
        emp = s.employee
        rows.append([
            s.id,
            emp.idno if emp else "",
            f"{emp.Lname}, {emp.Fname}" if emp else "",
            emp.Department if emp else "",
            s.type_label,
            s.start_date,
            s.end_date,
            s.total_days,
            s.half_day,
            s.am_pm if s.half_day else "",
            s.with_pay,
            s.reason,
            s.status_label,
            s.approver.name if s.approver else "",
            s.approved_at,
            s.remarks,
            s.created_at,
        ])
    return build_xlsx("SLVL", EXPORT_HEADERS, rows)
