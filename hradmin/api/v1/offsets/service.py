"""Offset filing, decisions and the per-employee offset-hours bank."""

import logging
from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from hradmin.auth.schemas import CurrentUser
from hradmin.auth.scope import resolve_filing_employees
from hradmin.core.enums import AUTO_APPROVE_ROLES, OffsetTransactionType, RequestStatus
from hradmin.core.exceptions import ServiceError, bad_request, not_found
from hradmin.core.export import build_xlsx
from hradmin.core.filters import clean_text, employee_search_clause
from hradmin.core.models import Employee, Offset, OffsetBank, OffsetType
from hradmin.core.workflow import auto_approve, decide, ensure_pending

from .schemas import (
    OffsetBankResponse,
    OffsetBatchResponse,
    OffsetCreate,
    OffsetResponse,
    OffsetStatusUpdate,
    OffsetTypeResponse,
    OffsetUpdate,
)

log = logging.getLogger(__name__)

ZERO = Decimal("0")

EXPORT_HEADERS = [
    "ID", "Employee ID", "Employee Name", "Department", "Position", "Work Date", "Offset Date",
    "Hours", "Offset Type", "Transaction", "Status", "Reason", "Remarks", "Filed Date",
    "Action Date", "Approved/Rejected By",
]


def _offset_query():
    return select(Offset).options(
        selectinload(Offset.employee),
        selectinload(Offset.offset_type),
        selectinload(Offset.approver),
    )


async def _load(db: AsyncSession, offset_id: int) -> Offset:
    result = await db.execute(_offset_query().where(Offset.id == offset_id))
    offset = result.scalar_one_or_none()
    if not offset:
        raise not_found("Offset")
    return offset


async def _require_offset_type(db: AsyncSession, offset_type_id: int) -> OffsetType:
    offset_type = await db.get(OffsetType, offset_type_id)
    if not offset_type:
        raise bad_request("Invalid offset type")
    return offset_type


async def list_offset_types(db: AsyncSession) -> List[OffsetTypeResponse]:
    result = await db.execute(select(OffsetType).order_by(OffsetType.id))
    return [OffsetTypeResponse.model_validate(t) for t in result.scalars().all()]


async def list_offsets(
    db: AsyncSession,
    employee_id: Optional[int] = None,
    status: Optional[str] = None,
    from_date: Optional[date] = None,
    to_date: Optional[date] = None,
) -> List[OffsetResponse]:
    stmt = _offset_query()
    if employee_id is not None:
        stmt = stmt.where(Offset.employee_id == employee_id)
    if status:
        stmt = stmt.where(Offset.status == status)
    if from_date and to_date:
        stmt = stmt.where(Offset.date.between(from_date, to_date))
    stmt = stmt.order_by(Offset.created_at.desc(), Offset.id.desc())
    result = await db.execute(stmt)
    return [OffsetResponse.model_validate(o) for o in result.scalars().all()]


async def _get_or_create_bank(db: AsyncSession, employee_id: int) -> OffsetBank:
    result = await db.execute(select(OffsetBank).where(OffsetBank.employee_id == employee_id))
    bank = result.scalar_one_or_none()
    if bank is None:
        bank = OffsetBank(
            employee_id=employee_id,
            total_hours=ZERO,
            used_hours=ZERO,
            remaining_hours=ZERO,
        )
        db.add(bank)
    return bank


async def _apply_to_bank(db: AsyncSession, offset: Offset) -> None:
    """Credit or debit an approved offset against the employee's bank, exactly once."""
    if offset.is_bank_updated:
        return
    bank = await _get_or_create_bank(db, offset.employee_id)
    hours = Decimal(offset.hours)
    total = Decimal(bank.total_hours or ZERO)
    used = Decimal(bank.used_hours or ZERO)
    if offset.transaction_type == OffsetTransactionType.DEBIT.value:
        if total - used < hours:
            log.warning(
                "[offsets.bank] insufficient hours employee_id=%s remaining=%s requested=%s",
                offset.employee_id, total - used, hours,
            )
            raise bad_request(
                f"Insufficient offset hours. Employee only has {total - used} hours available."
            )
        used += hours
    else:
        total += hours
    bank.total_hours = total
    bank.used_hours = used
    bank.remaining_hours = total - used
    bank.last_updated = datetime.utcnow()
    bank.notes = f"Offset #{offset.id} {offset.transaction_type} {hours}h"
    offset.is_bank_updated = True


async def create_offsets(
    db: AsyncSession,
    current_user: CurrentUser,
    payload: OffsetCreate,
) -> OffsetBatchResponse:
    """File one offset per selected employee. HR and superadmin filings are approved immediately."""
    await _require_offset_type(db, payload.offset_type_id)
    employee_ids = await resolve_filing_employees(db, current_user, payload.employee_ids)

    is_auto_approved = current_user.role in AUTO_APPROVE_ROLES
    created: List[Offset] = []
    for employee_id in employee_ids:
        offset = Offset(
            employee_id=employee_id,
            offset_type_id=payload.offset_type_id,
            date=payload.date,
            workday=payload.workday,
            hours=payload.hours,
            reason=payload.reason.strip(),
            transaction_type=payload.transaction_type.value,
            status=RequestStatus.PENDING.value,
            is_bank_updated=False,
        )
        db.add(offset)
        created.append(offset)
    await db.flush()

    if is_auto_approved:
        try:
            for offset in created:
                auto_approve(offset, current_user.id, current_user.role_label)
                await _apply_to_bank(db, offset)
        except ServiceError:
            await db.rollback()
            raise
    await db.commit()

    log.info(
        "[offsets.create] user_id=%s records=%s auto_approved=%s",
        current_user.id, len(created), is_auto_approved,
    )
    message = (
        "Offset requests created and auto-approved successfully"
        if is_auto_approved
        else "Offset requests created successfully"
    )
    offsets = [OffsetResponse.model_validate(await _load(db, o.id)) for o in created]
    return OffsetBatchResponse(message=message, offsets=offsets)


async def update_offset(
    db: AsyncSession,
    offset_id: int,
    payload: OffsetUpdate,
) -> OffsetResponse:
    offset = await _load(db, offset_id)
    ensure_pending(offset, "offset")
    changes = payload.model_dump(exclude_unset=True, exclude_none=True)
    if "offset_type_id" in changes:
        await _require_offset_type(db, changes["offset_type_id"])
    if "reason" in changes:
        changes["reason"] = changes["reason"].strip()
    for field, value in changes.items():
        setattr(offset, field, value)
    await db.commit()
    db.expire(offset)
    return OffsetResponse.model_validate(await _load(db, offset_id))


async def update_offset_status(
    db: AsyncSession,
    offset_id: int,
    current_user: CurrentUser,
    payload: OffsetStatusUpdate,
) -> OffsetResponse:
    offset = await _load(db, offset_id)
    ensure_pending(offset, "offset")
    decide(offset, payload.status, current_user.id, clean_text(payload.remarks))
    if offset.status == RequestStatus.APPROVED.value:
        try:
            await _apply_to_bank(db, offset)
        except ServiceError:
            await db.rollback()
            raise
    await db.commit()
    log.info("[offsets.status] offset_id=%s -> %s by user_id=%s", offset_id, offset.status, current_user.id)
    db.expire(offset)
    return OffsetResponse.model_validate(await _load(db, offset_id))


async def delete_offset(db: AsyncSession, offset_id: int) -> None:
    offset = await _load(db, offset_id)
    ensure_pending(offset, "offset", action="delete")
    await db.delete(offset)
    await db.commit()
    log.info("[offsets.delete] offset_id=%s", offset_id)


async def get_offset_bank(db: AsyncSession, employee_id: int) -> OffsetBankResponse:
    if not await db.get(Employee, employee_id):
        raise not_found("Employee")
    result = await db.execute(select(OffsetBank).where(OffsetBank.employee_id == employee_id))
    bank = result.scalar_one_or_none()
    if bank is None:
        return OffsetBankResponse(
            employee_id=employee_id, total_hours=ZERO, used_hours=ZERO, remaining_hours=ZERO
        )
    return OffsetBankResponse(
        employee_id=bank.employee_id,
        total_hours=bank.total_hours,
        used_hours=bank.used_hours,
        remaining_hours=bank.remaining_hours,
        last_updated=bank.last_updated,
        notes=bank.notes,
    )


async def export_offsets(
    db: AsyncSession,
    status: Optional[str] = None,
    search: Optional[str] = None,
    from_date: Optional[date] = None,
    to_date: Optional[date] = None,
) -> bytes:
    stmt = _offset_query().join(Employee, Offset.employee_id == Employee.id)
    if status:
        stmt = stmt.where(Offset.status == status)
    if search and search.strip():
        stmt = stmt.where(employee_search_clause(search, Offset.reason))
    if from_date:
        stmt = stmt.where(Offset.date >= from_date)
    if to_date:
        stmt = stmt.where(Offset.date <= to_date)
    stmt = stmt.order_by(Offset.created_at.desc(), Offset.id.desc())
    offsets = (await db.execute(stmt)).scalars().all()

    rows = []
    for o in offsets:
        emp = o.employee
        rows.append([
            o.id,
            emp.idno if emp else "",
            f"{emp.Lname}, {emp.Fname}" if emp else "",
            emp.Department if emp else "",
            emp.Jobtitle if emp else "",
            o.date,
            o.workday,
            float(o.hours),
            o.offset_type.name if o.offset_type else "",
            o.transaction_type.capitalize(),
            o.status.capitalize(),
            o.reason,
            o.remarks,
            o.created_at,
            o.approved_at,
            o.approver.name if o.approver else "",
        ])
    return build_xlsx("Offsets", EXPORT_HEADERS, rows)
