"""Yearly sick / vacation leave banks."""

import logging
from datetime import datetime
from typing import Dict, Iterable, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from hradmin.auth.schemas import CurrentUser
from hradmin.core.config import settings
from hradmin.core.enums import BANKED_LEAVE_TYPES
from hradmin.core.exceptions import bad_request, not_found
from hradmin.core.models import SLVL, Employee, SLVLBank

from .schemas import SLVLBankAddDays, SLVLBankBalance, SLVLBankSummary

log = logging.getLogger(__name__)


def draws_from_bank(slvl: SLVL) -> bool:
    return slvl.with_pay and slvl.type in BANKED_LEAVE_TYPES


async def find_bank(db: AsyncSession, employee_id: int, leave_type: str, year: int) -> Optional[SLVLBank]:
    result = await db.execute(
        select(SLVLBank).where(
            SLVLBank.employee_id == employee_id,
            SLVLBank.leave_type == leave_type,
            SLVLBank.year == year,
        )
    )
    return result.scalar_one_or_none()


async def get_or_create_bank(
    db: AsyncSession,
    employee_id: int,
    leave_type: str,
    year: int,
    created_by: Optional[int] = None,
) -> SLVLBank:
    """Return the bank for the year, creating it with the default allowance on first use."""
    bank = await find_bank(db, employee_id, leave_type, year)
    if bank is None:
        bank = SLVLBank(
            employee_id=employee_id,
            leave_type=leave_type,
            year=year,
            total_days=settings.default_leave_bank_days,
            used_days=0,
            created_by=created_by,
            notes="Auto-created default bank",
        )
        db.add(bank)
        await db.flush()
        log.info("[slvl.bank] created default %s bank employee_id=%s year=%s", leave_type, employee_id, year)
    return bank


async def ensure_balance(db: AsyncSession, slvl: SLVL, created_by: Optional[int] = None) -> Optional[SLVLBank]:
    """Raise if the employee's bank cannot cover the request. Returns the bank to charge, if any."""
    if not draws_from_bank(slvl):
        return None
    bank = await get_or_create_bank(db, slvl.employee_id, slvl.type, slvl.start_date.year, created_by)
    if bank.remaining_days < slvl.total_days:
        log.warning(
            "[slvl.bank] insufficient %s balance employee_id=%s remaining=%s requested=%s",
            slvl.type, slvl.employee_id, bank.remaining_days, slvl.total_days,
        )
        raise bad_request(
            f"Insufficient {slvl.type} leave days. Employee only has {bank.remaining_days:g} days available."
        )
    return bank


async def remaining_days_by_employee(
    db: AsyncSession,
    employee_ids: Iterable[int],
    year: int,
) -> Dict[Tuple[int, str], float]:
    ids = list(set(employee_ids))
    if not ids:
        return {}
    result = await db.execute(
        select(SLVLBank).where(SLVLBank.employee_id.in_(ids), SLVLBank.year == year)
    )
    return {(b.employee_id, b.leave_type): b.remaining_days for b in result.scalars().all()}


def _balance(bank: Optional[SLVLBank]) -> Optional[SLVLBankBalance]:
    if bank is None:
        return None
    return SLVLBankBalance(
        leave_type=bank.leave_type,
        year=bank.year,
        total_days=bank.total_days,
        used_days=bank.used_days,
        remaining_days=bank.remaining_days,
        notes=bank.notes,
    )


async def get_bank_summary(db: AsyncSession, employee_id: int, year: Optional[int] = None) -> SLVLBankSummary:
    if not await db.get(Employee, employee_id):
        raise not_found("Employee")
    year = year or datetime.now().year
    return SLVLBankSummary(
        employee_id=employee_id,
        year=year,
        sick=_balance(await find_bank(db, employee_id, "sick", year)),
        vacation=_balance(await find_bank(db, employee_id, "vacation", year)),
    )


async def add_days_to_bank(
    db: AsyncSession,
    current_user: CurrentUser,
    payload: SLVLBankAddDays,
) -> SLVLBankBalance:
    employee = await db.get(Employee, payload.employee_id)
    if not employee:
        raise not_found("Employee")
    bank = await find_bank(db, payload.employee_id, payload.leave_type, payload.year)
    if bank is None:
        bank = SLVLBank(
            employee_id=payload.employee_id,
            leave_type=payload.leave_type,
            year=payload.year,
            total_days=payload.days,
            used_days=0,
            created_by=current_user.id,
            notes=payload.notes or f"Manual addition by {current_user.name}",
        )
        db.add(bank)
    else:
        bank.total_days = (bank.total_days or 0) + payload.days
        entry = f"{datetime.now().strftime('%Y-%m-%d %H:%M')} - Added {payload.days:g} days by {current_user.name}"
        if payload.notes:
            entry += f": {payload.notes}"
        bank.notes = f"{bank.notes}\n{entry}" if bank.notes else entry
    await db.commit()
    await db.refresh(bank)
    log.info(
        "[slvl.bank] added %s %s days employee_id=%s year=%s by user_id=%s",
        payload.days, payload.leave_type, payload.employee_id, payload.year, current_user.id,
    )
    return _balance(bank)
