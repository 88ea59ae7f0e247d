from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from hradmin.auth.dependencies import get_current_user
from hradmin.auth.rbac import require_roles
from hradmin.auth.schemas import CurrentUser
from hradmin.core.exceptions import ServiceError
from hradmin.core.export import XLSX_MEDIA_TYPE, export_filename
from hradmin.db.session import get_db

from .schemas import (
    LeaveTypeOption,
    SLVLBankAddDays,
    SLVLBankBalance,
    SLVLBankSummary,
    SLVLBulkResult,
    SLVLBulkStatusUpdate,
    SLVLCreate,
    SLVLResponse,
    SLVLStatusUpdate,
)
from . import bank, service

router = APIRouter(prefix="/api/v1/slvl", tags=["slvl"])


@router.get("/types", response_model=List[LeaveTypeOption])
async def list_leave_types(
    current_user: CurrentUser = Depends(get_current_user),
) -> List[LeaveTypeOption]:
    return service.list_leave_types()


@router.get("/export")
async def export_slvls(
    status_filter: Optional[str] = Query(None, alias="status"),
    search: Optional[str] = None,
    from_date: Optional[date] = None,
    to_date: Optional[date] = None,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
) -> Response:
    """Download the leave requests visible to the caller as an Excel workbook."""
    content = await service.export_slvls(db, current_user, status_filter, search, from_date, to_date)
    return Response(
        content=content,
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f"attachment; filename={export_filename('SLVL_Requests')}"},
    )


@router.get("/bank/{employee_id}", response_model=SLVLBankSummary)
async def get_slvl_bank(
    employee_id: int,
    year: Optional[int] = None,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
) -> SLVLBankSummary:
    try:
        return await bank.get_bank_summary(db, employee_id, year)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.post("/bank/add-days", response_model=SLVLBankBalance)
async def add_days_to_bank(
    payload: SLVLBankAddDays,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(require_roles("hrd_manager")),
) -> SLVLBankBalance:
    try:
        return await bank.add_days_to_bank(db, current_user, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.post("/bulk-status", response_model=SLVLBulkResult)
async def bulk_update_slvl_status(
    payload: SLVLBulkStatusUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
) -> SLVLBulkResult:
    return await service.bulk_update_slvl_status(db, current_user, payload)


@router.get("", response_model=List[SLVLResponse])
async def list_slvls(
    status_filter: Optional[str] = Query(None, alias="status"),
    leave_type: Optional[str] = Query(None, alias="type"),
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
) -> List[SLVLResponse]:
    """Leave requests visible to the caller, newest first."""
    return await service.list_slvls(db, current_user, status_filter, leave_type)


@router.post("", response_model=SLVLResponse, status_code=status.HTTP_201_CREATED)
async def create_slvl(
    payload: SLVLCreate,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
) -> SLVLResponse:
    try:
        return await service.create_slvl(db, current_user, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.post("/{slvl_id}/status", response_model=SLVLResponse)
async def update_slvl_status(
    slvl_id: int,
    payload: SLVLStatusUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
) -> SLVLResponse:
    try:
        return await service.update_slvl_status(db, slvl_id, current_user, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.delete("/{slvl_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_slvl(
    slvl_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
) -> None:
    try:
        await service.delete_slvl(db, slvl_id, current_user)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
