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
    OffsetBankResponse,
    OffsetBatchResponse,
    OffsetCreate,
    OffsetResponse,
    OffsetStatusUpdate,
    OffsetTypeResponse,
    OffsetUpdate,
)
from . import service

router = APIRouter(prefix="/api/v1/offsets", tags=["offsets"])

HR_ROLES = ("hrd_manager",)
FILING_ROLES = HR_ROLES + ("department_manager",)


@router.get("/types", response_model=List[OffsetTypeResponse])
async def list_offset_types(
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
) -> List[OffsetTypeResponse]:
    return await service.list_offset_types(db)


@router.get("/export")
async def export_offsets(
    status_filter: Optional[str] = Query(None, alias="status"),
    search: Optional[str] = None,
    from_date: Optional[date] = None,
    to_date: Optional[date] = None,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(require_roles(*HR_ROLES)),
) -> Response:
    """Download offsets matching the filters as an Excel workbook."""
    content = await service.export_offsets(db, status_filter, search, from_date, to_date)
    return Response(
        content=content,
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f"attachment; filename={export_filename('Offset_Requests')}"},
    )


@router.get("/bank/{employee_id}", response_model=OffsetBankResponse)
async def get_offset_bank(
    employee_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
) -> OffsetBankResponse:
    try:
        return await service.get_offset_bank(db, employee_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.get("", response_model=List[OffsetResponse])
async def list_offsets(
    employee_id: Optional[int] = None,
    status_filter: Optional[str] = Query(None, alias="status"),
    from_date: Optional[date] = None,
    to_date: Optional[date] = None,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(require_roles(*HR_ROLES)),
) -> List[OffsetResponse]:
    """List offsets, newest first. The date range applies only when both ends are given."""
    return await service.list_offsets(db, employee_id, status_filter, from_date, to_date)


@router.post(
    "",
    response_model=OffsetBatchResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_offsets(
    payload: OffsetCreate,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(require_roles(*FILING_ROLES)),
) -> OffsetBatchResponse:
    try:
        return await service.create_offsets(db, current_user, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.put("/{offset_id}", response_model=OffsetResponse)
async def update_offset(
    offset_id: int,
    payload: OffsetUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(require_roles(*HR_ROLES)),
) -> OffsetResponse:
    try:
        return await service.update_offset(db, offset_id, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.post("/{offset_id}/status", response_model=OffsetResponse)
async def update_offset_status(
    offset_id: int,
    payload: OffsetStatusUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(require_roles(*HR_ROLES)),
) -> OffsetResponse:
    """Approve or reject a pending offset."""
    try:
        return await service.update_offset_status(db, offset_id, current_user, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.delete("/{offset_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_offset(
    offset_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(require_roles(*HR_ROLES)),
) -> None:
    try:
        await service.delete_offset(db, offset_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
