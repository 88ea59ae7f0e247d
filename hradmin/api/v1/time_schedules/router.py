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
    ScheduleTypeResponse,
    TimeScheduleBatchResponse,
    TimeScheduleCreate,
    TimeScheduleResponse,
    TimeScheduleStatusUpdate,
)
from . import service

router = APIRouter(prefix="/api/v1/time-schedules", tags=["time-schedules"])

HR_ROLES = ("hrd_manager",)
FILING_ROLES = HR_ROLES + ("department_manager",)


@router.get("/types", response_model=List[ScheduleTypeResponse])
async def list_schedule_types(
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
) -> List[ScheduleTypeResponse]:
    return await service.list_schedule_types(db)


@router.get("/export")
async def export_time_schedules(
    status_filter: Optional[str] = Query(None, alias="status"),
    search: Optional[str] = None,
    from_date: Optional[date] = None,
    to_date: Optional[date] = None,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(require_roles(*HR_ROLES)),
) -> Response:
    content = await service.export_time_schedules(db, status_filter, search, from_date, to_date)
    return Response(
        content=content,
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f"attachment; filename={export_filename('Time_Schedules')}"},
    )


@router.get("", response_model=List[TimeScheduleResponse])
async def list_time_schedules(
    employee_id: Optional[int] = None,
    status_filter: Optional[str] = Query(None, alias="status"),
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(require_roles(*HR_ROLES)),
) -> List[TimeScheduleResponse]:
    return await service.list_time_schedules(db, employee_id, status_filter)


@router.post("", response_model=TimeScheduleBatchResponse, status_code=status.HTTP_201_CREATED)
async def create_time_schedules(
    payload: TimeScheduleCreate,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(require_roles(*FILING_ROLES)),
) -> TimeScheduleBatchResponse:
    try:
        return await service.create_time_schedules(db, current_user, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.post("/{schedule_id}/status", response_model=TimeScheduleResponse)
async def update_time_schedule_status(
    schedule_id: int,
    payload: TimeScheduleStatusUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(require_roles(*HR_ROLES)),
) -> TimeScheduleResponse:
    """Approve or reject a pending schedule change."""
    try:
        return await service.update_time_schedule_status(db, schedule_id, current_user, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.delete("/{schedule_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_time_schedule(
    schedule_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(require_roles(*HR_ROLES)),
) -> None:
    try:
        await service.delete_time_schedule(db, schedule_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
