import datetime as dt
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from hradmin.api.v1.employees.schemas import EmployeeBrief
from hradmin.core.enums import LeaveType


class LeaveTypeOption(BaseModel):
    value: str
    label: str


class SLVLCreate(BaseModel):
    employee_id: int
    type: LeaveType
    start_date: dt.date
    end_date: dt.date
    half_day: bool = False
    am_pm: Optional[Literal["AM", "PM"]] = None
    with_pay: bool = True
    reason: str = Field(..., min_length=1, max_length=1000)
    documents_path: Optional[str] = Field(None, max_length=500, description="Path of an already stored attachment")

    @field_validator("reason")
    @classmethod
    def _reason_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Reason is required")
        return v.strip()

    @field_validator("am_pm", mode="before")
    @classmethod
    def _upper_am_pm(cls, v):
        if isinstance(v, str):
            v = v.strip().upper()
            return v or None
        return v

    @model_validator(mode="after")
    def validate_dates(self) -> "SLVLCreate":
        if self.end_date < self.start_date:
            raise ValueError("end_date must be on or after start_date")
        if self.half_day:
            if self.start_date != self.end_date:
                raise ValueError("A half-day leave must start and end on the same date")
            if not self.am_pm:
                raise ValueError("am_pm is required for a half-day leave")
        return self


class SLVLStatusUpdate(BaseModel):
    status: Literal["approved", "rejected", "force_approved"]
    remarks: Optional[str] = Field(None, max_length=500)


class SLVLBulkStatusUpdate(BaseModel):
    slvl_ids: List[int] = Field(..., min_length=1)
    status: Literal["approved", "rejected", "force_approved"]
    remarks: Optional[str] = Field(None, max_length=500)


class SLVLResponse(BaseModel):
    id: int
    employee_id: int
    type: str
    type_label: str
    start_date: dt.date
    end_date: dt.date
    date_range: str
    half_day: bool
    am_pm: Optional[str] = None
    total_days: float
    duration: str
    with_pay: bool
    reason: str
    documents_path: Optional[str] = None
    status: str
    status_label: str
    approved_by: Optional[int] = None
    approved_at: Optional[dt.datetime] = None
    remarks: Optional[str] = None
    created_by: Optional[int] = None
    created_at: dt.datetime
    employee: Optional[EmployeeBrief] = None
    employee_remaining_days: float = 0

    class Config:
        from_attributes = True


class SLVLBulkResult(BaseModel):
    message: str
    success_count: int
    fail_count: int
    errors: List[str] = Field(default_factory=list)


class SLVLBankBalance(BaseModel):
    leave_type: str
    year: int
    total_days: float
    used_days: float
    remaining_days: float
    notes: Optional[str] = None


class SLVLBankSummary(BaseModel):
    employee_id: int
    year: int
    sick: Optional[SLVLBankBalance] = None
    vacation: Optional[SLVLBankBalance] = None


class SLVLBankAddDays(BaseModel):
    employee_id: int
    leave_type: Literal["sick", "vacation"]
    days: float = Field(..., ge=0.5, le=365)
    year: int = Field(..., ge=2020, le=2030)
    notes: Optional[str] = Field(None, max_length=500)
