import datetime as dt
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from hradmin.api.v1.employees.schemas import EmployeeBrief


class ScheduleTypeResponse(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    is_active: bool

    class Config:
        from_attributes = True


class TimeScheduleCreate(BaseModel):
    employee_ids: List[int] = Field(..., min_length=1)
    schedule_type_id: int
    effective_date: dt.date
    end_date: Optional[dt.date] = None
    current_schedule: Optional[str] = Field(None, max_length=100)
    new_schedule: Optional[str] = Field(None, max_length=100)
    new_start_time: dt.time = Field(..., description="HH:MM")
    new_end_time: dt.time = Field(..., description="HH:MM")
    reason: str = Field(..., min_length=1, max_length=500)

    @field_validator("new_start_time", "new_end_time", mode="before")
    @classmethod
    def _parse_hh_mm(cls, v):
        if isinstance(v, str):
            try:
                return dt.datetime.strptime(v.strip(), "%H:%M").time()
            except ValueError:
                raise ValueError("Time must be in HH:MM format")
        return v

    @field_validator("reason")
    @classmethod
    def _reason_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Reason is required")
        return v.strip()

    @model_validator(mode="after")
    def validate_window(self) -> "TimeScheduleCreate":
        if self.new_end_time <= self.new_start_time:
            raise ValueError("End time must be after start time")
        if self.end_date and self.end_date < self.effective_date:
            raise ValueError("end_date must be on or after effective_date")
        return self


class TimeScheduleStatusUpdate(BaseModel):
    status: Literal["approved", "rejected"]
    remarks: Optional[str] = Field(None, max_length=500)


class TimeScheduleResponse(BaseModel):
    id: int
    employee_id: int
    schedule_type_id: int
    effective_date: dt.date
    end_date: Optional[dt.date] = None
    current_schedule: Optional[str] = None
    new_schedule: Optional[str] = None
    new_start_time: dt.time
    new_end_time: dt.time
    reason: str
    status: str
    approved_by: Optional[int] = None
    approved_at: Optional[dt.datetime] = None
    remarks: Optional[str] = None
    created_by: int
    created_at: dt.datetime
    employee: Optional[EmployeeBrief] = None
    schedule_type: Optional[ScheduleTypeResponse] = None

    class Config:
        from_attributes = True


class TimeScheduleBatchResponse(BaseModel):
    message: str
    time_schedules: List[TimeScheduleResponse]
