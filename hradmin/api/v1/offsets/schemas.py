import datetime as dt
from decimal import Decimal
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from hradmin.api.v1.employees.schemas import EmployeeBrief
from hradmin.core.enums import OffsetTransactionType


class OffsetTypeResponse(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    is_active: bool

    class Config:
        from_attributes = True


class OffsetCreate(BaseModel):
    """One offset record is filed per employee in employee_ids."""

    employee_ids: List[int] = Field(..., min_length=1)
    date: dt.date = Field(..., description="Date the extra work was done")
    workday: dt.date = Field(..., description="Date the offset is taken")
    offset_type_id: int
    hours: Decimal = Field(..., ge=Decimal("0.5"), le=Decimal("24"), decimal_places=2)
    reason: str = Field(..., min_length=1, max_length=500)
    transaction_type: OffsetTransactionType = OffsetTransactionType.CREDIT

    @field_validator("reason")
    @classmethod
    def _reason_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Reason is required")
        return v.strip()


class OffsetUpdate(BaseModel):
    date: Optional[dt.date] = None
    workday: Optional[dt.date] = None
    offset_type_id: Optional[int] = None
    hours: Optional[Decimal] = Field(None, ge=Decimal("0.5"), le=Decimal("24"), decimal_places=2)
    reason: Optional[str] = Field(None, min_length=1, max_length=500)

    @field_validator("reason")
    @classmethod
    def _reason_not_blank(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            raise ValueError("Reason cannot be blank")
        return v.strip() if v is not None else v


class OffsetStatusUpdate(BaseModel):
    status: Literal["approved", "rejected"]
    remarks: Optional[str] = Field(None, max_length=500)


class OffsetResponse(BaseModel):
    id: int
    employee_id: int
    offset_type_id: int
    date: dt.date
    workday: dt.date
    hours: Decimal
    reason: str
    status: str
    approved_by: Optional[int] = None
    approved_at: Optional[dt.datetime] = None
    remarks: Optional[str] = None
    transaction_type: str
    is_bank_updated: bool
    created_at: dt.datetime
    employee: Optional[EmployeeBrief] = None
    offset_type: Optional[OffsetTypeResponse] = None

    class Config:
        from_attributes = True


class OffsetBatchResponse(BaseModel):
    message: str
    offsets: List[OffsetResponse]


class OffsetBankResponse(BaseModel):
    employee_id: int
    total_hours: Decimal
    used_hours: Decimal
    remaining_hours: Decimal
    last_updated: Optional[dt.datetime] = None
    notes: Optional[str] = None
