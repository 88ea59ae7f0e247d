from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field

from hradmin.core.enums import JobStatus as JobStatusEnum


class EmployeeCreate(BaseModel):
    idno: Optional[str] = Field(None, max_length=50)
    Lname: str = Field(..., min_length=1, max_length=100)
    Fname: str = Field(..., min_length=1, max_length=100)
    MName: Optional[str] = Field(None, max_length=100)
    Suffix: Optional[str] = Field(None, max_length=20)
    Email: Optional[EmailStr] = None
    ContactNo: Optional[str] = Field(None, max_length=50)
    Department: Optional[str] = Field(None, max_length=100)
    Jobtitle: Optional[str] = Field(None, max_length=100)
    JobStatus: JobStatusEnum = JobStatusEnum.ACTIVE
    HiredDate: Optional[date] = None


class EmployeeUpdate(BaseModel):
    """Partial update. JobStatus changes go through the mark-* endpoints."""

    idno: Optional[str] = Field(None, max_length=50)
    Lname: Optional[str] = Field(None, min_length=1, max_length=100)
    Fname: Optional[str] = Field(None, min_length=1, max_length=100)
    MName: Optional[str] = Field(None, max_length=100)
    Suffix: Optional[str] = Field(None, max_length=20)
    Email: Optional[EmailStr] = None
    ContactNo: Optional[str] = Field(None, max_length=50)
    Department: Optional[str] = Field(None, max_length=100)
    Jobtitle: Optional[str] = Field(None, max_length=100)
    HiredDate: Optional[date] = None


class EmployeeResponse(BaseModel):
    id: int
    idno: Optional[str] = None
    Lname: Optional[str] = None
    Fname: Optional[str] = None
    MName: Optional[str] = None
    Suffix: Optional[str] = None
    Email: Optional[str] = None
    ContactNo: Optional[str] = None
    Department: Optional[str] = None
    Jobtitle: Optional[str] = None
    JobStatus: str
    HiredDate: Optional[date] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class EmployeeBrief(BaseModel):
    """Embedded in request responses."""

    id: int
    idno: Optional[str] = None
    Lname: Optional[str] = None
    Fname: Optional[str] = None
    MName: Optional[str] = None
    Department: Optional[str] = None
    Jobtitle: Optional[str] = None

    class Config:
        from_attributes = True
