"""Sick / vacation (and other) leave requests and the yearly leave banks they draw from."""

from datetime import datetime

from sqlalchemy import Boolean, Column, Date, DateTime, Float, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from hradmin.core.enums import LEAVE_TYPE_LABELS, REQUEST_STATUS_LABELS, RequestStatus
from hradmin.db.session import Base


class SLVL(Base):
    __tablename__ = "slvls"

    id = Column(Integer, primary_key=True, autoincrement=True)
    employee_id = Column(Integer, ForeignKey("employees.id"), nullable=False, index=True)
    type = Column(String(20), nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    half_day = Column(Boolean, nullable=False, default=False)
    am_pm = Column(String(2), nullable=True)
    total_days = Column(Float, nullable=False)
    with_pay = Column(Boolean, nullable=False, default=True)
    reason = Column(Text, nullable=False)
    documents_path = Column(String(500), nullable=True)
    status = Column(String(20), nullable=False, default=RequestStatus.PENDING.value)
    approved_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    approved_at = Column(DateTime(timezone=True), nullable=True)
    remarks = Column(Text, nullable=True)
    created_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    employee = relationship("Employee", foreign_keys=[employee_id])
    approver = relationship("User", foreign_keys=[approved_by])
    creator = relationship("User", foreign_keys=[created_by])

    @property
    def type_label(self) -> str:
        return LEAVE_TYPE_LABELS.get(self.type, f"{(self.type or '').capitalize()} Leave")

    @property
    def status_label(self) -> str:
        return REQUEST_STATUS_LABELS.get(self.status, (self.status or "").capitalize())

    @property
    def duration(self) -> str:
        if self.half_day:
            return f"0.5 day ({self.am_pm} half-day)"
        days = self.total_days
        shown = int(days) if float(days).is_integer() else days
        return f"{shown} day" + ("" if days == 1 else "s")

    @property
    def date_range(self) -> str:
        start = self.start_date.strftime("%b %d, %Y")
        end = self.end_date.strftime("%b %d, %Y")
        return start if start == end else f"{start} - {end}"


class SLVLBank(Base):
    """Yearly allowance of sick or vacation leave days for one employee."""

    __tablename__ = "slvl_banks"
    __table_args__ = (
        UniqueConstraint("employee_id", "leave_type", "year", name="uq_slvl_bank_employee_type_year"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    employee_id = Column(Integer, ForeignKey("employees.id", ondelete="CASCADE"), nullable=False, index=True)
    leave_type = Column(String(20), nullable=False)
    year = Column(Integer, nullable=False)
    total_days = Column(Float, nullable=False, default=0)
    used_days = Column(Float, nullable=False, default=0)
    notes = Column(Text, nullable=True)
    created_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    employee = relationship("Employee", foreign_keys=[employee_id])

    @property
    def remaining_days(self) -> float:
        return (self.total_days or 0) - (self.used_days or 0)
