"""Overtime offsets: hours worked on `date` taken back as time off on `workday`."""

from datetime import datetime

from sqlalchemy import Boolean, Column, Date, DateTime, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship

from hradmin.core.enums import OffsetTransactionType, RequestStatus
from hradmin.db.session import Base


class OffsetType(Base):
    __tablename__ = "offset_types"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)


class Offset(Base):
    __tablename__ = "offsets"

    id = Column(Integer, primary_key=True, autoincrement=True)
    employee_id = Column(Integer, ForeignKey("employees.id"), nullable=False, index=True)
    offset_type_id = Column(Integer, ForeignKey("offset_types.id"), nullable=False)
    date = Column(Date, nullable=False)  # when the work was done
    workday = Column(Date, nullable=False)  # when the offset is taken
    hours = Column(Numeric(5, 2), nullable=False)
    reason = Column(Text, nullable=False)
    status = Column(String(20), nullable=False, default=RequestStatus.PENDING.value)
    approved_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    approved_at = Column(DateTime(timezone=True), nullable=True)
    remarks = Column(Text, nullable=True)
    is_bank_updated = Column(Boolean, nullable=False, default=False)
    transaction_type = Column(String(10), nullable=False, default=OffsetTransactionType.CREDIT.value)
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    employee = relationship("Employee", foreign_keys=[employee_id])
    offset_type = relationship("OffsetType", foreign_keys=[offset_type_id])
    approver = relationship("User", foreign_keys=[approved_by])


class OffsetBank(Base):
    """Running balance of offset hours per employee (one row per employee)."""

    __tablename__ = "offset_banks"

    id = Column(Integer, primary_key=True, autoincrement=True)
    employee_id = Column(Integer, ForeignKey("employees.id", ondelete="CASCADE"), nullable=False, unique=True)
    total_hours = Column(Numeric(8, 2), nullable=False, default=0)
    used_hours = Column(Numeric(8, 2), nullable=False, default=0)
    remaining_hours = Column(Numeric(8, 2), nullable=False, default=0)
    last_updated = Column(DateTime(timezone=True), nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)

    employee = relationship("Employee", foreign_keys=[employee_id])
