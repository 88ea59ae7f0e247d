from datetime import datetime

from sqlalchemy import Boolean, Column, Date, DateTime, ForeignKey, Integer, String, Text, Time
from sqlalchemy.orm import relationship

from hradmin.core.enums import RequestStatus
from hradmin.db.session import Base


class ScheduleType(Base):
    __tablename__ = "schedule_types"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)


class TimeSchedule(Base):
    """Request to change an employee's working hours from effective_date (to end_date, if set)."""

    __tablename__ = "time_schedules"

    id = Column(Integer, primary_key=True, autoincrement=True)
    employee_id = Column(Integer, ForeignKey("employees.id"), nullable=False, index=True)
    schedule_type_id = Column(Integer, ForeignKey("schedule_types.id"), nullable=False)
    effective_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=True)
    current_schedule = Column(String(100), nullable=True)
    new_schedule = Column(String(100), nullable=True)
    new_start_time = Column(Time, nullable=False)
    new_end_time = Column(Time, nullable=False)
    reason = Column(Text, nullable=False)
    # pending | approved | rejected | cancelled
    status = Column(String(20), nullable=False, default=RequestStatus.PENDING.value)
    approved_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    approved_at = Column(DateTime(timezone=True), nullable=True)
    remarks = Column(Text, nullable=True)
    created_by = Column(Integer, ForeignKey("users.id"), nullable=False)
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    employee = relationship("Employee", foreign_keys=[employee_id])
    schedule_type = relationship("ScheduleType", foreign_keys=[schedule_type_id])
    approver = relationship("User", foreign_keys=[approved_by])
    creator = relationship("User", foreign_keys=[created_by])
