from datetime import datetime

from sqlalchemy import Column, Date, DateTime, Integer, String

from hradmin.core.enums import JobStatus
from hradmin.db.session import Base


class Employee(Base):
    """Employee master record. Column names follow the HR import sheet (Lname, Fname, JobStatus, ...)."""

    __tablename__ = "employees"

    id = Column(Integer, primary_key=True, autoincrement=True)
    idno = Column(String(50), unique=True, nullable=True)
    Lname = Column(String(100), nullable=True)
    Fname = Column(String(100), nullable=True)
    MName = Column(String(100), nullable=True)
    Suffix = Column(String(20), nullable=True)
    Email = Column(String(255), unique=True, nullable=True)
    ContactNo = Column(String(50), nullable=True)
    Department = Column(String(100), nullable=True, index=True)
    Jobtitle = Column(String(100), nullable=True)
    JobStatus = Column(String(20), nullable=False, default=JobStatus.ACTIVE.value)
    HiredDate = Column(Date, nullable=True)
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
