from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship

from hradmin.core.enums import UserRole
from hradmin.db.session import Base


class User(Base):
    """Application user. Approvers of requests; optionally linked to an Employee record."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, nullable=False)
    # superadmin | hrd_manager | department_manager | employee
    role = Column(String(50), nullable=False, default=UserRole.EMPLOYEE.value)
    employee_id = Column(Integer, ForeignKey("employees.id", ondelete="SET NULL"), nullable=True)
    status = Column(String(20), nullable=False, default="ACTIVE")
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)

    employee = relationship("Employee", foreign_keys=[employee_id])
    managed_departments = relationship(
        "DepartmentManager", back_populates="manager", cascade="all, delete-orphan"
    )


class DepartmentManager(Base):
    """Assigns a user as manager (first-level approver) of a department."""

    __tablename__ = "department_managers"
    __table_args__ = (
        UniqueConstraint("manager_id", "department", name="uq_department_manager"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    manager_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    department = Column(String(100), nullable=False)
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)

    manager = relationship("User", back_populates="managed_departments")
