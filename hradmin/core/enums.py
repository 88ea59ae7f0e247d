from enum import Enum


class JobStatus(str, Enum):
    ACTIVE = "Active"
    INACTIVE = "Inactive"
    BLOCKED = "Blocked"
    ON_LEAVE = "On Leave"


class RequestStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    CANCELLED = "cancelled"


class UserRole(str, Enum):
    SUPERADMIN = "superadmin"
    HRD_MANAGER = "hrd_manager"
    DEPARTMENT_MANAGER = "department_manager"
    EMPLOYEE = "employee"


class LeaveType(str, Enum):
    SICK = "sick"
    VACATION = "vacation"
    EMERGENCY = "emergency"
    BEREAVEMENT = "bereavement"
    MATERNITY = "maternity"
    PATERNITY = "paternity"
    PERSONAL = "personal"
    STUDY = "study"


class OffsetTransactionType(str, Enum):
    CREDIT = "credit"
    DEBIT = "debit"


# Roles whose filings skip the approval queue
AUTO_APPROVE_ROLES = (UserRole.SUPERADMIN.value, UserRole.HRD_MANAGER.value)

# Leave types that draw from a yearly SLVL bank
BANKED_LEAVE_TYPES = (LeaveType.SICK.value, LeaveType.VACATION.value)

LEAVE_TYPE_LABELS = {
    "sick": "Sick Leave",
    "vacation": "Vacation Leave",
    "emergency": "Emergency Leave",
    "bereavement": "Bereavement Leave",
    "maternity": "Maternity Leave",
    "paternity": "Paternity Leave",
    "personal": "Personal Leave",
    "study": "Study Leave",
}

REQUEST_STATUS_LABELS = {
    "pending": "Pending",
    "approved": "Approved",
    "rejected": "Rejected",
}
