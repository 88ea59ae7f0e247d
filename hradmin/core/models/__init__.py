from hradmin.core.models.employee import Employee
from hradmin.core.models.user import DepartmentManager, User
from hradmin.core.models.offset import Offset, OffsetBank, OffsetType
from hradmin.core.models.slvl import SLVL, SLVLBank
from hradmin.core.models.time_schedule import ScheduleType, TimeSchedule

__all__ = [
    "DepartmentManager",
    "Employee",
    "Offset",
    "OffsetBank",
    "OffsetType",
    "SLVL",
    "SLVLBank",
    "ScheduleType",
    "TimeSchedule",
    "User",
]
