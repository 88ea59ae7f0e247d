"""Schedule change request form (TimeScheduleForm)."""

from datetime import datetime, time
from typing import Any, Callable, Dict, Mapping, Optional, Sequence

from .base import REQUIRED_FIELDS_MESSAGE, BatchRequestForm, EmployeeRow, blank

DEFAULT_START_TIME = "08:00"
DEFAULT_END_TIME = "17:00"

END_BEFORE_START_MESSAGE = "End time must be after start time"
REASON_MESSAGE = "Please provide a reason for the schedule change"


def _as_time(value: Any) -> time:
    if isinstance(value, time):
        return value
    return datetime.strptime(str(value).strip(), "%H:%M").time()


class TimeScheduleForm(BatchRequestForm):
    def __init__(
        self,
        employees: Optional[Sequence[EmployeeRow]],
        departments: Optional[Sequence[str]],
        schedule_types: Optional[Sequence[Mapping[str, Any]]],
        on_submit: Callable[[Dict[str, Any]], Any],
        alert: Callable[[str], Any],
        **kwargs,
    ) -> None:
        self.schedule_types = list(schedule_types or [])
        super().__init__(employees, departments, on_submit, alert, **kwargs)

    def defaults(self) -> Dict[str, Any]:
        return {
            "effective_date": self.today(),
            "end_date": "",
            "current_schedule": "",
            "new_schedule": "",
            "new_start_time": DEFAULT_START_TIME,
            "new_end_time": DEFAULT_END_TIME,
            "reason": "",
            "schedule_type_id": self.schedule_types[0]["id"] if self.schedule_types else "",
        }

    def validation_error(self) -> Optional[str]:
        d = self.data
        required = ("effective_date", "schedule_type_id", "new_start_time", "new_end_time")
        if any(blank(d[name]) for name in required):
            return REQUIRED_FIELDS_MESSAGE
        try:
            start, end = _as_time(d["new_start_time"]), _as_time(d["new_end_time"])
        except ValueError:
            return REQUIRED_FIELDS_MESSAGE
        if start >= end:
            return END_BEFORE_START_MESSAGE
        if blank(d["reason"]):
            return REASON_MESSAGE
        return None

    def payload(self) -> Dict[str, Any]:
        payload = super().payload()
        payload["reason"] = payload["reason"].strip()
        payload["end_date"] = payload["end_date"] or None
        return payload
