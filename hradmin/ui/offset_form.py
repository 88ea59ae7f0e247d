"""Offset request form."""

from typing import Any, Callable, Dict, Mapping, Optional, Sequence

from .base import REQUIRED_FIELDS_MESSAGE, BatchRequestForm, EmployeeRow, blank

DEFAULT_HOURS = 8
REASON_MESSAGE = "Please provide a reason for the offset"


class OffsetForm(BatchRequestForm):
    def __init__(
        self,
        employees: Optional[Sequence[EmployeeRow]],
        departments: Optional[Sequence[str]],
        offset_types: Optional[Sequence[Mapping[str, Any]]],
        on_submit: Callable[[Dict[str, Any]], Any],
        alert: Callable[[str], Any],
        **kwargs,
    ) -> None:
        self.offset_types = list(offset_types or [])
        super().__init__(employees, departments, on_submit, alert, **kwargs)

    def defaults(self) -> Dict[str, Any]:
        today = self.today()
        return {
            "date": today,
            "workday": today,
            "offset_type_id": self.offset_types[0]["id"] if self.offset_types else 1,
            "hours": DEFAULT_HOURS,
            "reason": "",
        }

    def validation_error(self) -> Optional[str]:
        d = self.data
        if any(blank(d[name]) for name in ("date", "workday", "offset_type_id")):
            return REQUIRED_FIELDS_MESSAGE
        if blank(d["reason"]):
            return REASON_MESSAGE
        return None

    def payload(self) -> Dict[str, Any]:
        payload = super().payload()
        payload["reason"] = payload["reason"].strip()
        return payload
