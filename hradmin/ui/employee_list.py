"""Employee table with a client-side JobStatus filter and per-row status actions."""

from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from hradmin.core.enums import JobStatus

from .employee_picker import EmployeeRow


ALL = "all"
STATUS_FILTERS = (ALL,) + tuple(s.value for s in JobStatus)
EMPTY_MESSAGE = "No employees found"

# label, css classes
STATUS_BADGES: Dict[str, Tuple[str, str]] = {
    JobStatus.ACTIVE.value: ("Active", "bg-green-100 text-green-800 border-green-200"),
    JobStatus.INACTIVE.value: ("Inactive", "bg-yellow-100 text-yellow-800 border-yellow-200"),
    JobStatus.BLOCKED.value: ("Blocked", "bg-red-100 text-red-800 border-red-200"),
    JobStatus.ON_LEAVE.value: ("On Leave", "bg-blue-100 text-blue-800 border-blue-200"),
}
UNKNOWN_BADGE_CLASSES = "bg-gray-100 text-gray-800 border-gray-200"

VIEW, EDIT, BLOCK, DEACTIVATE, ACTIVATE, DELETE = "view", "edit", "block", "deactivate", "activate", "delete"


def filter_by_status(employees: Sequence[EmployeeRow], status_filter: str) -> List[EmployeeRow]:
    if status_filter == ALL:
        return list(employees)
    return [e for e in employees if e.get("JobStatus") == status_filter]


def status_badge(status: Optional[str]) -> Tuple[str, str]:
    return STATUS_BADGES.get(status, (status or "Unknown", UNKNOWN_BADGE_CLASSES))


def row_actions(status: Optional[str]) -> List[str]:
    """Actions offered for a row, in display order."""
    actions = [VIEW, EDIT]
    if status != JobStatus.BLOCKED.value:
        actions.append(BLOCK)
    if status == JobStatus.ACTIVE.value:
        actions.append(DEACTIVATE)
    if status in (JobStatus.INACTIVE.value, JobStatus.BLOCKED.value):
        actions.append(ACTIVATE)
    actions.append(DELETE)
    return actions


def display_name(employee: EmployeeRow) -> str:
    return f"{employee.get('Lname', '')}, {employee.get('Fname', '')} {employee.get('MName') or ''}".rstrip()


class EmployeeListView:
    """State behind the employee table.

    The callbacks receive what the table hands out: the employee row for view and
    edit, the id for delete, and (id, new JobStatus) for status changes.
    """

    def __init__(
        self,
        employees: Optional[Sequence[EmployeeRow]],
        on_edit: Callable[[EmployeeRow], Any],
        on_delete: Callable[[int], Any],
        on_view: Callable[[EmployeeRow], Any],
        on_update_status: Callable[[int, str], Any],
    ) -> None:
        self.employees: List[EmployeeRow] = list(employees or [])
        self.on_edit = on_edit
        self.on_delete = on_delete
        self.on_view = on_view
        self.on_update_status = on_update_status
        self.status_filter = ALL

    @property
    def is_empty(self) -> bool:
        return not self.employees

    @property
    def placeholder(self) -> Optional[str]:
        return EMPTY_MESSAGE if self.is_empty else None

    @property
    def visible(self) -> List[EmployeeRow]:
        return filter_by_status(self.employees, self.status_filter)

    def set_filter(self, status_filter: str) -> None:
        if status_filter not in STATUS_FILTERS:
            raise ValueError(f"Unknown status filter: {status_filter}")
        self.status_filter = status_filter

    def rows(self) -> List[Dict[str, Any]]:
        """Render-ready rows for the visible employees."""
        rendered = []
        for e in self.visible:
            label, classes = status_badge(e.get("JobStatus"))
            rendered.append({
                "id": e["id"],
                "idno": e.get("idno"),
                "name": display_name(e),
                "badge": label,
                "badge_classes": classes,
                "department": e.get("Department"),
                "jobtitle": e.get("Jobtitle"),
                "email": e.get("Email"),
                "contact_no": e.get("ContactNo"),
                "hired_date": e.get("HiredDate"),
                "actions": row_actions(e.get("JobStatus")),
            })
        return rendered

    def trigger(self, action: str, employee: EmployeeRow) -> Any:
        """Run a row action. Raises ValueError if the row does not offer it."""
        status = employee.get("JobStatus")
        if action not in row_actions(status):
            raise ValueError(f"Action {action!r} is not available for status {status!r}")
        if action == VIEW:
            return self.on_view(employee)
        if action == EDIT:
            return self.on_edit(employee)
        if action == DELETE:
            return self.on_delete(employee["id"])
        new_status = {
            BLOCK: JobStatus.BLOCKED.value,
            DEACTIVATE: JobStatus.INACTIVE.value,
            ACTIVATE: JobStatus.ACTIVE.value,
        }[action]
        return self.on_update_status(employee["id"], new_status)
