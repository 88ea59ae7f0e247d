"""Multi-employee selection shared by the request forms."""

from typing import Any, List, Mapping, Optional, Sequence

EmployeeRow = Mapping[str, Any]


def matches_search(employee: EmployeeRow, term: str) -> bool:
    """Case-insensitive match on first name, last name or idno."""
    if not term:
        return True
    term = term.lower()
    return (
        term in (employee.get("Fname") or "").lower()
        or term in (employee.get("Lname") or "").lower()
        or term in str(employee.get("idno") or "").lower()
    )


def matches_department(employee: EmployeeRow, department: Optional[str]) -> bool:
    if not department:
        return True
    return employee.get("Department") == department


class EmployeePicker:
    """Holds the search term, department filter and the selected employee ids.

    Selection order is kept; ids selected outside the current filter are never
    dropped by filtering.
    """

    def __init__(self, employees: Optional[Sequence[EmployeeRow]] = None) -> None:
        self.employees: List[EmployeeRow] = list(employees or [])
        self.search_term = ""
        self.department = ""
        self.selected_ids: List[int] = []

    @property
    def filtered(self) -> List[EmployeeRow]:
        return [
            e for e in self.employees
            if matches_search(e, self.search_term) and matches_department(e, self.department)
        ]

    @property
    def filtered_ids(self) -> List[int]:
        return [e["id"] for e in self.filtered]

    @property
    def all_filtered_selected(self) -> bool:
        ids = self.filtered_ids
        return bool(ids) and all(i in self.selected_ids for i in ids)

    @property
    def selected_employees(self) -> List[EmployeeRow]:
        return [e for e in self.employees if e["id"] in self.selected_ids]

    def set_search(self, term: str) -> None:
        self.search_term = term or ""

    def set_department(self, department: Optional[str]) -> None:
        self.department = department or ""

    def toggle(self, employee_id: Any) -> None:
        employee_id = int(employee_id)
        if employee_id in self.selected_ids:
            self.selected_ids.remove(employee_id)
        else:
            self.selected_ids.append(employee_id)

    def toggle_all_filtered(self) -> None:
        """Deselect the filtered set if it is fully selected, otherwise select all of it."""
        ids = self.filtered_ids
        remaining = [i for i in self.selected_ids if i not in ids]
        if all(i in self.selected_ids for i in ids):
            self.selected_ids = remaining
        else:
            self.selected_ids = remaining + ids

    def reset(self) -> None:
        self.search_term = ""
        self.department = ""
        self.selected_ids = []
