from abc import ABC, abstractmethod
from datetime import date
from typing import Any, Callable, Dict, List, Optional, Sequence

from .employee_picker import EmployeePicker, EmployeeRow


SELECT_EMPLOYEE_MESSAGE = "Please select at least one employee"
REQUIRED_FIELDS_MESSAGE = "Please fill in all required fields"


def blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


class BatchRequestForm(ABC):
    """A request filed for several employees at once.

    Subclasses provide default field values and the ordered checks. A failed
    check goes to ``alert`` and nothing is submitted; on success ``on_submit``
    receives the payload and the form resets, filters included.
    """

    def __init__(
        self,
        employees: Optional[Sequence[EmployeeRow]],
        departments: Optional[Sequence[str]],
        on_submit: Callable[[Dict[str, Any]], Any],
        alert: Callable[[str], Any],
        today: Optional[Callable[[], date]] = None,
    ) -> None:
        self.picker = EmployeePicker(employees)
        self.departments: List[str] = list(departments or [])
        self.on_submit = on_submit
        self.alert = alert
        self._today = today or date.today
        self.data: Dict[str, Any] = self.defaults()

    @abstractmethod
    def defaults(self) -> Dict[str, Any]:
        raise NotImplementedError

    @abstractmethod
    def validation_error(self) -> Optional[str]:
        """First failing check for the form fields, after employee selection."""
        raise NotImplementedError

    def today(self) -> str:
        return self._today().isoformat()

    def set_field(self, name: str, value: Any) -> None:
        if name not in self.data:
            raise KeyError(name)
        self.data[name] = value

    def payload(self) -> Dict[str, Any]:
        return {"employee_ids": list(self.picker.selected_ids), **self.data}

    def submit(self) -> bool:
        if not self.picker.selected_ids:
            self.alert(SELECT_EMPLOYEE_MESSAGE)
            return False
        error = self.validation_error()
        if error:
            self.alert(error)
            return False
        self.on_submit(self.payload())
        self.reset()
        return True

    def reset(self) -> None:
        self.data = self.defaults()
        self.picker.reset()
