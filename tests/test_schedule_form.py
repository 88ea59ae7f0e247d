from datetime import date

import pytest

from hradmin.ui.schedule_form import TimeScheduleForm

EMPLOYEES = [
    {"id": 1, "idno": "1001", "Fname": "Ana", "Lname": "Cruz", "Department": "IT"},
    {"id": 2, "idno": "1002", "Fname": "Ben", "Lname": "Reyes", "Department": "HR"},
    {"id": 3, "idno": "2001", "Fname": "Carla", "Lname": "Santos", "Department": "IT"},
]
SCHEDULE_TYPES = [{"id": 7, "name": "Regular Shift"}, {"id": 8, "name": "Night Shift"}]


@pytest.fixture()
def form():
    submitted, alerts = [], []
    f = TimeScheduleForm(
        EMPLOYEES,
        ["HR", "IT"],
        SCHEDULE_TYPES,
        on_submit=submitted.append,
        alert=alerts.append,
        today=lambda: date(2025, 3, 10),
    )
    f.submitted, f.alerts = submitted, alerts
    return f


def test_defaults(form) -> None:
    assert form.data["effective_date"] == "2025-03-10"
    assert form.data["new_start_time"] == "08:00"
    assert form.data["new_end_time"] == "17:00"
    assert form.data["schedule_type_id"] == 7
    assert form.picker.selected_ids == []


def test_empty_selection_is_rejected(form) -> None:
    form.set_field("reason", "Shift rotation")
    assert form.submit() is False
    assert form.alerts == ["Please select at least one employee"]
    assert form.submitted == []


@pytest.mark.parametrize("start, end", [("17:00", "08:00"), ("09:00", "09:00")])
def test_start_not_before_end_is_rejected(form, start, end) -> None:
    form.picker.toggle(1)
    form.set_field("new_start_time", start)
    form.set_field("new_end_time", end)
    form.set_field("reason", "Shift rotation")
    assert form.submit() is False
    assert form.alerts == ["End time must be after start time"]
    assert form.submitted == []


def test_missing_required_field_is_rejected(form) -> None:
    form.picker.toggle(1)
    form.set_field("effective_date", "")
    assert form.submit() is False
    assert form.alerts == ["Please fill in all required fields"]


def test_blank_reason_is_rejected(form) -> None:
    form.picker.toggle(1)
    form.set_field("reason", "   ")
    assert form.submit() is False
    assert form.alerts == ["Please provide a reason for the schedule change"]


def test_checks_run_in_order(form) -> None:
    form.set_field("new_start_time", "18:00")
    form.submit()
    form.picker.toggle(2)
    form.submit()
    assert form.alerts == ["Please select at least one employee", "End time must be after start time"]


def test_successful_submit_sends_payload_and_resets(form) -> None:
    form.picker.set_search("cruz")
    form.picker.set_department("IT")
    form.picker.toggle_all_filtered()
    form.picker.toggle(2)
    form.set_field("new_start_time", "22:00")
    form.set_field("new_end_time", "23:30")
    form.set_field("schedule_type_id", 8)
    form.set_field("reason", "  Night coverage  ")

    assert form.submit() is True
    assert form.alerts == []
    (payload,) = form.submitted
    assert payload["employee_ids"] == [1, 2]
    assert payload["reason"] == "Night coverage"
    assert payload["schedule_type_id"] == 8
    assert payload["end_date"] is None

    assert form.picker.selected_ids == []
    assert form.picker.search_term == ""
    assert form.picker.department == ""
    assert form.data["new_start_time"] == "08:00"
    assert form.data["reason"] == ""


def test_no_schedule_types_leaves_type_blank(form) -> None:
    f = TimeScheduleForm(EMPLOYEES, [], [], on_submit=lambda p: None, alert=lambda m: None)
    assert f.data["schedule_type_id"] == ""
    f.picker.toggle(1)
    f.set_field("reason", "x")
    assert f.validation_error() == "Please fill in all required fields"


def test_unknown_field_raises(form) -> None:
    with pytest.raises(KeyError):
        form.set_field("shift_color", "red")
