"""Approval lifecycle shared by offsets, SLVL and schedule changes: pending -> approved | rejected, once."""

from datetime import datetime
from typing import Optional

from hradmin.core.enums import RequestStatus
from hradmin.core.exceptions import bad_request

DECISION_STATUSES = (RequestStatus.APPROVED.value, RequestStatus.REJECTED.value)


def ensure_pending(record, noun: str, action: str = "update") -> None:
    if record.status != RequestStatus.PENDING.value:
        raise bad_request(f"Cannot {action} {noun} that has already been {record.status}")


def decide(record, new_status: str, approver_id: int, remarks: Optional[str]) -> None:
    """Record an approval decision. Approver and timestamp are only ever set here."""
    if new_status not in DECISION_STATUSES:
        raise bad_request(f"Invalid decision status: {new_status}")
    record.status = new_status
    record.approved_by = approver_id
    record.approved_at = datetime.utcnow()
    record.remarks = remarks


def auto_approve(record, approver_id: int, role_label: str) -> None:
    decide(record, RequestStatus.APPROVED.value, approver_id, f"Auto-approved: Filed by {role_label}")
