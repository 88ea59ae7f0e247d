from typing import Iterable, List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from hradmin.auth.schemas import CurrentUser
from hradmin.core.exceptions import bad_request, forbidden
from hradmin.core.models import Employee


def sees_all_departments(current_user: CurrentUser) -> bool:
    return current_user.is_superadmin or current_user.is_hrd_manager


async def resolve_filing_employees(
    db: AsyncSession,
    current_user: CurrentUser,
    employee_ids: Iterable[int],
) -> List[int]:
    """De-duplicated ids the caller may file requests for.

    Unknown ids are a 400. Department managers may only file for their own departments.
    """
    ids = list(dict.fromkeys(employee_ids))
    result = await db.execute(select(Employee.id, Employee.Department).where(Employee.id.in_(ids)))
    departments = dict(result.all())
    missing = set(ids) - set(departments)
    if missing:
        raise bad_request(f"Unknown employee ids: {sorted(missing)}")
    if not sees_all_departments(current_user):
        outside = [i for i in ids if departments[i] not in current_user.managed_departments]
        if outside:
            raise forbidden(f"You can only file requests for your own departments: {outside}")
    return ids
