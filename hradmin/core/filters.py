from typing import Optional

from sqlalchemy import or_

from hradmin.core.models import Employee


def employee_search_clause(term: str, *extra_columns):
    """LIKE match on employee name, idno and department, plus any extra columns given."""
    like = f"%{term.strip()}%"
    clauses = [
        Employee.Fname.ilike(like),
        Employee.Lname.ilike(like),
        Employee.idno.ilike(like),
        Employee.Department.ilike(like),
    ]
    clauses.extend(col.ilike(like) for col in extra_columns)
    return or_(*clauses)


def clean_text(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None
