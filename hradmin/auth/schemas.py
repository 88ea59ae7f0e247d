from typing import List, Optional

from pydantic import BaseModel, Field

from hradmin.core.enums import UserRole


class CurrentUser(BaseModel):
    """Caller identity resolved from the bearer token."""

    id: int
    name: str
    email: str
    role: str
    employee_id: Optional[int] = None
    managed_departments: List[str] = Field(default_factory=list)

    @property
    def is_superadmin(self) -> bool:
        return self.role == UserRole.SUPERADMIN.value

    @property
    def is_hrd_manager(self) -> bool:
        return self.role == UserRole.HRD_MANAGER.value

    @property
    def role_label(self) -> str:
        """Display name used in auto-approval remarks."""
        return {
            UserRole.SUPERADMIN.value: "Superadmin",
            UserRole.HRD_MANAGER.value: "Hrd",
        }.get(self.role, "standard user")
