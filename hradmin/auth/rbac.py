from fastapi import Depends, HTTPException, status

from hradmin.auth.dependencies import get_current_user
from hradmin.auth.schemas import CurrentUser


def require_roles(*roles: str):
    """
    Dependency factory to restrict an endpoint to the given roles.
    superadmin always passes.

    Example:
        Depends(require_roles("hrd_manager"))
    """

    async def _checker(current_user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        if current_user.is_superadmin:
            return current_user
        if current_user.role not in roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Insufficient permissions",
            )
        return current_user

    return _checker
