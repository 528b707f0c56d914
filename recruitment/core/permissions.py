"""
Role-based permission helpers for the recruitment system.

Defines roles and provides dependency functions to enforce permissions.
"""

from typing import List

from fastapi import Depends, HTTPException, status

from recruitment.core.dependencies import CurrentUser, get_current_user


# Define role hierarchy
class Roles:
    """Standard roles in the recruitment system."""
    ADMIN = "admin"
    PSYCHOLOGUE = "psychologue"
    CANDIDATE = "candidate"

    # All roles list for validation
    ALL = [ADMIN, PSYCHOLOGUE, CANDIDATE]

    # Staff roles review applications and run evaluations
    STAFF = [ADMIN, PSYCHOLOGUE]

    # Role capabilities matrix
    # admin: Full access, manages tests, languages and classifications
    # psychologue: Reviews applications, runs candidatures through evaluation
    # candidate: Applies to jobs and withdraws own applications


def check_role_permission(user_role: str, allowed_roles: List[str]) -> bool:
    """
    Check if user's role is in the list of allowed roles.

    Args:
        user_role: The user's current role
        allowed_roles: List of roles that are permitted

    Returns:
        True if user has permission, False otherwise
    """
    if not user_role or not allowed_roles:
        return False
    return user_role in allowed_roles


def require_roles(allowed_roles: List[str]):
    """
    Dependency to require that current user has one of the allowed roles.

    Usage:
        @router.post("/candidatures/{candidature_id}/decision")
        async def make_decision(
            current_user: CurrentUser = Depends(require_roles(Roles.STAFF))
        ):
            ...

    Raises:
        HTTPException: 403 if user doesn't have required role
    """
    def role_checker(current_user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        if not check_role_permission(current_user.role, allowed_roles):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Access denied. Required roles: {', '.join(allowed_roles)}"
            )
        return current_user
    return role_checker


def require_admin():
    """Dependency to require admin role."""
    return require_roles([Roles.ADMIN])

