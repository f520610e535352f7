"""
FastAPI glue between loaded memberships and the permission evaluator.

The evaluator only answers yes/no; these helpers turn a denial into an
``UnauthorizedError`` at the HTTP boundary.
"""
from typing import Annotated, Any
from fastapi import Depends

from app.core.errors import UnauthorizedError
from app.features.organizations.dependencies import get_user_membership
from app.features.organizations.models import Member
from app.features.permissions.ability import Ability, get_user_permissions
from app.utils import get_logger


log = get_logger(__name__)


def ensure_can(ability: Ability, action: Any, resource: Any, message: str) -> None:
    """Raise ``UnauthorizedError(message)`` unless ``ability`` allows the action."""
    if ability.cannot(action, resource):
        log.info("Denied %s on %s for user %s (%s)", action, resource, ability.subject_id, ability.role)
        raise UnauthorizedError(message)


def get_membership_ability(membership: Member) -> Ability:
    return get_user_permissions(membership.user_id, membership.role)


def require_permission(action: Any, resource: Any, message: str):
    """
    FastAPI dependency requiring a permission that does not depend on
    ownership of a specific row.
    
    Usage:
        @router.post("/{slug}/projects")
        async def create_project(
            membership: Annotated[Member, Depends(require_permission(
                "create", ResourceKind.PROJECT, "You're not allowed to create new projects."
            ))]
        ):
            ...
    
    Returns:
        Dependency returning the caller's membership when allowed
    
    Raises:
        UnauthorizedError: If the caller's role does not grant the permission
    """
    async def permission_dependency(
        membership: Annotated[Member, Depends(get_user_membership)]
    ) -> Member:
        ensure_can(get_membership_ability(membership), action, resource, message)
        return membership
    
    return permission_dependency
