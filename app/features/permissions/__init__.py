"""
Permission evaluation feature module.

Implements organization-scoped Role-Based Access Control (RBAC) with
ownership conditions, evaluated from a static rule table.
"""
from app.features.permissions.ability import Ability, evaluate, get_user_permissions
from app.features.permissions.models import Action, Resource, ResourceKind, Role

__all__ = [
    "Ability",
    "Action",
    "Resource",
    "ResourceKind",
    "Role",
    "evaluate",
    "get_user_permissions",
]
