"""
Permission evaluator.

``get_user_permissions`` binds a subject and its role to the static rule
table and returns an ``Ability`` answering ``can``/``cannot``. Evaluation is
pure: no I/O, no mutable state, and every unrecognized role, action or
resource is denied rather than raising.

Usage:
    ability = get_user_permissions(user_id, membership.role)
    if ability.cannot("delete", Resource.project(project)):
        raise UnauthorizedError("You're not allowed to delete this project.")
"""
from typing import Any, Mapping

from app.features.permissions.models import (
    Action,
    Resource,
    ResourceKind,
    parse_action,
    parse_resource,
    parse_role,
)
from app.features.permissions.rules import RULES, RuleSet


class Ability:
    """Decision object for one subject acting under one role."""

    __slots__ = ("subject_id", "role", "_rules")

    def __init__(self, subject_id: str | None, role: Any, rules: Mapping[Any, RuleSet] = RULES):
        self.subject_id = subject_id
        self.role = parse_role(role)
        self._rules: RuleSet = rules.get(self.role, {}) if self.role is not None else {}

    def can(self, action: Any, resource: Any) -> bool:
        parsed_action = parse_action(action)
        parsed_resource = parse_resource(resource)
        if parsed_action is None or parsed_resource is None:
            return False

        candidates = (
            (parsed_action, parsed_resource.kind),
            (Action.MANAGE, parsed_resource.kind),
            (parsed_action, ResourceKind.ALL),
            (Action.MANAGE, ResourceKind.ALL),
        )
        for key in candidates:
            if key not in self._rules:
                continue
            condition = self._rules[key]
            if condition is None or condition(self.subject_id, parsed_resource):
                return True
        return False

    def cannot(self, action: Any, resource: Any) -> bool:
        return not self.can(action, resource)

    def __repr__(self) -> str:
        role = self.role.value if self.role is not None else None
        return f"<Ability(subject_id={self.subject_id!r}, role={role!r})>"


def get_user_permissions(user_id: str | None, role: Any) -> Ability:
    """Build the ability for a user acting under the role of their membership."""
    return Ability(user_id, role)


def evaluate(subject_id: str | None, role: Any, action: Any, resource: Resource | ResourceKind | str) -> bool:
    """One-shot check: may ``subject_id`` with ``role`` perform ``action`` on ``resource``?"""
    return Ability(subject_id, role).can(action, resource)
