"""
Static grant table.

Each role maps (action, resource kind) to an optional condition over
(subject id, resource). A missing condition means the grant is
unconditional. Anything not listed is denied.
"""
from typing import Callable, Mapping, Optional

from app.features.permissions.models import Action, Resource, ResourceKind, Role

Condition = Callable[[Optional[str], Resource], bool]
RuleSet = Mapping[tuple[Action, ResourceKind], Optional[Condition]]


def owned_by_subject(subject_id: str | None, resource: Resource) -> bool:
    """True when the subject created/owns the resource."""
    return subject_id is not None and resource.owner_id is not None and resource.owner_id == subject_id


ADMIN_RULES: RuleSet = {
    (Action.MANAGE, ResourceKind.ALL): None,
}

MEMBER_RULES: RuleSet = {
    (Action.GET, ResourceKind.USER): None,
    (Action.GET, ResourceKind.MEMBER): None,
    (Action.CREATE, ResourceKind.PROJECT): None,
    (Action.GET, ResourceKind.PROJECT): None,
    (Action.UPDATE, ResourceKind.PROJECT): owned_by_subject,
    (Action.DELETE, ResourceKind.PROJECT): owned_by_subject,
}

BILLING_RULES: RuleSet = {
    (Action.MANAGE, ResourceKind.BILLING): None,
}

RULES: Mapping[Role, RuleSet] = {
    Role.ADMIN: ADMIN_RULES,
    Role.MEMBER: MEMBER_RULES,
    Role.BILLING: BILLING_RULES,
}
