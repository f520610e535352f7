"""
Value types the permission evaluator reasons about.

None of these are persisted directly: ``Role`` is stored on membership rows,
the rest only exist for the duration of a permission check.
"""
import enum
from dataclasses import dataclass, replace
from typing import Any


class Role(str, enum.Enum):
    """Permission tier attached to a membership."""
    ADMIN = "ADMIN"
    MEMBER = "MEMBER"
    BILLING = "BILLING"


class Action(str, enum.Enum):
    """Verbs a subject can perform. ``MANAGE`` stands for every action."""
    MANAGE = "manage"
    GET = "get"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    TRANSFER_OWNERSHIP = "transfer_ownership"
    INVITE = "invite"
    EXPORT = "export"


class ResourceKind(str, enum.Enum):
    """Resource variants. ``ALL`` stands for every variant."""
    ALL = "all"
    ORGANIZATION = "Organization"
    PROJECT = "Project"
    MEMBER = "Member"
    INVITE = "Invite"
    BILLING = "Billing"
    USER = "User"


# Alternate spellings accepted for actions
ACTION_ALIASES: dict[str, Action] = {
    "read": Action.GET,
    "transfer-ownership": Action.TRANSFER_OWNERSHIP,
}


@dataclass(frozen=True)
class Resource:
    """
    A tagged resource as seen by the evaluator.

    ``owner_id`` is only consulted by ownership rules; a resource without an
    owner never satisfies one.
    """
    kind: ResourceKind
    owner_id: str | None = None
    id: str | None = None

    @classmethod
    def of(cls, kind: ResourceKind, entity: Any) -> "Resource":
        """Build a resource from an ORM entity exposing ``id`` and ``owner_id``."""
        return cls(
            kind=kind,
            owner_id=getattr(entity, "owner_id", None),
            id=getattr(entity, "id", None),
        )

    @classmethod
    def organization(cls, organization: Any) -> "Resource":
        return cls.of(ResourceKind.ORGANIZATION, organization)

    @classmethod
    def project(cls, project: Any) -> "Resource":
        return cls.of(ResourceKind.PROJECT, project)


def parse_role(value: Any) -> Role | None:
    if isinstance(value, Role):
        return value
    if isinstance(value, str):
        try:
            return Role(value.strip().upper())
        except ValueError:
            return None
    return None


def parse_action(value: Any) -> Action | None:
    if isinstance(value, Action):
        return value
    if isinstance(value, str):
        key = value.strip().lower()
        if key in ACTION_ALIASES:
            return ACTION_ALIASES[key]
        try:
            return Action(key)
        except ValueError:
            return None
    return None


_KINDS_BY_NAME = {kind.value.lower(): kind for kind in ResourceKind}
_KINDS_BY_NAME.update({"membership": ResourceKind.MEMBER, "billing-record": ResourceKind.BILLING})


def parse_resource(value: Any) -> Resource | None:
    """Accept a ``Resource``, a ``ResourceKind`` or a variant name."""
    if isinstance(value, Resource):
        if isinstance(value.kind, ResourceKind):
            return value
        if isinstance(value.kind, str):
            kind = _KINDS_BY_NAME.get(value.kind.strip().lower())
            return replace(value, kind=kind) if kind is not None else None
        return None
    if isinstance(value, ResourceKind):
        return Resource(kind=value)
    if isinstance(value, str):
        kind = _KINDS_BY_NAME.get(value.strip().lower())
        return Resource(kind=kind) if kind is not None else None
    return None
