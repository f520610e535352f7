"""Unit tests for the permission evaluator."""

import itertools

import pytest

from app.features.permissions import (
    Action,
    Resource,
    ResourceKind,
    Role,
    evaluate,
    get_user_permissions,
)
from app.features.permissions.rules import RULES

SUBJECT = "01HZX0000000000000000USER1"
OTHER = "01HZX0000000000000000USER2"

CONCRETE_KINDS = [kind for kind in ResourceKind if kind is not ResourceKind.ALL]
CONCRETE_ACTIONS = [action for action in Action if action is not Action.MANAGE]

MEMBER_GRANTS = {
    (Action.GET, ResourceKind.USER),
    (Action.GET, ResourceKind.MEMBER),
    (Action.CREATE, ResourceKind.PROJECT),
    (Action.GET, ResourceKind.PROJECT),
}


def test_member_deletes_own_project() -> None:
    project = Resource(kind=ResourceKind.PROJECT, owner_id=SUBJECT)

    assert evaluate(SUBJECT, Role.MEMBER, "delete", project) is True


def test_member_cannot_delete_someone_elses_project() -> None:
    project = Resource(kind=ResourceKind.PROJECT, owner_id=OTHER)

    assert evaluate(SUBJECT, Role.MEMBER, "delete", project) is False


def test_billing_cannot_delete_organization() -> None:
    organization = Resource(kind=ResourceKind.ORGANIZATION, owner_id=OTHER)

    assert evaluate(SUBJECT, Role.BILLING, "delete", organization) is False


def test_admin_can_delete_organization() -> None:
    organization = Resource(kind=ResourceKind.ORGANIZATION, owner_id=OTHER)

    assert evaluate(SUBJECT, Role.ADMIN, "delete", organization) is True


@pytest.mark.parametrize("action,kind", list(itertools.product(Action, ResourceKind)))
def test_admin_granted_everything_regardless_of_owner(action: Action, kind: ResourceKind) -> None:
    for owner_id in (None, SUBJECT, OTHER):
        assert evaluate(SUBJECT, Role.ADMIN, action, Resource(kind=kind, owner_id=owner_id)) is True


@pytest.mark.parametrize("action", [Action.UPDATE, Action.DELETE])
def test_member_project_changes_require_ownership(action: Action) -> None:
    ability = get_user_permissions(SUBJECT, Role.MEMBER)

    assert ability.can(action, Resource(kind=ResourceKind.PROJECT, owner_id=SUBJECT))
    assert ability.cannot(action, Resource(kind=ResourceKind.PROJECT, owner_id=OTHER))
    assert ability.cannot(action, Resource(kind=ResourceKind.PROJECT))
    assert ability.cannot(action, ResourceKind.PROJECT)


def test_member_ownership_does_not_leak_to_other_resources() -> None:
    ability = get_user_permissions(SUBJECT, Role.MEMBER)

    for kind in (ResourceKind.ORGANIZATION, ResourceKind.INVITE, ResourceKind.BILLING, ResourceKind.MEMBER):
        owned = Resource(kind=kind, owner_id=SUBJECT)
        assert ability.cannot(Action.UPDATE, owned)
        assert ability.cannot(Action.DELETE, owned)


def test_member_grant_matrix_is_fail_closed() -> None:
    ability = get_user_permissions(SUBJECT, Role.MEMBER)

    for action, kind in itertools.product(CONCRETE_ACTIONS, CONCRETE_KINDS):
        resource = Resource(kind=kind, owner_id=OTHER)
        assert ability.can(action, resource) is ((action, kind) in MEMBER_GRANTS), (action, kind)


def test_member_has_no_manage_grant() -> None:
    ability = get_user_permissions(SUBJECT, Role.MEMBER)

    assert ability.cannot(Action.MANAGE, ResourceKind.PROJECT)
    assert ability.cannot(Action.GET, ResourceKind.ALL)


def test_billing_grant_matrix_is_fail_closed() -> None:
    ability = get_user_permissions(SUBJECT, Role.BILLING)

    for action, kind in itertools.product(Action, CONCRETE_KINDS):
        expected = kind is ResourceKind.BILLING
        assert ability.can(action, Resource(kind=kind, owner_id=SUBJECT)) is expected, (action, kind)


@pytest.mark.parametrize("role", [None, "", "OWNER", "superuser", 42, object()])
def test_unknown_role_is_denied(role: object) -> None:
    for action, kind in itertools.product(Action, ResourceKind):
        assert evaluate(SUBJECT, role, action, Resource(kind=kind, owner_id=SUBJECT)) is False


@pytest.mark.parametrize("action", ["fly", "", None, 3, "MANAGEALL"])
def test_unknown_action_is_denied(action: object) -> None:
    for role in Role:
        assert evaluate(SUBJECT, role, action, ResourceKind.PROJECT) is False


@pytest.mark.parametrize("resource", ["Spaceship", "", None, 7, Resource(kind="Spaceship")])
def test_unknown_resource_is_denied(resource: object) -> None:
    for role in Role:
        assert evaluate(SUBJECT, role, Action.GET, resource) is False


def test_role_action_and_resource_accept_plain_strings() -> None:
    assert evaluate(SUBJECT, "member", "read", "project") is True
    assert evaluate(SUBJECT, "MEMBER", "get", "Project") is True
    assert evaluate(SUBJECT, "billing", "export", "Billing") is True
    assert evaluate(SUBJECT, "MEMBER", "delete", Resource(kind="Project", owner_id=SUBJECT)) is True
    assert evaluate(SUBJECT, "MEMBER", "read", "membership") is True


def test_missing_subject_never_matches_ownership() -> None:
    assert evaluate(None, Role.MEMBER, Action.DELETE, Resource(kind=ResourceKind.PROJECT)) is False
    assert evaluate(None, Role.MEMBER, Action.DELETE, Resource(kind=ResourceKind.PROJECT, owner_id=SUBJECT)) is False


def test_evaluation_is_repeatable() -> None:
    ability = get_user_permissions(SUBJECT, Role.MEMBER)
    own = Resource(kind=ResourceKind.PROJECT, owner_id=SUBJECT)
    other = Resource(kind=ResourceKind.PROJECT, owner_id=OTHER)

    first = [ability.can(Action.DELETE, own), ability.can(Action.DELETE, other)]
    for _ in range(10):
        assert [ability.can(Action.DELETE, own), ability.can(Action.DELETE, other)] == first
        assert evaluate(SUBJECT, Role.MEMBER, Action.DELETE, own) is first[0]


def test_resource_built_from_entity_carries_owner() -> None:
    class Row:
        id = "project-1"
        owner_id = SUBJECT

    resource = Resource.project(Row())

    assert resource == Resource(kind=ResourceKind.PROJECT, owner_id=SUBJECT, id="project-1")
    assert Resource.organization(object()).owner_id is None


def test_rule_table_has_an_entry_per_role() -> None:
    assert set(RULES) == set(Role)
