"""Integration tests for organization member routes."""

import pytest
from httpx import AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.features.organizations.models import Member
from app.features.permissions.models import Role
from tests.factories import add_member, auth_headers, create_organization, create_user


@pytest.mark.asyncio
async def test_member_lists_members(client: AsyncClient, db: AsyncSession) -> None:
    owner = await create_user(db, "owner@example.com", name="Owner")
    member = await create_user(db, "member@example.com", name="Member")
    organization = await create_organization(db, owner, "acme")
    await add_member(db, organization, member, Role.MEMBER)

    response = await client.get("/organizations/acme/members", headers=auth_headers(member))

    assert response.status_code == 200
    members = response.json()["members"]
    assert [(m["email"], m["role"]) for m in members] == [
        ("owner@example.com", "ADMIN"),
        ("member@example.com", "MEMBER"),
    ]


@pytest.mark.asyncio
async def test_billing_cannot_list_members(client: AsyncClient, db: AsyncSession) -> None:
    owner = await create_user(db, "owner@example.com")
    billing = await create_user(db, "billing@example.com")
    organization = await create_organization(db, owner, "acme")
    await add_member(db, organization, billing, Role.BILLING)

    response = await client.get("/organizations/acme/members", headers=auth_headers(billing))

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_admin_updates_member_role(client: AsyncClient, db: AsyncSession) -> None:
    owner = await create_user(db, "owner@example.com")
    member = await create_user(db, "member@example.com")
    organization = await create_organization(db, owner, "acme")
    membership = await add_member(db, organization, member, Role.MEMBER)
    membership_id = membership.id

    response = await client.put(
        f"/organizations/acme/members/{membership_id}", json={"role": "BILLING"}, headers=auth_headers(owner)
    )
    assert response.status_code == 204

    role = (await db.execute(select(Member.role).where(Member.id == membership_id))).scalar_one()
    assert role == Role.BILLING


@pytest.mark.asyncio
async def test_member_cannot_update_roles(client: AsyncClient, db: AsyncSession) -> None:
    owner = await create_user(db, "owner@example.com")
    member = await create_user(db, "member@example.com")
    organization = await create_organization(db, owner, "acme")
    membership = await add_member(db, organization, member, Role.MEMBER)

    response = await client.put(
        f"/organizations/acme/members/{membership.id}", json={"role": "ADMIN"}, headers=auth_headers(member)
    )

    assert response.status_code == 401
    assert response.json() == {"message": "You're not allowed to update this member."}


@pytest.mark.asyncio
async def test_update_member_rejects_unknown_role(client: AsyncClient, db: AsyncSession) -> None:
    owner = await create_user(db, "owner@example.com")
    member = await create_user(db, "member@example.com")
    organization = await create_organization(db, owner, "acme")
    membership = await add_member(db, organization, member, Role.MEMBER)

    response = await client.put(
        f"/organizations/acme/members/{membership.id}", json={"role": "OWNER"}, headers=auth_headers(owner)
    )

    assert response.status_code == 400
    assert response.json()["message"] == "Validation error"


@pytest.mark.asyncio
async def test_admin_removes_member_but_not_owner(client: AsyncClient, db: AsyncSession) -> None:
    owner = await create_user(db, "owner@example.com")
    admin = await create_user(db, "admin@example.com")
    member = await create_user(db, "member@example.com")
    organization = await create_organization(db, owner, "acme")
    await add_member(db, organization, admin, Role.ADMIN)
    membership = await add_member(db, organization, member, Role.MEMBER)
    membership_id = membership.id
    owner_membership_id = (
        await db.execute(select(Member.id).where(Member.user_id == owner.id))
    ).scalar_one()

    response = await client.delete(f"/organizations/acme/members/{owner_membership_id}", headers=auth_headers(admin))
    assert response.status_code == 400
    assert response.json() == {"message": "The organization owner cannot be removed."}

    response = await client.delete(f"/organizations/acme/members/{membership_id}", headers=auth_headers(admin))
    assert response.status_code == 204

    assert (await db.execute(select(Member.id).where(Member.id == membership_id))).first() is None

    response = await client.get("/organizations/acme", headers=auth_headers(member))
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_members_are_ordered_by_role_rank(client: AsyncClient, db: AsyncSession) -> None:
    owner = await create_user(db, "owner@example.com")
    billing = await create_user(db, "billing@example.com")
    member = await create_user(db, "member@example.com")
    organization = await create_organization(db, owner, "acme")
    await add_member(db, organization, billing, Role.BILLING)
    await add_member(db, organization, member, Role.MEMBER)

    response = await client.get("/organizations/acme/members", headers=auth_headers(owner))

    assert [m["role"] for m in response.json()["members"]] == ["ADMIN", "MEMBER", "BILLING"]
