"""Integration tests for organization billing."""

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from app.features.billing.routes import build_billing
from app.features.permissions.models import Role
from tests.factories import add_member, auth_headers, create_organization, create_project, create_user


def test_build_billing_prices_seats_and_projects() -> None:
    billing = build_billing(seats=3, projects=2)

    assert billing.seats.price == 30
    assert billing.projects.price == 40
    assert billing.total == 70


@pytest.mark.asyncio
async def test_billing_member_reads_billing(client: AsyncClient, db: AsyncSession) -> None:
    owner = await create_user(db, "owner@example.com")
    member = await create_user(db, "member@example.com")
    billing = await create_user(db, "billing@example.com")
    organization = await create_organization(db, owner, "acme")
    await add_member(db, organization, member, Role.MEMBER)
    await add_member(db, organization, billing, Role.BILLING)
    await create_project(db, organization, owner, "one")
    await create_project(db, organization, member, "two")

    response = await client.get("/organizations/acme/billing", headers=auth_headers(billing))

    assert response.status_code == 200
    assert response.json() == {
        "billing": {
            "seats": {"amount": 2, "unit": 10, "price": 20},
            "projects": {"amount": 2, "unit": 20, "price": 40},
            "total": 60,
        }
    }


@pytest.mark.asyncio
async def test_member_cannot_read_billing(client: AsyncClient, db: AsyncSession) -> None:
    owner = await create_user(db, "owner@example.com")
    member = await create_user(db, "member@example.com")
    organization = await create_organization(db, owner, "acme")
    await add_member(db, organization, member, Role.MEMBER)

    response = await client.get("/organizations/acme/billing", headers=auth_headers(member))

    assert response.status_code == 401
    assert response.json() == {"message": "You're not allowed to get billing details from this organization."}
