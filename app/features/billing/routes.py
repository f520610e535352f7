"""
Billing routes.

Seats are charged per member (billing-only members are free) and projects
per project.
"""
from typing import Annotated
from fastapi import APIRouter, Depends
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database.engine import get_db
from app.features.organizations.models import Member
from app.features.permissions.models import Action, ResourceKind, Role
from app.features.permissions.dependencies import require_permission
from app.features.projects.models import Project
from app.features.billing.schemas import BillingLine, BillingDetail, BillingResponse


SEAT_UNIT_PRICE = 10
PROJECT_UNIT_PRICE = 20

router = APIRouter(tags=["billing"])


def build_billing(seats: int, projects: int) -> BillingDetail:
    """Price a seat and project count."""
    seats_line = BillingLine(amount=seats, unit=SEAT_UNIT_PRICE, price=seats * SEAT_UNIT_PRICE)
    projects_line = BillingLine(amount=projects, unit=PROJECT_UNIT_PRICE, price=projects * PROJECT_UNIT_PRICE)
    return BillingDetail(
        seats=seats_line,
        projects=projects_line,
        total=seats_line.price + projects_line.price,
    )


@router.get("/{slug}/billing", response_model=BillingResponse)
async def get_organization_billing(
    membership: Annotated[Member, Depends(require_permission(
        Action.GET, ResourceKind.BILLING, "You're not allowed to get billing details from this organization."
    ))],
    db: Annotated[AsyncSession, Depends(get_db)]
):
    """Get billing information from an organization."""
    seats = await db.scalar(
        select(func.count(Member.id)).where(
            Member.organization_id == membership.organization_id,
            Member.role != Role.BILLING
        )
    )
    projects = await db.scalar(
        select(func.count(Project.id)).where(Project.organization_id == membership.organization_id)
    )
    return BillingResponse(billing=build_billing(seats or 0, projects or 0))
