"""
Organization feature routes.
"""
from typing import Annotated
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database.engine import get_db
from app.core.errors import BadRequestError
from app.features.users.dependencies import get_current_user_id
from app.features.organizations.models import Organization, Member
from app.features.organizations.schemas import (
    OrganizationCreate,
    OrganizationUpdate,
    OrganizationCreated,
    OrganizationDetail,
    OrganizationResponse,
    OrganizationWithRole,
    OrganizationListResponse,
    MembershipDetail,
    MembershipResponse,
    TransferOwnershipRequest,
)
from app.features.organizations.dependencies import get_user_membership
from app.features.permissions.models import Action, Resource, Role
from app.features.permissions.dependencies import ensure_can, get_membership_ability
from app.utils import generate_unique_slug, get_logger


log = get_logger(__name__)
router = APIRouter(tags=["organizations"])


async def _ensure_domain_available(db: AsyncSession, domain: str | None, exclude_id: str | None = None) -> None:
    if not domain:
        return
    query = select(Organization.id).where(Organization.domain == domain)
    if exclude_id is not None:
        query = query.where(Organization.id != exclude_id)
    result = await db.execute(query)
    if result.first() is not None:
        raise BadRequestError("Another organization with same domain already exists.")


@router.post("", response_model=OrganizationCreated, status_code=status.HTTP_201_CREATED)
async def create_organization(
    org_data: OrganizationCreate,
    user_id: Annotated[str, Depends(get_current_user_id)],
    db: Annotated[AsyncSession, Depends(get_db)]
):
    """Create a new organization owned by the caller, who joins it as ADMIN."""
    await _ensure_domain_available(db, org_data.domain)
    
    organization = Organization(
        name=org_data.name,
        slug=await generate_unique_slug(db, Organization, org_data.name, fallback="organization"),
        domain=org_data.domain,
        should_attach_users_by_domain=org_data.should_attach_users_by_domain,
        owner_id=user_id,
    )
    db.add(organization)
    await db.flush()
    
    db.add(Member(user_id=user_id, organization_id=organization.id, role=Role.ADMIN))
    await db.commit()
    
    log.info("Organization %s created by %s", organization.slug, user_id)
    return OrganizationCreated(organization_id=organization.id)


@router.get("", response_model=OrganizationListResponse)
async def get_organizations(
    user_id: Annotated[str, Depends(get_current_user_id)],
    db: Annotated[AsyncSession, Depends(get_db)]
):
    """Get organizations where the caller is a member."""
    result = await db.execute(
        select(Member)
        .where(Member.user_id == user_id)
        .order_by(Member.id)
    )
    memberships = result.scalars().all()
    
    return OrganizationListResponse(organizations=[
        OrganizationWithRole(
            id=membership.organization.id,
            name=membership.organization.name,
            slug=membership.organization.slug,
            avatar_url=membership.organization.avatar_url,
            role=membership.role,
        )
        for membership in memberships
    ])


@router.get("/{slug}", response_model=OrganizationResponse)
async def get_organization(
    membership: Annotated[Member, Depends(get_user_membership)]
):
    """Get details from an organization."""
    return OrganizationResponse(organization=OrganizationDetail.model_validate(membership.organization))


@router.get("/{slug}/membership", response_model=MembershipResponse)
async def get_membership(
    membership: Annotated[Member, Depends(get_user_membership)]
):
    """Get the caller's membership in an organization."""
    return MembershipResponse(membership=MembershipDetail.model_validate(membership))


@router.put("/{slug}", status_code=status.HTTP_204_NO_CONTENT)
async def update_organization(
    update_data: OrganizationUpdate,
    membership: Annotated[Member, Depends(get_user_membership)],
    db: Annotated[AsyncSession, Depends(get_db)]
):
    """Update organization details."""
    organization = membership.organization
    ensure_can(
        get_membership_ability(membership),
        Action.UPDATE,
        Resource.organization(organization),
        "You're not allowed to update this organization.",
    )
    
    await _ensure_domain_available(db, update_data.domain, exclude_id=organization.id)
    
    organization.name = update_data.name
    organization.domain = update_data.domain
    organization.should_attach_users_by_domain = update_data.should_attach_users_by_domain
    await db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{slug}", status_code=status.HTTP_204_NO_CONTENT)
async def shutdown_organization(
    membership: Annotated[Member, Depends(get_user_membership)],
    db: Annotated[AsyncSession, Depends(get_db)]
):
    """Shutdown an organization along with its members, projects and invites."""
    organization = membership.organization
    ensure_can(
        get_membership_ability(membership),
        Action.DELETE,
        Resource.organization(organization),
        "You're not allowed to shutdown this organization.",
    )
    
    await db.delete(organization)
    await db.commit()
    log.info("Organization %s shut down by %s", organization.slug, membership.user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.patch("/{slug}/owner", status_code=status.HTTP_204_NO_CONTENT)
async def transfer_organization(
    transfer_data: TransferOwnershipRequest,
    membership: Annotated[Member, Depends(get_user_membership)],
    db: Annotated[AsyncSession, Depends(get_db)]
):
    """Transfer organization ownership to another member, promoting them to ADMIN."""
    organization = membership.organization
    ensure_can(
        get_membership_ability(membership),
        Action.TRANSFER_OWNERSHIP,
        Resource.organization(organization),
        "You're not allowed to transfer this organization ownership.",
    )
    
    result = await db.execute(
        select(Member).where(
            Member.organization_id == organization.id,
            Member.user_id == transfer_data.transfer_to_user_id
        )
    )
    transfer_to_membership = result.scalar_one_or_none()
    
    if transfer_to_membership is None:
        raise BadRequestError("Target user is not a member of this organization.")
    
    transfer_to_membership.role = Role.ADMIN
    organization.owner_id = transfer_data.transfer_to_user_id
    await db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
