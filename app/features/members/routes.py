"""
Organization member routes.
"""
from typing import Annotated
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy import case, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database.engine import get_db
from app.core.errors import BadRequestError
from app.features.organizations.models import Member
from app.features.permissions.models import Action, ResourceKind, Role
from app.features.permissions.dependencies import require_permission
from app.features.members.schemas import MemberDetail, MemberListResponse, MemberUpdate
from app.utils import get_logger


log = get_logger(__name__)
router = APIRouter(tags=["members"])

# Sorts members in the order roles are declared: ADMIN, MEMBER, BILLING
ROLE_ORDER = case(
    *[(Member.role == role, rank) for rank, role in enumerate(Role)],
    else_=len(Role),
)


async def get_organization_member(db: AsyncSession, organization_id: str, member_id: str) -> Member:
    result = await db.execute(
        select(Member).where(
            Member.id == member_id,
            Member.organization_id == organization_id
        )
    )
    member = result.scalar_one_or_none()
    
    if member is None:
        raise BadRequestError("Member not found.")
    
    return member


@router.get("/{slug}/members", response_model=MemberListResponse)
async def get_members(
    membership: Annotated[Member, Depends(require_permission(
        Action.GET, ResourceKind.USER, "You're not allowed to see organization members."
    ))],
    db: Annotated[AsyncSession, Depends(get_db)]
):
    """Get all organization members, ordered by role."""
    result = await db.execute(
        select(Member)
        .where(Member.organization_id == membership.organization_id)
        .order_by(ROLE_ORDER, Member.id)
    )
    members = result.scalars().all()
    
    return MemberListResponse(members=[
        MemberDetail(
            id=member.id,
            user_id=member.user_id,
            role=member.role,
            name=member.user.name,
            email=member.user.email,
            avatar_url=member.user.avatar_url,
        )
        for member in members
    ])


@router.put("/{slug}/members/{member_id}", status_code=status.HTTP_204_NO_CONTENT)
async def update_member(
    member_id: str,
    update_data: MemberUpdate,
    membership: Annotated[Member, Depends(require_permission(
        Action.UPDATE, ResourceKind.MEMBER, "You're not allowed to update this member."
    ))],
    db: Annotated[AsyncSession, Depends(get_db)]
):
    """Change a member's role."""
    member = await get_organization_member(db, membership.organization_id, member_id)
    
    if member.user_id == membership.organization.owner_id and update_data.role != member.role:
        raise BadRequestError("The organization owner role cannot be changed.")
    
    member.role = update_data.role
    await db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{slug}/members/{member_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_member(
    member_id: str,
    membership: Annotated[Member, Depends(require_permission(
        Action.DELETE, ResourceKind.MEMBER, "You're not allowed to remove this member from organization."
    ))],
    db: Annotated[AsyncSession, Depends(get_db)]
):
    """Remove a member from the organization."""
    member = await get_organization_member(db, membership.organization_id, member_id)
    
    if member.user_id == membership.organization.owner_id:
        raise BadRequestError("The organization owner cannot be removed.")
    
    await db.delete(member)
    await db.commit()
    log.info("Member %s removed from %s by %s", member.user_id, membership.organization.slug, membership.user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
