"""
Invite routes.

``router`` holds the organization-scoped management endpoints and is mounted
under ``/organizations``; ``invite_router`` holds the endpoints used by the
invitee.
"""
from typing import Annotated
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database.engine import get_db
from app.core.errors import BadRequestError
from app.features.organizations.models import Member
from app.features.permissions.models import Action, ResourceKind
from app.features.permissions.dependencies import require_permission
from app.features.users.dependencies import get_current_user
from app.features.users.models import User
from app.features.invites.models import Invite
from app.features.invites.schemas import (
    InviteCreate,
    InviteCreated,
    InviteDetail,
    InviteResponse,
    InviteListResponse,
)
from app.utils import get_logger


log = get_logger(__name__)
router = APIRouter(tags=["invites"])
invite_router = APIRouter(tags=["invites"])


async def get_invite_or_400(db: AsyncSession, invite_id: str) -> Invite:
    result = await db.execute(select(Invite).where(Invite.id == invite_id))
    invite = result.scalar_one_or_none()
    
    if invite is None:
        raise BadRequestError("Invite not found or expired.")
    
    return invite


def ensure_invite_recipient(invite: Invite, user: User) -> None:
    if invite.email.lower() != user.email.lower():
        raise BadRequestError("This invite belongs to another user.")


# Organization-scoped endpoints
@router.post("/{slug}/invites", response_model=InviteCreated, status_code=status.HTTP_201_CREATED)
async def create_invite(
    invite_data: InviteCreate,
    membership: Annotated[Member, Depends(require_permission(
        Action.CREATE, ResourceKind.INVITE, "You're not allowed to create new invites."
    ))],
    db: Annotated[AsyncSession, Depends(get_db)]
):
    """Invite an e-mail to join the organization with a role."""
    organization = membership.organization
    email = invite_data.email
    domain = email.split("@")[1]
    
    if organization.should_attach_users_by_domain and organization.domain == domain:
        raise BadRequestError(
            f"Users with '{domain}' domain will join your organization automatically on login."
        )
    
    result = await db.execute(
        select(Invite.id).where(
            func.lower(Invite.email) == email,
            Invite.organization_id == organization.id
        )
    )
    if result.first() is not None:
        raise BadRequestError("Another invite with same e-mail already exists.")
    
    result = await db.execute(
        select(Member.id)
        .join(User, Member.user_id == User.id)
        .where(
            Member.organization_id == organization.id,
            func.lower(User.email) == email
        )
    )
    if result.first() is not None:
        raise BadRequestError("A member with this e-mail already belongs to your organization.")
    
    invite = Invite(
        email=email,
        role=invite_data.role,
        organization_id=organization.id,
        author_id=membership.user_id,
    )
    db.add(invite)
    await db.commit()
    
    log.info("Invite %s created for %s in %s", invite.id, email, organization.slug)
    return InviteCreated(invite_id=invite.id)


@router.get("/{slug}/invites", response_model=InviteListResponse)
async def get_invites(
    membership: Annotated[Member, Depends(require_permission(
        Action.GET, ResourceKind.INVITE, "You're not allowed to get organization invites."
    ))],
    db: Annotated[AsyncSession, Depends(get_db)]
):
    """Get all organization invites, newest first."""
    result = await db.execute(
        select(Invite)
        .where(Invite.organization_id == membership.organization_id)
        .order_by(Invite.created_at.desc())
    )
    invites = result.scalars().all()
    return InviteListResponse(invites=[InviteDetail.model_validate(invite) for invite in invites])


@router.delete("/{slug}/invites/{invite_id}", status_code=status.HTTP_204_NO_CONTENT)
async def revoke_invite(
    invite_id: str,
    membership: Annotated[Member, Depends(require_permission(
        Action.DELETE, ResourceKind.INVITE, "You're not allowed to delete an invite."
    ))],
    db: Annotated[AsyncSession, Depends(get_db)]
):
    """Revoke an invite."""
    result = await db.execute(
        select(Invite).where(
            Invite.id == invite_id,
            Invite.organization_id == membership.organization_id
        )
    )
    invite = result.scalar_one_or_none()
    
    if invite is None:
        raise BadRequestError("Invite not found.")
    
    await db.delete(invite)
    await db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# Invitee endpoints
@invite_router.get("/invites/{invite_id}", response_model=InviteResponse)
async def get_invite(
    invite_id: str,
    db: Annotated[AsyncSession, Depends(get_db)]
):
    """Get invite details. Public so the invite link can be previewed before signing in."""
    invite = await get_invite_or_400(db, invite_id)
    return InviteResponse(invite=InviteDetail.model_validate(invite))


@invite_router.post("/invites/{invite_id}/accept", status_code=status.HTTP_204_NO_CONTENT)
async def accept_invite(
    invite_id: str,
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)]
):
    """Accept an invite, joining the organization with the invited role."""
    invite = await get_invite_or_400(db, invite_id)
    ensure_invite_recipient(invite, user)
    
    result = await db.execute(
        select(Member.id).where(
            Member.organization_id == invite.organization_id,
            Member.user_id == user.id
        )
    )
    if result.first() is not None:
        raise BadRequestError("You're already a member of this organization.")
    
    db.add(Member(user_id=user.id, organization_id=invite.organization_id, role=invite.role))
    await db.delete(invite)
    await db.commit()
    
    log.info("User %s accepted invite %s", user.id, invite_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@invite_router.post("/invites/{invite_id}/reject", status_code=status.HTTP_204_NO_CONTENT)
async def reject_invite(
    invite_id: str,
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)]
):
    """Reject an invite."""
    invite = await get_invite_or_400(db, invite_id)
    ensure_invite_recipient(invite, user)
    
    await db.delete(invite)
    await db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@invite_router.get("/pending-invites", response_model=InviteListResponse)
async def get_pending_invites(
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)]
):
    """Get invites addressed to the caller's e-mail."""
    result = await db.execute(
        select(Invite)
        .where(func.lower(Invite.email) == user.email.lower())
        .order_by(Invite.created_at.desc())
    )
    invites = result.scalars().all()
    return InviteListResponse(invites=[InviteDetail.model_validate(invite) for invite in invites])
