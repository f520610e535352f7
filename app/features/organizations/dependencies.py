"""
Organization-related dependency injection functions.
"""
from typing import Annotated
from fastapi import Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database.engine import get_db
from app.core.errors import UnauthorizedError
from app.features.users.dependencies import get_current_user_id
from app.features.organizations.models import Organization, Member


async def get_user_membership(
    slug: str,
    user_id: Annotated[str, Depends(get_current_user_id)],
    db: Annotated[AsyncSession, Depends(get_db)]
) -> Member:
    """
    Load the caller's membership in the organization identified by ``slug``.
    
    The organization is available as ``membership.organization``.
    
    Raises:
        UnauthorizedError: If the organization does not exist or the caller
            is not a member of it
    """
    result = await db.execute(
        select(Member)
        .join(Organization, Member.organization_id == Organization.id)
        .where(
            Member.user_id == user_id,
            Organization.slug == slug
        )
    )
    membership = result.scalar_one_or_none()
    
    if membership is None:
        raise UnauthorizedError("You're not a member of this organization.")
    
    return membership
