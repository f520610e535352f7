"""
Pydantic schemas for organization-related requests and responses.
"""
from datetime import datetime
from pydantic import BaseModel, Field, field_validator

from app.features.permissions.models import Role


class OrganizationBase(BaseModel):
    """Base organization schema."""
    name: str = Field(..., min_length=1, max_length=255)
    domain: str | None = Field(None, max_length=255, description="E-mail domain used for auto-join")
    should_attach_users_by_domain: bool = Field(
        default=False,
        description="Automatically add new users whose e-mail matches the domain"
    )

    @field_validator("domain")
    @classmethod
    def blank_domain_is_none(cls, v: str | None) -> str | None:
        """Store blank domains as NULL so they never collide on the unique index."""
        if v is None:
            return None
        v = v.strip().lower()
        return v or None


class OrganizationCreate(OrganizationBase):
    """Schema for creating a new organization."""
    pass


class OrganizationUpdate(OrganizationBase):
    """Schema for updating organization information."""
    pass


class OrganizationCreated(BaseModel):
    organization_id: str


class OrganizationDetail(BaseModel):
    id: str
    name: str
    slug: str
    domain: str | None = None
    should_attach_users_by_domain: bool
    avatar_url: str | None = None
    owner_id: str
    created_at: datetime
    updated_at: datetime
    
    model_config = {"from_attributes": True}


class OrganizationResponse(BaseModel):
    organization: OrganizationDetail


class OrganizationWithRole(BaseModel):
    """Organization summary together with the caller's role in it."""
    id: str
    name: str
    slug: str
    avatar_url: str | None = None
    role: Role


class OrganizationListResponse(BaseModel):
    organizations: list[OrganizationWithRole]


class MembershipDetail(BaseModel):
    id: str
    role: Role
    user_id: str
    organization_id: str
    
    model_config = {"from_attributes": True}


class MembershipResponse(BaseModel):
    membership: MembershipDetail


class TransferOwnershipRequest(BaseModel):
    transfer_to_user_id: str = Field(..., description="ID of the member who becomes the owner")
