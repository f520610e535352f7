"""
Pydantic schemas for invite requests and responses.
"""
from datetime import datetime
from pydantic import BaseModel, EmailStr, field_validator

from app.features.permissions.models import Role
from app.features.users.schemas import UserPublic


class InviteCreate(BaseModel):
    email: EmailStr
    role: Role

    @field_validator("email")
    @classmethod
    def email_lowercase(cls, v: str) -> str:
        return v.lower()


class InviteCreated(BaseModel):
    invite_id: str


class InviteOrganization(BaseModel):
    name: str
    slug: str
    
    model_config = {"from_attributes": True}


class InviteDetail(BaseModel):
    id: str
    email: str
    role: Role
    created_at: datetime
    organization: InviteOrganization
    author: UserPublic | None = None
    
    model_config = {"from_attributes": True}


class InviteResponse(BaseModel):
    invite: InviteDetail


class InviteListResponse(BaseModel):
    invites: list[InviteDetail]
