"""
Pydantic schemas for organization member requests and responses.
"""
from pydantic import BaseModel

from app.features.permissions.models import Role


class MemberDetail(BaseModel):
    id: str
    user_id: str
    role: Role
    name: str | None = None
    email: str
    avatar_url: str | None = None


class MemberListResponse(BaseModel):
    members: list[MemberDetail]


class MemberUpdate(BaseModel):
    role: Role
