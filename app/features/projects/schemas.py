"""
Pydantic schemas for project requests and responses.
"""
from datetime import datetime
from pydantic import BaseModel, Field

from app.features.users.schemas import UserPublic


class ProjectBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., max_length=5000)


class ProjectCreate(ProjectBase):
    pass


class ProjectUpdate(ProjectBase):
    pass


class ProjectCreated(BaseModel):
    project_id: str


class ProjectDetail(BaseModel):
    id: str
    name: str
    description: str
    slug: str
    avatar_url: str | None = None
    organization_id: str
    owner_id: str
    created_at: datetime
    owner: UserPublic
    
    model_config = {"from_attributes": True}


class ProjectResponse(BaseModel):
    project: ProjectDetail


class ProjectListResponse(BaseModel):
    projects: list[ProjectDetail]
