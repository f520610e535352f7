"""
Project routes, scoped to an organization.
"""
from typing import Annotated
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database.engine import get_db
from app.core.errors import BadRequestError
from app.features.organizations.dependencies import get_user_membership
from app.features.organizations.models import Member
from app.features.permissions.models import Action, Resource, ResourceKind
from app.features.permissions.dependencies import ensure_can, get_membership_ability, require_permission
from app.features.projects.models import Project
from app.features.projects.schemas import (
    ProjectCreate,
    ProjectUpdate,
    ProjectCreated,
    ProjectDetail,
    ProjectResponse,
    ProjectListResponse,
)
from app.utils import generate_unique_slug, get_logger


log = get_logger(__name__)
router = APIRouter(tags=["projects"])


async def get_organization_project(db: AsyncSession, organization_id: str, project_id: str) -> Project:
    """Get a project inside an organization or raise 400."""
    result = await db.execute(
        select(Project).where(
            Project.id == project_id,
            Project.organization_id == organization_id
        )
    )
    project = result.scalar_one_or_none()
    
    if project is None:
        raise BadRequestError("Project not found.")
    
    return project


@router.post("/{slug}/projects", response_model=ProjectCreated, status_code=status.HTTP_201_CREATED)
async def create_project(
    project_data: ProjectCreate,
    membership: Annotated[Member, Depends(require_permission(
        Action.CREATE, ResourceKind.PROJECT, "You're not allowed to create new projects."
    ))],
    db: Annotated[AsyncSession, Depends(get_db)]
):
    """Create a new project owned by the caller."""
    project = Project(
        name=project_data.name,
        description=project_data.description,
        slug=await generate_unique_slug(db, Project, project_data.name, fallback="project"),
        organization_id=membership.organization_id,
        owner_id=membership.user_id,
    )
    db.add(project)
    await db.commit()
    
    return ProjectCreated(project_id=project.id)


@router.get("/{slug}/projects", response_model=ProjectListResponse)
async def get_projects(
    membership: Annotated[Member, Depends(require_permission(
        Action.GET, ResourceKind.PROJECT, "You're not allowed to see organization projects."
    ))],
    db: Annotated[AsyncSession, Depends(get_db)]
):
    """Get all organization projects, newest first."""
    result = await db.execute(
        select(Project)
        .where(Project.organization_id == membership.organization_id)
        .order_by(Project.created_at.desc())
    )
    projects = result.scalars().all()
    return ProjectListResponse(projects=[ProjectDetail.model_validate(project) for project in projects])


@router.get("/{slug}/projects/{project_slug}", response_model=ProjectResponse)
async def get_project(
    project_slug: str,
    membership: Annotated[Member, Depends(require_permission(
        Action.GET, ResourceKind.PROJECT, "You're not allowed to see this project."
    ))],
    db: Annotated[AsyncSession, Depends(get_db)]
):
    """Get project details by slug."""
    result = await db.execute(
        select(Project).where(
            Project.slug == project_slug,
            Project.organization_id == membership.organization_id
        )
    )
    project = result.scalar_one_or_none()
    
    if project is None:
        raise BadRequestError("Project not found.")
    
    return ProjectResponse(project=ProjectDetail.model_validate(project))


@router.put("/{slug}/projects/{project_id}", status_code=status.HTTP_204_NO_CONTENT)
async def update_project(
    project_id: str,
    project_data: ProjectUpdate,
    membership: Annotated[Member, Depends(get_user_membership)],
    db: Annotated[AsyncSession, Depends(get_db)]
):
    """Update a project. Members may only update projects they created."""
    project = await get_organization_project(db, membership.organization_id, project_id)
    ensure_can(
        get_membership_ability(membership),
        Action.UPDATE,
        Resource.project(project),
        "You're not allowed to update this project.",
    )
    
    project.name = project_data.name
    project.description = project_data.description
    await db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{slug}/projects/{project_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_project(
    project_id: str,
    membership: Annotated[Member, Depends(get_user_membership)],
    db: Annotated[AsyncSession, Depends(get_db)]
):
    """Delete a project. Members may only delete projects they created."""
    project = await get_organization_project(db, membership.organization_id, project_id)
    ensure_can(
        get_membership_ability(membership),
        Action.DELETE,
        Resource.project(project),
        "You're not allowed to delete this project.",
    )
    
    await db.delete(project)
    await db.commit()
    log.info("Project %s deleted by %s", project.slug, membership.user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
