"""
Seed script to populate demo users, organizations and projects.

Creates three organizations where the demo user holds each role:
- acme-admin (ADMIN, owner)
- acme-member (MEMBER)
- acme-billing (BILLING)

Usage:
    uv run python -m scripts.seed
"""
import asyncio
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database.engine import get_db, init_db
from app.features.organizations.models import Organization, Member
from app.features.permissions.models import Role
from app.features.projects.models import Project
from app.features.users.auth import hash_password
from app.features.users.models import User
from app.utils import create_slug, get_logger


log = get_logger(__name__)

DEMO_PASSWORD = "123456"

DEFAULT_USERS = [
    ("John Doe", "john@acme.com"),
    ("Jane Roe", "jane@acme.com"),
    ("Max Poe", "max@acme.com"),
]

# slug -> (name, role of john, owner email)
DEFAULT_ORGANIZATIONS = {
    "acme-admin": ("Acme Inc (Admin)", Role.ADMIN, "john@acme.com"),
    "acme-member": ("Acme Inc (Member)", Role.MEMBER, "jane@acme.com"),
    "acme-billing": ("Acme Inc (Billing)", Role.BILLING, "jane@acme.com"),
}


async def seed_users(db: AsyncSession) -> dict[str, User]:
    """Create demo users, skipping those that already exist."""
    users_map: dict[str, User] = {}
    
    for name, email in DEFAULT_USERS:
        result = await db.execute(select(User).where(User.email == email))
        user = result.scalar_one_or_none()
        
        if user is None:
            user = User(name=name, email=email, password_hash=hash_password(DEMO_PASSWORD))
            db.add(user)
            log.info(f"Created user: {email}")
        else:
            log.debug(f"User '{email}' already exists, skipping")
        
        users_map[email] = user
    
    await db.flush()
    return users_map


async def seed_organizations(db: AsyncSession, users_map: dict[str, User]):
    """Create the demo organizations, their memberships and a few projects."""
    john = users_map["john@acme.com"]
    
    for slug, (name, john_role, owner_email) in DEFAULT_ORGANIZATIONS.items():
        result = await db.execute(select(Organization).where(Organization.slug == slug))
        if result.scalar_one_or_none() is not None:
            log.debug(f"Organization '{slug}' already exists, skipping")
            continue
        
        owner = users_map[owner_email]
        organization = Organization(
            name=name,
            slug=slug,
            domain="acme.com" if john_role is Role.ADMIN else None,
            should_attach_users_by_domain=john_role is Role.ADMIN,
            owner_id=owner.id,
        )
        db.add(organization)
        await db.flush()
        
        for user in users_map.values():
            if user is john:
                role = john_role
            elif user is owner:
                role = Role.ADMIN
            else:
                role = Role.MEMBER
            db.add(Member(organization_id=organization.id, user_id=user.id, role=role))
        
        for index, user in enumerate(users_map.values(), start=1):
            project_name = f"{name} Project {index}"
            db.add(Project(
                name=project_name,
                description=f"Demo project for {name}",
                slug=create_slug(project_name),
                organization_id=organization.id,
                owner_id=user.id,
            ))
        
        log.info(f"Created organization '{slug}' with john as {john_role.value}")
    
    await db.commit()


async def main():
    """Main function to seed demo data."""
    log.info("Starting seeding...")
    
    log.info("Initializing database tables...")
    await init_db()
    
    async for db in get_db():
        try:
            users_map = await seed_users(db)
            await seed_organizations(db, users_map)
            log.info(f"Seeding completed. Sign in as john@acme.com / {DEMO_PASSWORD}")
        except Exception as e:
            log.error(f"Error seeding data: {e}", exc_info=True)
            await db.rollback()
            raise
        
        break  # Only use first session


if __name__ == "__main__":
    asyncio.run(main())
