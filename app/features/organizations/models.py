"""
Organization and membership models.

Every user belongs to an organization through a ``Member`` row carrying
exactly one role; (organization, user) is unique.
"""
from sqlalchemy import String, ForeignKey, Boolean, UniqueConstraint, Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database.base import Base, TimestampMixin, generate_ulid
from app.features.permissions.models import Role


class Organization(Base, TimestampMixin):
    """
    Tenant owning projects, members and invites.
    
    When ``should_attach_users_by_domain`` is set, new accounts whose e-mail
    domain matches ``domain`` join automatically as members.
    """
    __tablename__ = "organizations"
    
    id: Mapped[str] = mapped_column(String(26), primary_key=True, default=generate_ulid)
    
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    domain: Mapped[str | None] = mapped_column(String(255), unique=True, nullable=True)
    should_attach_users_by_domain: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    avatar_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    
    owner_id: Mapped[str] = mapped_column(
        String(26),
        ForeignKey("users.id"),
        nullable=False,
        index=True
    )
    
    # Relationships
    owner: Mapped["User"] = relationship("User", foreign_keys=[owner_id], lazy="selectin")  # type: ignore
    
    members: Mapped[list["Member"]] = relationship(
        "Member",
        back_populates="organization",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    
    projects: Mapped[list["Project"]] = relationship(  # type: ignore
        "Project",
        back_populates="organization",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    
    invites: Mapped[list["Invite"]] = relationship(  # type: ignore
        "Invite",
        back_populates="organization",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    
    def __repr__(self) -> str:
        return f"<Organization(id={self.id}, slug={self.slug!r})>"


class Member(Base):
    """A user's membership in an organization."""
    __tablename__ = "members"
    __table_args__ = (
        UniqueConstraint("organization_id", "user_id", name="uq_members_organization_user"),
    )
    
    id: Mapped[str] = mapped_column(String(26), primary_key=True, default=generate_ulid)
    role: Mapped[Role] = mapped_column(SQLEnum(Role), default=Role.MEMBER, nullable=False)
    
    organization_id: Mapped[str] = mapped_column(
        String(26),
        ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    user_id: Mapped[str] = mapped_column(
        String(26),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    
    organization: Mapped["Organization"] = relationship("Organization", back_populates="members", lazy="selectin")
    user: Mapped["User"] = relationship("User", lazy="selectin")  # type: ignore
    
    def __repr__(self) -> str:
        return f"<Member(id={self.id}, org_id={self.organization_id}, user_id={self.user_id}, role={self.role})>"
