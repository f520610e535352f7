"""
Project model. Projects belong to one organization and record their creator
as ``owner_id``, which ownership permission rules compare against.
"""
from sqlalchemy import String, ForeignKey, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database.base import Base, TimestampMixin, generate_ulid


class Project(Base, TimestampMixin):
    __tablename__ = "projects"
    
    id: Mapped[str] = mapped_column(String(26), primary_key=True, default=generate_ulid)
    
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    slug: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    avatar_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    
    organization_id: Mapped[str] = mapped_column(
        String(26),
        ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    owner_id: Mapped[str] = mapped_column(
        String(26),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    
    organization: Mapped["Organization"] = relationship(  # type: ignore
        "Organization",
        back_populates="projects"
    )
    owner: Mapped["User"] = relationship("User", lazy="selectin")  # type: ignore
    
    def __repr__(self) -> str:
        return f"<Project(id={self.id}, slug={self.slug!r}, org_id={self.organization_id})>"
