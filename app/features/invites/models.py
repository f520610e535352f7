"""
Invite model. An invite grants a role in an organization to whoever signs
in with the invited e-mail; it is consumed on accept or reject.
"""
from sqlalchemy import String, ForeignKey, UniqueConstraint, Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database.base import Base, TimestampMixin, generate_ulid
from app.features.permissions.models import Role


class Invite(Base, TimestampMixin):
    __tablename__ = "invites"
    __table_args__ = (
        UniqueConstraint("email", "organization_id", name="uq_invites_email_organization"),
    )
    
    id: Mapped[str] = mapped_column(String(26), primary_key=True, default=generate_ulid)
    email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    role: Mapped[Role] = mapped_column(SQLEnum(Role), nullable=False)
    
    author_id: Mapped[str | None] = mapped_column(
        String(26),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True
    )
    organization_id: Mapped[str] = mapped_column(
        String(26),
        ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    
    author: Mapped["User"] = relationship("User", lazy="selectin")  # type: ignore
    organization: Mapped["Organization"] = relationship(  # type: ignore
        "Organization",
        back_populates="invites",
        lazy="selectin"
    )
    
    def __repr__(self) -> str:
        return f"<Invite(id={self.id}, email={self.email!r}, org_id={self.organization_id}, role={self.role})>"
