"""
User, recovery token and linked account models with ULID primary keys.
"""
import enum
from datetime import datetime
from sqlalchemy import String, ForeignKey, DateTime, UniqueConstraint, Enum as SQLEnum, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database.base import Base, TimestampMixin, generate_ulid


class TokenType(str, enum.Enum):
    PASSWORD_RECOVER = "PASSWORD_RECOVER"


class AccountProvider(str, enum.Enum):
    GITHUB = "GITHUB"


class User(Base, TimestampMixin):
    """
    User model representing authenticated users.
    
    ``password_hash`` is empty for users who only ever signed in through a
    social provider.
    """
    __tablename__ = "users"
    
    id: Mapped[str] = mapped_column(String(26), primary_key=True, default=generate_ulid)
    
    # User information
    name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    password_hash: Mapped[str | None] = mapped_column(String(255), nullable=True)
    avatar_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    
    # Relationships
    tokens: Mapped[list["Token"]] = relationship(
        "Token",
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    
    accounts: Mapped[list["Account"]] = relationship(
        "Account",
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    
    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email!r})>"


class Token(Base):
    """One-time code issued for password recovery."""
    __tablename__ = "tokens"
    __mapper_args__ = {"eager_defaults": True}
    
    id: Mapped[str] = mapped_column(String(26), primary_key=True, default=generate_ulid)
    type: Mapped[TokenType] = mapped_column(SQLEnum(TokenType), nullable=False)
    user_id: Mapped[str] = mapped_column(
        String(26),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    
    user: Mapped["User"] = relationship("User", back_populates="tokens", lazy="selectin")
    
    def __repr__(self) -> str:
        return f"<Token(id={self.id}, type={self.type}, user_id={self.user_id})>"


class Account(Base):
    """External identity linked to a user (GitHub)."""
    __tablename__ = "accounts"
    __table_args__ = (
        UniqueConstraint("provider", "user_id", name="uq_accounts_provider_user"),
    )
    
    id: Mapped[str] = mapped_column(String(26), primary_key=True, default=generate_ulid)
    provider: Mapped[AccountProvider] = mapped_column(SQLEnum(AccountProvider), nullable=False)
    provider_account_id: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    user_id: Mapped[str] = mapped_column(
        String(26),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    
    user: Mapped["User"] = relationship("User", back_populates="accounts", lazy="selectin")
    
    def __repr__(self) -> str:
        return f"<Account(id={self.id}, provider={self.provider}, user_id={self.user_id})>"
