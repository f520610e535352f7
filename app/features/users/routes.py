"""
Account, session and password recovery routes.
"""
from typing import Annotated
from fastapi import APIRouter, Depends, Request, Response, status
from slowapi.util import get_remote_address
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core import config
from app.core.database.engine import get_db
from app.core.errors import BadRequestError, UnauthorizedError
from app.core.rate_limit import limiter
from app.features.organizations.models import Organization, Member
from app.features.permissions.models import Role
from app.features.users.models import User, Token, TokenType, Account, AccountProvider
from app.features.users.auth import (
    hash_password,
    verify_password,
    create_access_token,
    exchange_github_code,
    get_github_user,
)
from app.features.users.schemas import (
    CreateAccountRequest,
    PasswordSessionRequest,
    GithubSessionRequest,
    TokenResponse,
    PasswordRecoverRequest,
    PasswordResetRequest,
    ProfileResponse,
    UserProfile,
)
from app.features.users.dependencies import get_current_user
from app.utils import get_logger


log = get_logger(__name__)
router = APIRouter(tags=["auth"])


@router.post("/users", status_code=status.HTTP_201_CREATED, summary="Create a new account")
async def create_account(
    account_data: CreateAccountRequest,
    db: Annotated[AsyncSession, Depends(get_db)]
):
    """Sign up with e-mail and password, auto-joining an organization by e-mail domain."""
    result = await db.execute(select(User).where(User.email == account_data.email))
    if result.scalar_one_or_none() is not None:
        raise BadRequestError("User with same e-mail already exists.")
    
    domain = account_data.email.split("@")[1]
    result = await db.execute(
        select(Organization).where(
            Organization.domain == domain,
            Organization.should_attach_users_by_domain.is_(True)
        )
    )
    auto_join_organization = result.scalar_one_or_none()
    
    user = User(
        name=account_data.name,
        email=account_data.email,
        password_hash=hash_password(account_data.password),
    )
    db.add(user)
    await db.flush()
    
    if auto_join_organization is not None:
        db.add(Member(user_id=user.id, organization_id=auto_join_organization.id, role=Role.MEMBER))
        log.info("User %s auto-joined organization %s by domain", user.id, auto_join_organization.slug)
    
    await db.commit()
    return Response(status_code=status.HTTP_201_CREATED)


@router.post("/sessions/password", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(config.AUTH_RATE_LIMIT, key_func=get_remote_address)
async def authenticate_with_password(
    request: Request,
    credentials: PasswordSessionRequest,
    db: Annotated[AsyncSession, Depends(get_db)]
):
    """Authenticate with e-mail and password."""
    result = await db.execute(select(User).where(User.email == credentials.email))
    user = result.scalar_one_or_none()
    
    if user is None:
        raise BadRequestError("Invalid credentials.")
    
    if user.password_hash is None:
        raise BadRequestError("User does not have a password, use social login.")
    
    if not verify_password(credentials.password, user.password_hash):
        raise BadRequestError("Invalid credentials.")
    
    return TokenResponse(token=create_access_token(user.id))


@router.post("/sessions/github", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(config.AUTH_RATE_LIMIT, key_func=get_remote_address)
async def authenticate_with_github(
    request: Request,
    session_data: GithubSessionRequest,
    db: Annotated[AsyncSession, Depends(get_db)]
):
    """Authenticate with a GitHub OAuth code, creating the user on first sign-in."""
    access_token = await exchange_github_code(session_data.code)
    github_user = await get_github_user(access_token)
    
    if github_user.email is None:
        raise BadRequestError("Your GitHub account must have an email to authenticate.")

    provider_account_id = str(github_user.id)
    result = await db.execute(
        select(Account).where(
            Account.provider == AccountProvider.GITHUB,
            Account.provider_account_id == provider_account_id
        )
    )
    account = result.scalar_one_or_none()
    if account is not None:
        return TokenResponse(token=create_access_token(account.user_id))

    result = await db.execute(select(User).where(User.email == github_user.email))
    user = result.scalar_one_or_none()

    if user is None:
        user = User(
            name=github_user.name,
            email=github_user.email,
            avatar_url=github_user.avatar_url,
        )
        db.add(user)
        await db.flush()
    
    result = await db.execute(
        select(Account).where(
            Account.provider == AccountProvider.GITHUB,
            Account.user_id == user.id
        )
    )
    if result.scalar_one_or_none() is None:
        db.add(Account(
            provider=AccountProvider.GITHUB,
            provider_account_id=provider_account_id,
            user_id=user.id,
        ))
    
    await db.commit()
    return TokenResponse(token=create_access_token(user.id))


@router.get("/profile", response_model=ProfileResponse)
async def get_profile(
    user: Annotated[User, Depends(get_current_user)]
):
    """Get authenticated user profile."""
    return ProfileResponse(user=UserProfile.model_validate(user))


@router.post("/password/recover", status_code=status.HTTP_201_CREATED)
@limiter.limit(config.AUTH_RATE_LIMIT, key_func=get_remote_address)
async def request_password_recover(
    request: Request,
    recover_data: PasswordRecoverRequest,
    db: Annotated[AsyncSession, Depends(get_db)]
):
    """Issue a password recovery code. Always succeeds so e-mails cannot be enumerated."""
    result = await db.execute(select(User).where(User.email == recover_data.email))
    user = result.scalar_one_or_none()
    
    if user is not None:
        token = Token(type=TokenType.PASSWORD_RECOVER, user_id=user.id)
        db.add(token)
        await db.commit()
        # TODO: deliver the code by e-mail once an outbound mail provider is configured
        log.debug("Password recover token for %s: %s", user.email, token.id)
    
    return Response(status_code=status.HTTP_201_CREATED)


@router.post("/password/reset", status_code=status.HTTP_204_NO_CONTENT)
async def reset_password(
    reset_data: PasswordResetRequest,
    db: Annotated[AsyncSession, Depends(get_db)]
):
    """Reset password with a recovery code."""
    result = await db.execute(
        select(Token).where(
            Token.id == reset_data.code,
            Token.type == TokenType.PASSWORD_RECOVER
        )
    )
    token = result.scalar_one_or_none()
    
    if token is None:
        raise UnauthorizedError()
    
    token.user.password_hash = hash_password(reset_data.password)
    await db.delete(token)
    await db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
