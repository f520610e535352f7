"""
Pydantic schemas for account, session and profile requests and responses.
"""
from pydantic import BaseModel, EmailStr, Field


class CreateAccountRequest(BaseModel):
    """Schema for signing up with e-mail and password."""
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(..., min_length=6)


class PasswordSessionRequest(BaseModel):
    email: EmailStr
    password: str


class GithubSessionRequest(BaseModel):
    code: str = Field(..., min_length=1, description="OAuth code returned by GitHub")


class TokenResponse(BaseModel):
    token: str


class PasswordRecoverRequest(BaseModel):
    email: EmailStr


class PasswordResetRequest(BaseModel):
    code: str
    password: str = Field(..., min_length=6)


class UserProfile(BaseModel):
    """Profile of the authenticated user."""
    id: str
    name: str | None = None
    email: EmailStr
    avatar_url: str | None = None
    
    model_config = {"from_attributes": True}


class ProfileResponse(BaseModel):
    user: UserProfile


class UserPublic(BaseModel):
    """Public user information (limited fields)."""
    id: str
    name: str | None = None
    avatar_url: str | None = None
    
    model_config = {"from_attributes": True}
