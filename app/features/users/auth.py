"""
Authentication utilities: password hashing, JWT issuance/verification and
the GitHub OAuth exchange.
"""
import base64
import hashlib
import hmac
import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional

import httpx
import jwt
from pydantic import BaseModel, ValidationError

from app.core import config
from app.core.errors import BadRequestError, UnauthorizedError
from app.utils import get_logger

log = get_logger(__name__)

PASSWORD_HASH_ALGORITHM = "pbkdf2_sha256"
PASSWORD_HASH_ITERATIONS = 100000

GITHUB_TOKEN_URL = "https://github.com/login/oauth/access_token"
GITHUB_USER_URL = "https://api.github.com/user"


def hash_password(password: str, salt: Optional[bytes] = None) -> str:
    """
    Hash a password with PBKDF2-SHA256.

    The result is self-describing: ``algorithm$iterations$salt$hash`` with the
    salt and hash base64 encoded.
    """
    if salt is None:
        salt = secrets.token_bytes(16)
    pwdhash = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, PASSWORD_HASH_ITERATIONS)
    return "$".join([
        PASSWORD_HASH_ALGORITHM,
        str(PASSWORD_HASH_ITERATIONS),
        base64.b64encode(salt).decode("utf-8"),
        base64.b64encode(pwdhash).decode("utf-8"),
    ])


def verify_password(password: str, password_hash: str) -> bool:
    """Verify a password against a hash produced by ``hash_password``."""
    try:
        algorithm, iterations, salt, expected = password_hash.split("$")
        if algorithm != PASSWORD_HASH_ALGORITHM:
            return False
        pwdhash = hashlib.pbkdf2_hmac(
            "sha256",
            password.encode("utf-8"),
            base64.b64decode(salt.encode("utf-8")),
            int(iterations),
        )
        return hmac.compare_digest(pwdhash, base64.b64decode(expected.encode("utf-8")))
    except (ValueError, TypeError) as e:
        log.warning("Malformed password hash: %s", e)
        return False


def create_access_token(user_id: str, expires_in: Optional[timedelta] = None) -> str:
    """Sign a JWT whose ``sub`` claim is the user id."""
    now = datetime.now(timezone.utc)
    payload = {
        "sub": user_id,
        "iat": now,
        "exp": now + (expires_in or timedelta(days=config.JWT_EXPIRES_IN_DAYS)),
    }
    return jwt.encode(payload, config.JWT_SECRET, algorithm=config.JWT_ALGORITHM)


def verify_jwt_token(token: str) -> dict:
    """
    Verify a JWT and return its payload.
    
    Raises:
        UnauthorizedError: If the token is invalid, expired or has no subject
    """
    try:
        payload = jwt.decode(token, config.JWT_SECRET, algorithms=[config.JWT_ALGORITHM])
    except jwt.InvalidTokenError as e:
        log.debug("Rejected token: %s", e)
        raise UnauthorizedError("Invalid token")
    
    if not payload.get("sub"):
        raise UnauthorizedError("Invalid token")
    
    return payload


class GithubUser(BaseModel):
    id: int
    avatar_url: str
    name: str | None = None
    email: str | None = None


async def exchange_github_code(code: str, client: httpx.AsyncClient | None = None) -> str:
    """
    Exchange an OAuth authorization code for a GitHub access token.

    Raises:
        BadRequestError: If GitHub does not return an access token
    """
    close_client = False
    if client is None:
        client = httpx.AsyncClient(timeout=10.0)
        close_client = True
    
    try:
        response = await client.post(
            GITHUB_TOKEN_URL,
            params={
                "client_id": config.GITHUB_OAUTH_CLIENT_ID,
                "client_secret": config.GITHUB_OAUTH_CLIENT_SECRET,
                "redirect_uri": config.GITHUB_OAUTH_CLIENT_REDIRECT_URI,
                "code": code,
            },
            headers={"Accept": "application/json"},
        )
        response.raise_for_status()
        access_token = response.json().get("access_token")
    except httpx.HTTPError as e:
        log.warning("GitHub code exchange failed: %s", e)
        raise BadRequestError("Could not authenticate with GitHub.")
    finally:
        if close_client:
            await client.aclose()
    
    if not access_token:
        raise BadRequestError("Could not authenticate with GitHub.")
    
    return access_token


async def get_github_user(access_token: str, client: httpx.AsyncClient | None = None) -> GithubUser:
    """Fetch the GitHub profile for an access token."""
    close_client = False
    if client is None:
        client = httpx.AsyncClient(timeout=10.0)
        close_client = True
    
    try:
        response = await client.get(
            GITHUB_USER_URL,
            headers={"Authorization": f"Bearer {access_token}"},
        )
        response.raise_for_status()
        return GithubUser.model_validate(response.json())
    except (httpx.HTTPError, ValidationError) as e:
        log.warning("GitHub user lookup failed: %s", e)
        raise BadRequestError("Could not authenticate with GitHub.")
    finally:
        if close_client:
            await client.aclose()
