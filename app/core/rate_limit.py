"""
Shared slowapi limiter.

Requests are keyed by their Authorization header; unauthenticated auth
endpoints override the key with the client address.
"""
from slowapi import Limiter

from app.core import config
from app.features.users.dependencies import get_authorization_header

limiter = Limiter(key_func=get_authorization_header, enabled=config.RATE_LIMIT_ENABLED)
