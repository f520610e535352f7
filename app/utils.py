"""
Shared helpers: logging setup and slug generation.
"""
import logging
import re
import sys
import unicodedata

from app.core import config

_configured = False


def _configure_root() -> None:
    global _configured
    if _configured:
        return
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s [%(name)s] %(message)s"))
    root = logging.getLogger("app")
    root.addHandler(handler)
    root.setLevel(config.LOG_LEVEL.upper())
    root.propagate = False
    _configured = True


def get_logger(name: str) -> logging.Logger:
    """Get a module logger under the shared ``app`` handler."""
    _configure_root()
    if not name.startswith("app"):
        name = f"app.{name}"
    return logging.getLogger(name)


def create_slug(text: str) -> str:
    """
    Build a URL-safe slug from free text.

    Accents are stripped, anything that is not a letter, digit, space or
    hyphen is dropped and whitespace runs collapse to a single hyphen.

        >>> create_slug("Acme Inc (Admin)")
        'acme-inc-admin'
    """
    normalized = unicodedata.normalize("NFD", text)
    without_marks = "".join(c for c in normalized if not unicodedata.combining(c))
    cleaned = re.sub(r"[^\w\s-]", "", without_marks).replace("_", "")
    slug = re.sub(r"[\s-]+", "-", cleaned.strip()).strip("-")
    return slug.lower()


async def generate_unique_slug(db, model, name: str, fallback: str = "item") -> str:
    """
    Slug for ``name`` that is not yet used by ``model.slug``.

    Collisions get a numeric suffix: ``acme``, ``acme-2``, ``acme-3``...
    """
    from sqlalchemy import select

    base = create_slug(name) or fallback
    result = await db.execute(
        select(model.slug).where((model.slug == base) | model.slug.like(f"{base}-%"))
    )
    taken = set(result.scalars().all())
    if base not in taken:
        return base

    suffix = 2
    while f"{base}-{suffix}" in taken:
        suffix += 1
    return f"{base}-{suffix}"
