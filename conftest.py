"""Global pytest configuration."""

import os

# Configure the app for tests before any app imports
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("JWT_SECRET", "test-secret-key-used-only-by-the-test-suite")
os.environ["RATE_LIMIT_ENABLED"] = "0"
