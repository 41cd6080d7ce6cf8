"""Shared test fixtures and configuration."""
import os

import pytest

# Settings are validated on first access; these defaults keep module imports
# working without a real database or .env file.
os.environ.setdefault("SECRET_KEY", "test-secret")
os.environ.setdefault("ALLOWED_ORIGINS", "http://localhost:3000")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"
