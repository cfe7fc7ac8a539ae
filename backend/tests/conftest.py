import asyncio
import os
import shutil
import tempfile
from pathlib import Path

import pytest


# Point the application at a throwaway SQLite database before importing
# orbital modules (settings and the database engine are created on import).
_SESSION_DIR = Path(tempfile.mkdtemp(prefix="orbital_pytest_"))

os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_SESSION_DIR / 'orbital.db'}"
os.environ["SEED_METADATA"] = "true"
os.environ["SEED_MEETINGS"] = "false"
os.environ["ADMIN_API_KEY"] = ""


async def _reset_database():
    from orbital.services.database_service import database_service

    await database_service.drop_db()
    await database_service.close()


@pytest.fixture
def client():
    """API client on a freshly seeded database with a cold metadata cache."""
    from fastapi.testclient import TestClient

    from orbital.main import app
    from orbital.services.metadata_service import metadata_service

    metadata_service.refresh_cache()
    with TestClient(app) as c:
        yield c

    metadata_service.refresh_cache()
    asyncio.run(_reset_database())


@pytest.fixture
def admin_key(monkeypatch):
    """Require an admin API key for the duration of a test."""
    from orbital.config import settings

    monkeypatch.setattr(settings, "admin_api_key", "test-admin-key")
    return "test-admin-key"


def pytest_sessionfinish(session, exitstatus):
    """Cleanup temporary test files after the test session."""
    shutil.rmtree(_SESSION_DIR, ignore_errors=True)
