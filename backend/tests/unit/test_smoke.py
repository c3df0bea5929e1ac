"""
Smoke tests to verify the testing infrastructure is correctly configured.

These tests validate:
- Database session fixture
- Async client fixture
- Test mode settings
"""

import pytest
from sqlalchemy import text
from sqlalchemy.orm import Session


def test_db_session(db_session: Session):
    """
    Test that the database session fixture works correctly.

    Verifies:
    - Session is created
    - Can execute a simple query
    """
    result = db_session.execute(text("SELECT 1 as value"))
    row = result.fetchone()

    assert row is not None
    assert row.value == 1


@pytest.mark.asyncio
async def test_async_client(async_client):
    """
    Test that the async HTTP client fixture reaches the FastAPI app.
    """
    response = await async_client.get("/")

    assert response.status_code == 200
    assert response.json()["status"] == "operational"


def test_settings_fixture(test_settings):
    """
    Test that the settings fixture works correctly.

    Verifies:
    - Settings are loaded
    - Test mode is correctly set
    - Database URL points at the in-memory test database
    """
    assert test_settings is not None
    assert test_settings.is_testing is True
    assert test_settings.database_url == "sqlite://"
    assert test_settings.backend_url == test_settings.BACKEND_URL_DEV


def test_backend_url_follows_mode():
    """Production mode points the team configuration loader at the public API."""
    from archefc.core.config import Settings

    production = Settings(MODE="PRODUCTION")

    assert production.is_production is True
    assert production.backend_url == production.BACKEND_URL_PROD
