"""
Shared fixtures for Field Management service tests.
"""

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from shared.config import get_config
from shared.metrics import get_metrics_collector
from service_fields.app.main import create_app
from service_fields.app.persistence.database import Database


@pytest.fixture
def database_url(tmp_path):
    """SQLite database file private to one test."""
    return f"sqlite+aiosqlite:///{tmp_path / 'fields.db'}"


@pytest.fixture
def config(database_url):
    """Service configuration pointing at the test database."""
    return get_config("fields", 8020, database_url=database_url, env="test")


@pytest.fixture
def client(config):
    """Test client with startup/shutdown run around it."""
    with TestClient(create_app(config)) as test_client:
        yield test_client


@pytest.fixture
def metrics():
    return get_metrics_collector("fields-test")


@pytest_asyncio.fixture
async def database(database_url):
    """Started database, disposed after the test."""
    db = Database(database_url)
    await db.start()
    yield db
    await db.stop()

