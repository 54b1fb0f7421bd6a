"""
Shared fixtures: routing config and a TestClient with the database
dependency replaced so no PostgreSQL is needed.
"""
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from resolve360 import create_app
from resolve360.database import get_db
from resolve360.services.catalog import RoutingConfig
from resolve360.utils.auth import get_current_user


@pytest.fixture
def routing_config():
    return RoutingConfig()


@pytest.fixture
def app():
    application = create_app()

    async def fake_db():
        yield MagicMock(name="conn")

    application.dependency_overrides[get_db] = fake_db
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def login(app):
    """Make every request run as the given user."""
    def _login(user):
        app.dependency_overrides[get_current_user] = lambda: dict(user)
    return _login
