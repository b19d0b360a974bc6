"""
Shared fixtures for gateway tests.
"""

import pytest
from unittest.mock import AsyncMock
from fastapi.testclient import TestClient

from shared.config import get_config
from service_gateway.app.adapters.backend_client import BackendClient
from service_gateway.app.auth.passwords import BcryptPasswordHasher
from service_gateway.app.main import GatewayService

from factories import make_auth_response


@pytest.fixture
def backend():
    """Backend client double; every RPC is an AsyncMock."""
    mock = AsyncMock(spec=BackendClient)
    mock.authorize.return_value = make_auth_response(user_id=1)
    mock.check_health.return_value = True
    return mock


@pytest.fixture
def hasher():
    """Cheap bcrypt rounds keep tests fast."""
    return BcryptPasswordHasher(rounds=4)


@pytest.fixture
def gateway(backend, hasher):
    """Gateway wired to the backend double."""
    config = get_config("gateway", 8080, env="test", log_level="warning")
    return GatewayService(config=config, backend=backend, password_hasher=hasher)


@pytest.fixture
def client(gateway):
    """Create test client."""
    return TestClient(gateway.app)
