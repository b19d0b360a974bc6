"""
Tests for shared configuration, logging and error helpers.
"""

import pytest
from pydantic import ValidationError

from shared.config import get_config
from shared.errors import BackendRejected, ErrorKind, GatewayError, InvalidLogin
from shared.logging import REDACTED_VALUE, redact_secrets
from shared.metrics import MetricsCollector


class TestConfig:
    """Test cases for service configuration."""

    def test_defaults(self):
        config = get_config("gateway", 8080)

        assert config.service_name == "gateway"
        assert config.backend_rpc_url == "http://localhost:9090"
        assert config.token_symmetric_key is None

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("GALAXY_BACKEND_RPC_URL", "http://backend:9090")

        assert get_config("gateway", 8080).backend_rpc_url == "http://backend:9090"

    def test_symmetric_key_must_be_32_characters(self):
        with pytest.raises(ValidationError):
            get_config("gateway", 8080, token_symmetric_key="too-short")

        config = get_config("gateway", 8080, token_symmetric_key="k" * 32)
        assert config.token_symmetric_key.get_secret_value() == "k" * 32
        assert "k" * 32 not in repr(config)


class TestRedaction:
    """Test cases for the log redaction processor."""

    def test_secret_keys_are_masked(self):
        event = redact_secrets(None, "info", {
            "event": "Login",
            "password": "hunter2",
            "Authorization": "Bearer abc",
            "refresh_token": "r",
            "username": "alice",
        })

        assert event["password"] == REDACTED_VALUE
        assert event["Authorization"] == REDACTED_VALUE
        assert event["refresh_token"] == REDACTED_VALUE
        assert event["username"] == "alice"


class TestGatewayError:
    """Test cases for GatewayError."""

    def test_details_never_reach_the_response(self):
        error = BackendRejected("item not found", {"detail": "sql: no rows"}, status_code=400)

        assert error.to_response().model_dump() == {"error": "item not found"}

    def test_defaults(self):
        error = GatewayError()

        assert error.status_code == 500
        assert error.kind is ErrorKind.BACKEND_UNAVAILABLE
        assert error.message == "internal server error"

    def test_invalid_login_message_is_fixed(self):
        assert InvalidLogin({"stage": "verify"}).message == "username or password is incorrect"


class TestMetricsCollector:
    """Test cases for MetricsCollector."""

    def test_errors_are_labelled_with_own_service(self):
        metrics = MetricsCollector("gateway")

        metrics.record_error("validation")

        value = metrics.registry.get_sample_value("errors_total", {"error_type": "validation", "service": "gateway"})
        assert value == 1.0
