"""Unit tests for Lambda dependency factory."""

import os
from unittest.mock import MagicMock, Mock, patch

import pytest
from fastapi import FastAPI

import src.lambda_dependencies as deps
from src.lambda_dependencies import (
    get_dynamodb_resource,
    get_fastapi_app,
    get_services,
    initialize_lambda_environment,
)


def clear_caches() -> None:
    """Reset module-level caches between tests."""
    deps._dynamodb_resource = None
    deps._services = None
    deps._fastapi_app = None


@pytest.mark.unit
class TestGetDynamoDBResource:
    """Tests for get_dynamodb_resource function."""

    def teardown_method(self) -> None:
        """Clear cached resources after each test."""
        clear_caches()

    @patch("src.lambda_dependencies.create_dynamodb_resource")
    def test_caches_resource_for_reuse(self, mock_create: Mock) -> None:
        """Test that DynamoDB resource is cached and reused across calls."""
        mock_create.return_value = MagicMock()

        result1 = get_dynamodb_resource()
        result2 = get_dynamodb_resource()

        mock_create.assert_called_once()
        assert result1 is result2


@pytest.mark.unit
class TestGetServices:
    """Tests for get_services function."""

    def teardown_method(self) -> None:
        """Clear cached services after each test."""
        clear_caches()

    @patch("src.lambda_dependencies.create_services")
    @patch("src.lambda_dependencies.get_dynamodb_resource")
    def test_creates_services_once(self, mock_get_dynamodb: Mock, mock_create: Mock) -> None:
        """Test that services are built from the cached resource and reused."""
        mock_dynamodb = MagicMock()
        mock_get_dynamodb.return_value = mock_dynamodb
        mock_services = MagicMock()
        mock_create.return_value = mock_services

        first = get_services()
        second = get_services()

        mock_create.assert_called_once_with(mock_dynamodb)
        assert first is second is mock_services


@pytest.mark.unit
class TestGetFastAPIApp:
    """Tests for get_fastapi_app function."""

    def teardown_method(self) -> None:
        """Clear cached app after each test."""
        clear_caches()

    @patch("src.lambda_dependencies.setup_observability")
    @patch("src.lambda_dependencies.create_app")
    @patch("src.lambda_dependencies.get_services")
    @patch.dict(os.environ, {"ADMIN_API_KEY": "lambda-key"}, clear=True)
    def test_creates_app_once_with_observability(
        self, mock_get_services: Mock, mock_create_app: Mock, mock_setup: Mock
    ) -> None:
        """Test that the app is wired, instrumented and cached."""
        services = MagicMock()
        mock_get_services.return_value = services
        mock_app = MagicMock(spec=FastAPI)
        mock_create_app.return_value = mock_app

        first = get_fastapi_app()
        second = get_fastapi_app()

        assert first is second is mock_app
        mock_create_app.assert_called_once()
        kwargs = mock_create_app.call_args.kwargs
        assert kwargs["business_service"] is services.business_service
        assert kwargs["api_keys"] == ["lambda-key"]
        mock_setup.assert_called_once_with(mock_app)

    @patch("src.lambda_dependencies.setup_observability")
    @patch("src.lambda_dependencies.create_app")
    @patch("src.lambda_dependencies.get_services")
    @patch.dict(os.environ, {"ENABLE_TRACING": "false"}, clear=True)
    def test_skips_observability_when_disabled(
        self, mock_get_services: Mock, mock_create_app: Mock, mock_setup: Mock
    ) -> None:
        """Test that tracing can be switched off."""
        mock_create_app.return_value = MagicMock(spec=FastAPI)

        get_fastapi_app()

        mock_setup.assert_not_called()


@pytest.mark.unit
class TestInitializeLambdaEnvironment:
    """Tests for initialize_lambda_environment function."""

    @patch("src.lambda_dependencies.configure_logging")
    @patch.dict(os.environ, {"LOG_LEVEL": "DEBUG"}, clear=True)
    def test_configures_logging_with_env_level(self, mock_configure_logging: Mock) -> None:
        """Test that logging is configured with LOG_LEVEL from environment."""
        initialize_lambda_environment()

        mock_configure_logging.assert_called_once_with("DEBUG")

    @patch("src.lambda_dependencies.configure_logging")
    @patch.dict(os.environ, {}, clear=True)
    def test_uses_default_log_level_when_not_set(self, mock_configure_logging: Mock) -> None:
        """Test that default INFO level is used when LOG_LEVEL not set."""
        initialize_lambda_environment()

        mock_configure_logging.assert_called_once_with("INFO")
