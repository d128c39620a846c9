"""Unit tests for main application entry point."""

import os
from unittest.mock import MagicMock, Mock, patch

import pytest
from fastapi import FastAPI

from src.main import create_application


@pytest.mark.unit
class TestCreateApplication:
    """Tests for create_application function."""

    @patch("src.main.setup_observability")
    @patch("src.main.configure_logging")
    @patch("src.main.create_dynamodb_resource")
    @patch("src.main.create_services")
    @patch("src.main.create_app")
    @patch.dict(
        os.environ,
        {
            "LOG_LEVEL": "DEBUG",
            "ADMIN_API_KEY": "test-admin-key-1,test-admin-key-2",
            "FRONTEND_URL": "https://menus.example.com",
            "ENVIRONMENT": "production",
        },
        clear=True,
    )
    def test_creates_application_with_all_dependencies(
        self,
        mock_create_app: Mock,
        mock_create_services: Mock,
        mock_create_dynamodb: Mock,
        mock_configure_logging: Mock,
        mock_setup_observability: Mock,
    ) -> None:
        """Test that application is created with all dependencies properly wired."""
        mock_dynamodb = MagicMock()
        mock_create_dynamodb.return_value = mock_dynamodb
        services = MagicMock()
        mock_create_services.return_value = services
        mock_app = MagicMock(spec=FastAPI)
        mock_create_app.return_value = mock_app

        result = create_application()

        mock_configure_logging.assert_called_once_with("DEBUG")
        mock_create_services.assert_called_once_with(mock_dynamodb)
        mock_create_app.assert_called_once_with(
            business_service=services.business_service,
            category_service=services.category_service,
            item_service=services.item_service,
            public_menu_service=services.public_menu_service,
            api_keys=["test-admin-key-1", "test-admin-key-2"],
            cors_origins=["https://menus.example.com"],
            expose_error_details=False,
        )
        mock_setup_observability.assert_called_once_with(mock_app)
        assert result == mock_app

    @patch("src.main.setup_observability")
    @patch("src.main.configure_logging")
    @patch("src.main.create_dynamodb_resource")
    @patch("src.main.create_services")
    @patch("src.main.create_app")
    @patch.dict(os.environ, {"ENABLE_TRACING": "false"}, clear=True)
    def test_skips_observability_when_tracing_disabled(
        self,
        mock_create_app: Mock,
        mock_create_services: Mock,
        mock_create_dynamodb: Mock,
        mock_configure_logging: Mock,
        mock_setup_observability: Mock,
    ) -> None:
        """Test that ENABLE_TRACING=false leaves the app uninstrumented."""
        mock_create_app.return_value = MagicMock(spec=FastAPI)

        create_application()

        mock_configure_logging.assert_called_once_with("INFO")
        mock_setup_observability.assert_not_called()

    @patch("src.main.setup_observability")
    @patch("src.main.configure_logging")
    @patch("src.main.create_dynamodb_resource")
    @patch.dict(os.environ, {"ENVIRONMENT": "development"}, clear=True)
    def test_builds_real_app_around_mocked_dynamodb(
        self,
        mock_create_dynamodb: Mock,
        mock_configure_logging: Mock,
        mock_setup_observability: Mock,
    ) -> None:
        """Test that the real wiring produces a routable application."""
        mock_create_dynamodb.return_value = MagicMock()

        app = create_application()

        paths = {route.path for route in app.routes}
        assert "/api/v1/health" in paths
        assert "/api/v1/menu/{slug}" in paths
        assert "/api/v1/admin/businesses" in paths
        assert app.state.api_key_validator.validate("dummy-key-for-development")
