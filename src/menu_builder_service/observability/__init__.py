"""Logging, OpenTelemetry instrumentation and metrics for the menu builder service."""

from menu_builder_service.observability.config import configure_logging, setup_observability
from menu_builder_service.observability.decorators import traced

__all__ = ["setup_observability", "configure_logging", "traced"]
