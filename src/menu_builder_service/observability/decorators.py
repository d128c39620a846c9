"""OpenTelemetry tracing decorators."""

import functools
import inspect
from collections.abc import Callable
from typing import Any, TypeVar

from opentelemetry import trace

F = TypeVar("F", bound=Callable[..., Any])

SERVICE_NAME = "menu-builder-svc"


def _set_outcome(span: trace.Span, result: Any) -> None:
    # None/False is how services report "not found or not authorized"
    span.set_attribute("success", True)
    span.set_attribute("resolved", result is not None and result is not False)


def _record_failure(span: trace.Span, error: Exception) -> None:
    span.set_attribute("success", False)
    span.set_attribute("error.type", type(error).__name__)
    span.set_attribute("error.message", str(error))
    span.record_exception(error)


def traced(span_name: str | None = None, service_name: str = SERVICE_NAME) -> Callable[[F], F]:
    """Decorator to add OpenTelemetry tracing to a function.

    Creates a span around the decorated function. Exceptions are recorded on the
    span and re-raised. A None or False return value is tagged as unresolved so
    ownership denials can be told apart from successful calls in traces.

    Args:
        span_name: Name for the span (defaults to function name if not provided)
        service_name: Service name for span attributes

    Returns:
        Decorated function with tracing

    Example:
        @traced("category.reorder")
        async def reorder(self, entries, principal_id) -> bool:
            ...
    """

    def decorator(func: F) -> F:
        name = span_name or func.__name__
        tracer = trace.get_tracer(service_name)

        @functools.wraps(func)
        async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
            with tracer.start_as_current_span(name) as span:
                span.set_attribute("service.name", service_name)
                if span_name:
                    span.set_attribute("function.name", func.__name__)

                try:
                    result = await func(*args, **kwargs)
                except Exception as e:
                    _record_failure(span, e)
                    raise
                _set_outcome(span, result)
                return result

        @functools.wraps(func)
        def sync_wrapper(*args: Any, **kwargs: Any) -> Any:
            with tracer.start_as_current_span(name) as span:
                span.set_attribute("service.name", service_name)
                if span_name:
                    span.set_attribute("function.name", func.__name__)

                try:
                    result = func(*args, **kwargs)
                except Exception as e:
                    _record_failure(span, e)
                    raise
                _set_outcome(span, result)
                return result

        if inspect.iscoroutinefunction(func):
            return async_wrapper  # type: ignore
        else:
            return sync_wrapper  # type: ignore

    return decorator
