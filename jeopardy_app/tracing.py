"""
Tracing helpers for the jeopardy board.

Decorators and context managers that wrap board loading, provider calls and
views in OpenTelemetry spans. Everything degrades to a plain call when no
OTLP endpoint is configured.
"""

import os
import time
from contextlib import contextmanager
from functools import wraps

from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode

_TRACING_ENABLED = None


def is_tracing_enabled():
    """
    Check whether an OTLP endpoint is configured.

    The result is cached; call reset_tracing_cache() after changing the
    environment (tests do this).
    """
    global _TRACING_ENABLED

    if _TRACING_ENABLED is None:
        _TRACING_ENABLED = bool(os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT"))
    return _TRACING_ENABLED


def reset_tracing_cache():
    global _TRACING_ENABLED
    _TRACING_ENABLED = None


def _record_success(span, start_time, **extra):
    span.set_attribute("operation.success", True)
    span.set_attribute("operation.execution_time_ms", (time.time() - start_time) * 1000)
    for key, value in extra.items():
        span.set_attribute(key, value)
    span.set_status(Status(StatusCode.OK))


def _record_failure(span, start_time, error):
    span.set_attribute("operation.success", False)
    span.set_attribute("operation.execution_time_ms", (time.time() - start_time) * 1000)
    span.set_attribute("operation.error", str(error))
    span.set_attribute("operation.error_type", type(error).__name__)
    span.record_exception(error)
    span.set_status(Status(StatusCode.ERROR, str(error)))


class _NoopSpan:
    def set_attribute(self, key, value):
        pass

    def set_status(self, status):
        pass

    def record_exception(self, exception):
        pass


@contextmanager
def trace_operation(operation_name, **attributes):
    """
    Trace a block of code, or a whole function when used as a decorator.

    Example:
        @trace_operation("BoardLoader.load_board")
        def load_board(...):
            ...

        with trace_operation("provider.categories", offset=42) as span:
            ...
    """
    if not is_tracing_enabled():
        yield _NoopSpan()
        return

    tracer = trace.get_tracer(__name__)
    with tracer.start_as_current_span(operation_name, attributes=attributes) as span:
        start_time = time.time()
        try:
            yield span
            _record_success(span, start_time)
        except Exception as e:
            _record_failure(span, start_time, e)
            raise


def trace_view(view_name, **attributes):
    """
    Decorator for Django views; adds the HTTP method, route and status code to the span.

    Example:
        @trace_view("reveal_cell")
        def reveal_cell(request, category, question):
            ...
    """

    def decorator(func):
        @wraps(func)
        def wrapper(request, *args, **kwargs):
            if not is_tracing_enabled():
                return func(request, *args, **kwargs)

            tracer = trace.get_tracer(__name__)
            view_attributes = {
                "http.route": getattr(getattr(request, "resolver_match", None), "route", "") or "",
                "http.method": request.method,
                "http.url": request.build_absolute_uri(),
                **attributes,
            }
            with tracer.start_as_current_span(f"view.{view_name}", attributes=view_attributes) as span:
                start_time = time.time()
                try:
                    result = func(request, *args, **kwargs)
                    _record_success(span, start_time, **{"http.status_code": getattr(result, "status_code", 200)})
                    return result
                except Exception as e:
                    _record_failure(span, start_time, e)
                    raise

        return wrapper

    return decorator


def add_span_attribute(key, value):
    """
    Add an attribute to the current span.

    Example:
        add_span_attribute("board.category_count", 6)
    """
    if not is_tracing_enabled():
        return

    current_span = trace.get_current_span()
    if current_span:
        current_span.set_attribute(key, value)
