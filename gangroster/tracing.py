"""
OpenTelemetry tracing for fighter mutations.

Tracing mode is controlled by the TRACING_MODE setting:
- "off": Tracing is disabled (no-op)
- "console": Spans are printed to stdout (for development)
- "gcp": Spans are exported to Google Cloud Trace (for production)

Typical usage:

    from gangroster.tracing import span, traced

    @traced("handle_fighter_status_change")
    def handle_fighter_status_change(...):
        ...

    with span("fighter_image_cleanup", fighter_id=str(fighter_id)):
        ...

Exceptions are recorded on the active span and re-raised.
"""

import logging
import os
from contextlib import contextmanager
from functools import wraps
from typing import Any, Callable, Generator, Optional

from django.conf import settings

logger = logging.getLogger(__name__)

_tracing_enabled = False
_tracer = None
_initialized = False


def _get_tracing_mode():
    return getattr(settings, "TRACING_MODE", "off")


def _get_processor():
    """Build the span processor for the configured mode."""
    if _get_tracing_mode() == "console":
        from opentelemetry.sdk.trace.export import (
            ConsoleSpanExporter,
            SimpleSpanProcessor,
        )

        return SimpleSpanProcessor(ConsoleSpanExporter())

    from opentelemetry.exporter.cloud_trace import CloudTraceSpanExporter
    from opentelemetry.sdk.trace.export import BatchSpanProcessor

    return BatchSpanProcessor(
        CloudTraceSpanExporter(project_id=os.getenv("GOOGLE_CLOUD_PROJECT"))
    )


def _init_tracing() -> None:
    """Initialize OpenTelemetry once, unless TRACING_MODE is "off"."""
    global _tracing_enabled, _tracer, _initialized

    if _initialized:
        return

    _initialized = True

    tracing_mode = _get_tracing_mode()
    if tracing_mode == "off":
        logger.debug("Tracing disabled (TRACING_MODE=off)")
        return

    try:
        from opentelemetry import trace
        from opentelemetry.instrumentation.django import DjangoInstrumentor
        from opentelemetry.instrumentation.logging import LoggingInstrumentor
        from opentelemetry.propagate import set_global_textmap
        from opentelemetry.propagators.cloud_trace_propagator import (
            CloudTraceFormatPropagator,
        )
        from opentelemetry.sdk.trace import TracerProvider

        # Cloud Run sends X-Cloud-Trace-Context rather than traceparent
        set_global_textmap(CloudTraceFormatPropagator())

        provider = TracerProvider()
        provider.add_span_processor(_get_processor())
        trace.set_tracer_provider(provider)

        DjangoInstrumentor().instrument()
        LoggingInstrumentor().instrument(set_logging_format=False)

        _tracer = trace.get_tracer("gangroster.tracing")
        _tracing_enabled = True

        logger.info(f"OpenTelemetry tracing enabled (mode={tracing_mode})")

    except ImportError as e:
        logger.warning(f"OpenTelemetry packages not installed: {e}")
    except Exception as e:
        logger.error(f"Failed to initialize OpenTelemetry tracing: {e}", exc_info=True)


@contextmanager
def span(
    name: str, *, record_exception: bool = True, **attributes: Any
) -> Generator[Optional[Any], None, None]:
    """Create a custom span as a context manager.

    Yields the span object, or None when tracing is disabled.
    """
    if not _tracing_enabled or _tracer is None:
        yield None
        return

    with _tracer.start_as_current_span(name) as current_span:
        for key, value in attributes.items():
            current_span.set_attribute(key, str(value))

        try:
            yield current_span
        except Exception as e:
            if record_exception:
                from opentelemetry.trace import Status, StatusCode

                current_span.record_exception(e)
                current_span.set_status(Status(StatusCode.ERROR))
            raise


def traced(name: Optional[str] = None, **default_attributes: Any) -> Callable:
    """Decorator that wraps a function call in a span named after it."""

    def decorator(func: Callable) -> Callable:
        span_name = name or func.__name__

        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            with span(span_name, **default_attributes):
                return func(*args, **kwargs)

        return wrapper

    return decorator


def is_tracing_enabled() -> bool:
    return _tracing_enabled


def _reset_tracing() -> None:
    """Reset tracing state. Only for tests."""
    global _tracing_enabled, _tracer, _initialized
    _tracing_enabled = False
    _tracer = None
    _initialized = False


_init_tracing()
