# src/querystash/engine/spans.py
"""OpenTelemetry span factory for query execution.

Falls back to no-op mode when no tracer is configured.

Span Hierarchy:
    <host build span>
    └── query (query.name attribute carries the identity)
"""

from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from opentelemetry.trace import Span, Tracer


class NoOpSpan:
    """No-op span for when tracing is disabled."""

    def set_attribute(self, key: str, value: Any) -> None:
        """No-op."""
        pass


class SpanFactory:
    """Factory for query spans.

    When no tracer is provided, all span methods yield a shared NoOpSpan.

    Example:
        factory = SpanFactory(tracer=opentelemetry.trace.get_tracer("querystash"))
        with factory.query_span("/about", "src/templates/about.js", is_page=True):
            result = await engine.query(...)
    """

    # Singleton no-op span to avoid repeated allocations
    _NOOP_SPAN = NoOpSpan()

    def __init__(self, tracer: "Tracer | None" = None) -> None:
        self._tracer = tracer

    @property
    def enabled(self) -> bool:
        """Whether tracing is enabled."""
        return self._tracer is not None

    @contextmanager
    def query_span(
        self,
        query_name: str,
        component_path: str,
        *,
        is_page: bool,
    ) -> Iterator["Span | NoOpSpan"]:
        """Create a span around one query execution.

        Args:
            query_name: Query identity
            component_path: Template owning the query
            is_page: Whether this is a page query

        Yields:
            Span or NoOpSpan if tracing disabled (never None - uniform interface)
        """
        if self._tracer is None:
            yield self._NOOP_SPAN
            return

        with self._tracer.start_as_current_span("query") as span:
            span.set_attribute("query.name", query_name)
            span.set_attribute("query.component_path", component_path)
            span.set_attribute("query.is_page", is_page)
            yield span
