# src/querystash/engine/error_aggregator.py
"""ErrorAggregator - turns engine errors into one consolidated report."""

from __future__ import annotations

from typing import Any

import structlog

from querystash.contracts.errors import StructuredError
from querystash.contracts.jobs import ExecutionResult, GraphQLErrorInfo, QueryJob
from querystash.contracts.protocols import Reporter
from querystash.core.code_frame import UNAVAILABLE, get_code_frame
from querystash.core.error_parser import parse_error

slog = structlog.get_logger(__name__)

# Owner reported when the job does not name one
NO_PLUGIN = "none"


class ErrorAggregator:
    """Enriches every error of a failed query and reports them as a batch.

    Each error gets:
    1. A code frame from the query text at its first location
       ("unavailable" when the location is missing or malformed)
    2. The owning template path (filePath)
    3. The page URL path (urlPath), page queries only
    4. The page's nested query context keys, when non-empty
    5. The owning plugin id (plugin), "none" when absent

    The batch goes to the reporter in a single panic_on_build() call, which
    in a production build raises and halts it.

    Example:
        aggregator = ErrorAggregator(reporter)
        if result.has_errors:
            aggregator.report(job, result)
    """

    def __init__(self, reporter: Reporter) -> None:
        self._reporter = reporter

    def enrich(self, job: QueryJob, error: GraphQLErrorInfo) -> StructuredError | None:
        """Classify one engine error and attach the job's diagnostic context.

        Returns:
            Enriched StructuredError, or None if the error has nothing to report
        """
        structured = parse_error(error.message)
        if not structured:
            return None

        location = error.first_location
        code_frame = UNAVAILABLE
        if location is not None:
            code_frame = get_code_frame(job.query, location.line, location.column)

        # Job diagnostics are applied after the page context so a user
        # context key can never mask filePath, urlPath or plugin.
        context: dict[str, Any] = dict(structured["context"])
        page = job.page_context
        if page is not None:
            context.update(page.query_context)
        context["codeFrame"] = code_frame
        context["filePath"] = job.component_path
        if page is not None and page.path:
            context["urlPath"] = page.path
        context["plugin"] = job.plugin_creator_id or NO_PLUGIN

        structured["context"] = context
        return structured

    def collect(self, job: QueryJob, result: ExecutionResult) -> list[StructuredError]:
        """Enrich all errors of a result, dropping those with nothing to report."""
        enriched = (self.enrich(job, error) for error in result.errors or ())
        return [error for error in enriched if error]

    def report(self, job: QueryJob, result: ExecutionResult) -> None:
        """Report every error of a failed query in one call.

        Raises:
            BuildPanicError: Propagated from the reporter in build mode
        """
        structured_errors = self.collect(job, result)
        slog.debug(
            "query_errors_collected",
            query_id=job.id,
            component_path=job.component_path,
            error_count=len(structured_errors),
        )
        self._reporter.panic_on_build(structured_errors)
