# src/querystash/engine/runner.py
"""QueryRunner - executes one query job and decides whether to persist it."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import structlog

from querystash.contracts.events import PageDataSet, PageQueryRun
from querystash.contracts.jobs import ExecutionResult, QueryJob, QueryOutcome
from querystash.contracts.protocols import ExecutionEngine, PageDataChecker, Reporter
from querystash.core.canonical import canonical_json, hash_text
from querystash.core.config import QuerystashSettings
from querystash.core.events import EventBusProtocol
from querystash.core.result_cache import ResultHashCache
from querystash.engine.error_aggregator import ErrorAggregator
from querystash.engine.persistence import PersistenceRouter
from querystash.engine.sanitizer import sanitize_page_context
from querystash.engine.spans import SpanFactory
from querystash.engine.timeout import TimeoutMonitor, slow_query_message

slog = structlog.get_logger(__name__)


class QueryRunner:
    """Runs query jobs through the execution engine and the result cache.

    Per job, strictly in order:
    1. Execute the query (empty query -> empty result), warning once if
       it is slow
    2. Report engine errors as one batch (halts a production build)
    3. Attach the sanitized pageContext (page queries)
    4. Hash the canonical result and compare with the cached hash
    5. Write only if the hash changed or the page output is missing
    6. Emit PageQueryRun, and PageDataSet when build-on-data-change is on

    A write failure propagates before step 6: nothing is announced for a
    result that did not reach disk.

    Example:
        runner = QueryRunner(
            engine=engine,
            settings=settings,
            cache=ResultHashCache(),
            reporter=BuildReporter(),
            bus=bus,
        )
        outcome = await runner.run(job)
    """

    def __init__(
        self,
        *,
        engine: ExecutionEngine,
        settings: QuerystashSettings,
        cache: ResultHashCache,
        reporter: Reporter,
        bus: EventBusProtocol,
        page_data_checker: PageDataChecker | None = None,
        span_factory: SpanFactory | None = None,
    ) -> None:
        """Initialize runner.

        Args:
            engine: Execution engine the queries run against
            settings: Program directory, slow-query delay, feature flags
            cache: Identity -> last persisted result hash
            reporter: Receives slow-query warnings and error batches
            bus: State store actions are emitted here
            page_data_checker: Optional check for a page's built page-data;
                when given, a missing built file also forces a page write
            span_factory: Tracing spans around engine calls (no-op if None)
        """
        self._engine = engine
        self._settings = settings
        self._cache = cache
        self._reporter = reporter
        self._bus = bus
        self._page_data_checker = page_data_checker
        self._spans = span_factory or SpanFactory()
        self._errors = ErrorAggregator(reporter)
        self._router = PersistenceRouter(settings.program, bus)

    async def run(self, job: QueryJob) -> QueryOutcome:
        """Run one job end to end.

        Returns:
            QueryOutcome with the payload, its hash and whether it was written

        Raises:
            ValueError: Non-page job without a query hash
            BuildPanicError: Query errors in a production build
            OSError: Output could not be written
        """
        output_path = self._router.output_path(job)
        log = slog.bind(query_id=job.id, component_path=job.component_path, is_page=job.is_page)
        log.debug("query_started", has_query=bool(job.query))

        if not job.query:
            execution = ExecutionResult()
        else:
            execution = await self._execute(job)

        if execution.has_errors:
            log.debug("query_failed", error_count=len(execution.errors or ()))
            self._errors.report(job, execution)

        result = self._build_result(job, execution)
        result_json = canonical_json(result)
        result_hash = hash_text(result_json)

        written = False
        if self._needs_write(job, result_hash, output_path):
            await self._router.write(job, result_json)
            self._cache.set(job.id, result_hash)
            written = True
            log.info("query_result_written", result_hash=result_hash, path=str(output_path))
        else:
            log.debug("query_result_cached", result_hash=result_hash)

        self._notify(job, result_hash)
        return QueryOutcome(
            result=result,
            result_hash=result_hash,
            written=written,
            output_path=output_path,
        )

    async def _execute(self, job: QueryJob) -> ExecutionResult:
        """Call the engine inside a span, with the slow-query warning."""

        def warn_slow() -> None:
            slog.warning("query_slow", query_id=job.id, component_path=job.component_path)
            self._reporter.warn(slow_query_message(job))

        monitor = TimeoutMonitor(self._settings.query.slow_query_warning_seconds, on_timeout=warn_slow)
        with self._spans.query_span(job.id, job.component_path, is_page=job.is_page) as span:
            raw = await monitor.watch(self._engine.query(job.query, job.engine_context(), query_name=job.id))
            execution = ExecutionResult.coerce(raw)
            span.set_attribute("query.error_count", len(execution.errors or ()))
            span.set_attribute("query.slow", monitor.fired)
        return execution

    def _build_result(self, job: QueryJob, execution: ExecutionResult) -> dict[str, Any]:
        result = execution.to_payload()
        page = job.page_context
        if page is not None:
            result["pageContext"] = sanitize_page_context(page)
        return result

    def _needs_write(self, job: QueryJob, result_hash: str, output_path: Path) -> bool:
        """Write-skip decision.

        Non-page outputs are content-addressed, so only the hash matters.
        Page outputs are also rewritten when their staged file (or, with a
        page_data_checker, their built page-data) is missing, which covers
        a cold cache after restart and partially deleted builds.
        """
        if not self._cache.matches(job.id, result_hash):
            return True
        if not job.is_page:
            return False
        if not output_path.exists():
            return True
        if self._page_data_checker is not None:
            return not self._page_data_checker(self._settings.program.public_dir, job.id)
        return False

    def _notify(self, job: QueryJob, result_hash: str) -> None:
        self._bus.emit(
            PageQueryRun(
                path=job.id,
                component_path=job.component_path,
                is_page=job.is_page,
            )
        )
        if self._settings.query.page_build_on_data_changes and job.is_page:
            self._bus.emit(PageDataSet(id=job.id, result_hash=result_hash))
