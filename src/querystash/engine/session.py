# src/querystash/engine/session.py
"""BuildSession - owns the per-build cache and state, hands out a runner."""

from __future__ import annotations

import asyncio
from collections.abc import Iterable
from typing import TYPE_CHECKING

from querystash.contracts.jobs import QueryJob, QueryOutcome
from querystash.contracts.protocols import ExecutionEngine, PageDataChecker, Reporter
from querystash.core.config import QuerystashSettings
from querystash.core.events import EventBus
from querystash.core.reporter import BuildReporter
from querystash.core.result_cache import ResultHashCache
from querystash.core.state import BuildState
from querystash.engine.runner import QueryRunner
from querystash.engine.spans import SpanFactory

if TYPE_CHECKING:
    from opentelemetry.trace import Tracer


class BuildSession:
    """One build's worth of query running.

    The result-hash cache, event bus and build state live exactly as long
    as the session. Two sessions never share cached hashes, so tests get a
    clean slate by constructing a new session.

    Example:
        session = BuildSession(settings, engine=my_engine)
        outcome = await session.run_query(job)
        staged = session.state.flush_pending()
    """

    def __init__(
        self,
        settings: QuerystashSettings,
        *,
        engine: ExecutionEngine,
        reporter: Reporter | None = None,
        bus: EventBus | None = None,
        page_data_checker: PageDataChecker | None = None,
        tracer: "Tracer | None" = None,
    ) -> None:
        """Initialize session.

        Args:
            settings: Frozen settings for this build
            engine: Execution engine for all queries in the build
            reporter: Defaults to a BuildReporter in the program's build mode
            bus: Defaults to a new EventBus
            page_data_checker: See QueryRunner
            tracer: OpenTelemetry tracer for query spans
        """
        self.settings = settings
        self.cache = ResultHashCache()
        self.bus = bus if bus is not None else EventBus()
        self.reporter = reporter if reporter is not None else BuildReporter(settings.program.build_mode)
        self.state = BuildState()
        self.state.attach(self.bus)
        self.runner = QueryRunner(
            engine=engine,
            settings=settings,
            cache=self.cache,
            reporter=self.reporter,
            bus=self.bus,
            page_data_checker=page_data_checker,
            span_factory=SpanFactory(tracer),
        )

    async def run_query(self, job: QueryJob) -> QueryOutcome:
        """Run a single job."""
        return await self.runner.run(job)

    async def run_queries(self, jobs: Iterable[QueryJob]) -> list[QueryOutcome]:
        """Run jobs concurrently and return outcomes in job order.

        The caller picks the batch; jobs in one batch must have distinct
        identities. The first failure propagates once every job has settled.
        """
        results = await asyncio.gather(*(self.runner.run(job) for job in jobs), return_exceptions=True)
        outcomes: list[QueryOutcome] = []
        for result in results:
            if isinstance(result, BaseException):
                raise result
            outcomes.append(result)
        return outcomes
