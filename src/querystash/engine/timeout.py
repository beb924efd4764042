# src/querystash/engine/timeout.py
"""Slow-query warning around a single query execution.

The monitor is observational: it races the execution against a timer,
reports once if the timer wins, and then keeps waiting for the execution.
It never cancels or retries the query.
"""

from __future__ import annotations

import asyncio
import json
from collections.abc import Awaitable, Callable
from typing import TypeVar

from querystash.contracts.jobs import QueryJob

T = TypeVar("T")


def slow_query_message(job: QueryJob) -> str:
    """Warning text for a query that has not settled in time.

    Includes the template path and, for page queries, the URL path and
    the page's nested context when it is non-empty.
    """
    parts = [
        "Query takes too long:",
        f"File path: {job.component_path}",
    ]
    page = job.page_context
    if page is not None:
        parts.append(f"URL path: {page.path}")
        if page.context:
            parts.append(f"Context: {json.dumps(page.query_context, indent=4, default=str)}")
    return "\n".join(parts)


class TimeoutMonitor:
    """Races an execution against a timer; warns at most once.

    Example:
        monitor = TimeoutMonitor(15.0, on_timeout=lambda: reporter.warn(msg))
        result = await monitor.watch(engine.query(...))
    """

    def __init__(self, delay_seconds: float, on_timeout: Callable[[], None]) -> None:
        """Initialize monitor.

        Args:
            delay_seconds: How long the execution may run before warning
            on_timeout: Called once if the execution is still pending
        """
        self._delay = delay_seconds
        self._on_timeout = on_timeout
        self.fired = False

    async def watch(self, execution: Awaitable[T]) -> T:
        """Await execution, firing on_timeout if it outlives the delay.

        The timer task is cancelled as soon as the execution settles,
        whether it succeeded or raised. The execution's result or
        exception is passed through unchanged.

        If the caller is cancelled, or on_timeout raises, the execution is
        cancelled before the exception propagates.
        """
        execution_task = asyncio.ensure_future(execution)
        timer_task = asyncio.create_task(asyncio.sleep(self._delay))
        try:
            done, _pending = await asyncio.wait(
                {execution_task, timer_task},
                return_when=asyncio.FIRST_COMPLETED,
            )
            if execution_task not in done:
                self.fired = True
                self._on_timeout()
            return await execution_task
        except BaseException:
            # No-op when the execution itself settled with this exception
            execution_task.cancel()
            raise
        finally:
            timer_task.cancel()
