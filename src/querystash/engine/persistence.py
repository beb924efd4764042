# src/querystash/engine/persistence.py
"""PersistenceRouter - picks the output layout for a result and writes it."""

from __future__ import annotations

import asyncio
from pathlib import Path

import structlog

from querystash.contracts.events import PendingPageDataWrite
from querystash.contracts.jobs import QueryJob
from querystash.core.config import ProgramSettings
from querystash.core.events import EventBusProtocol
from querystash.core.output import write_text_atomic
from querystash.core.page_data import staged_result_path, static_query_result_path

slog = structlog.get_logger(__name__)


class PersistenceRouter:
    """Writes serialized results to one of two layouts.

    - Page queries: staged under .cache/json, keyed by identity. The staged
      file may be incomplete until a second pass promotes it to public
      page-data, so every write is announced with PendingPageDataWrite.
    - Non-page queries: written straight to public/page-data/sq/d, keyed
      by the query's content hash. Queries with the same hash share one
      file.

    Writes are atomic (temp file + rename) and run in a worker thread so
    the event loop keeps serving other jobs.
    """

    def __init__(self, program: ProgramSettings, bus: EventBusProtocol) -> None:
        """Initialize router.

        Args:
            program: Site root and the output directories under it
            bus: Receives PendingPageDataWrite after page writes
        """
        self._program = program
        self._bus = bus

    def output_path(self, job: QueryJob) -> Path:
        """Destination file for a job's result.

        Raises:
            ValueError: For a non-page job without a query hash
        """
        if job.is_page:
            return staged_result_path(self._program.cache_dir, job.id)
        if not job.hash:
            raise ValueError(f"Non-page query {job.id!r} has no hash; its output is addressed by hash")
        return static_query_result_path(self._program.public_dir, job.hash)

    async def write(self, job: QueryJob, result_json: str) -> Path:
        """Write a serialized result and announce staged page writes.

        Raises:
            OSError: If the write fails; nothing is announced in that case
        """
        path = self.output_path(job)
        await asyncio.to_thread(write_text_atomic, path, result_json)
        slog.debug("query_result_persisted", query_id=job.id, path=str(path), bytes=len(result_json))
        if job.is_page:
            self._bus.emit(PendingPageDataWrite(path=job.id))
        return path
