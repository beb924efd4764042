"""Tests for BuildSession wiring and batch runs."""

from pathlib import Path

import pytest

from querystash.contracts.errors import BuildPanicError
from querystash.contracts.jobs import QueryJob
from querystash.core.config import ProgramSettings, QuerystashSettings
from querystash.core.reporter import BuildReporter
from querystash.engine.session import BuildSession
from tests.conftest import FakeEngine, RecordingReporter


def _page(path: str, query: str = "") -> QueryJob:
    return QueryJob(id=path, query=query, component_path="src/templates/page.js", is_page=True, context={"path": path})


class TestDefaults:
    def test_reporter_follows_build_mode(self, site_root: Path) -> None:
        settings = QuerystashSettings(program=ProgramSettings(directory=site_root, build_mode="develop"))

        session = BuildSession(settings, engine=FakeEngine())

        assert isinstance(session.reporter, BuildReporter)
        assert session.reporter.mode == "develop"

    def test_fresh_session_has_empty_cache(self, qs_settings: QuerystashSettings) -> None:
        session = BuildSession(qs_settings, engine=FakeEngine())

        assert len(session.cache) == 0
        assert session.state.pending_page_data_writes == set()


class TestRunning:
    @pytest.mark.asyncio
    async def test_state_tracks_runs_and_pending_writes(self, qs_settings: QuerystashSettings) -> None:
        session = BuildSession(qs_settings, engine=FakeEngine(), reporter=RecordingReporter())

        await session.run_query(_page("/a"))
        await session.run_query(_page("/a"))

        assert session.state.flush_pending() == ["/a"]
        assert session.state.query_runs["/a"].is_page is True
        assert "/a" in session.cache

    @pytest.mark.asyncio
    async def test_run_queries_returns_outcomes_in_job_order(self, qs_settings: QuerystashSettings) -> None:
        session = BuildSession(qs_settings, engine=FakeEngine({"data": {"ok": True}}), reporter=RecordingReporter())
        jobs = [_page("/b", "{ ok }"), _page("/a", "{ ok }"), QueryJob(id="sq-1", query="{ ok }", hash="h1")]

        outcomes = await session.run_queries(jobs)

        assert [outcome.output_path for outcome in outcomes] == [
            qs_settings.program.cache_dir / "json" / "_b.json",
            qs_settings.program.cache_dir / "json" / "_a.json",
            qs_settings.program.public_dir / "page-data" / "sq" / "d" / "h1.json",
        ]
        assert all(outcome.written for outcome in outcomes)
        assert sorted(session.state.flush_pending()) == ["/a", "/b"]

    @pytest.mark.asyncio
    async def test_run_queries_raises_first_failure_after_all_settle(self, qs_settings: QuerystashSettings) -> None:
        session = BuildSession(
            qs_settings,
            engine=FakeEngine({"errors": [{"message": "broken"}]}),
            reporter=RecordingReporter(),
        )

        with pytest.raises(BuildPanicError):
            await session.run_queries([_page("/a", "{ broken }"), _page("/b")])

        # The empty query still ran to completion
        assert "/b" in session.cache
        assert "/a" not in session.cache

    @pytest.mark.asyncio
    async def test_sessions_do_not_share_cached_hashes(self, qs_settings: QuerystashSettings) -> None:
        first = BuildSession(qs_settings, engine=FakeEngine(), reporter=RecordingReporter())
        second = BuildSession(qs_settings, engine=FakeEngine(), reporter=RecordingReporter())

        await first.run_query(_page("/a"))
        outcome = await second.run_query(_page("/a"))

        assert outcome.written
        assert first.cache is not second.cache
        assert len(second.cache) == 1
