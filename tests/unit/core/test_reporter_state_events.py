"""Tests for the default reporter, event bus and build state."""

import pytest

from querystash.contracts.errors import BuildPanicError, StructuredError
from querystash.contracts.events import PageDataSet, PageQueryRun, PendingPageDataWrite
from querystash.core.error_parser import parse_error
from querystash.core.events import EventBus, NullEventBus
from querystash.core.reporter import BuildReporter
from querystash.core.result_cache import ResultHashCache
from querystash.core.state import BuildState


def _error(text: str) -> StructuredError:
    error = parse_error(text)
    assert error is not None
    return error


class TestBuildReporter:
    def test_warn_records_message(self) -> None:
        reporter = BuildReporter()
        reporter.warn("Query takes too long:")

        assert reporter.warnings == ["Query takes too long:"]

    def test_build_mode_panics_with_whole_batch(self) -> None:
        reporter = BuildReporter(mode="build")
        errors = [_error("one"), _error("two")]

        with pytest.raises(BuildPanicError) as exc_info:
            reporter.panic_on_build(errors)

        assert exc_info.value.errors == errors
        assert "2 query errors" in str(exc_info.value)

    def test_single_error_panic_message_uses_text(self) -> None:
        with pytest.raises(BuildPanicError, match="only one"):
            BuildReporter().panic_on_build([_error("only one")])

    def test_develop_mode_only_records(self) -> None:
        reporter = BuildReporter(mode="develop")
        errors = [_error("one")]

        reporter.panic_on_build(errors)

        assert reporter.errors == errors


class TestEventBus:
    def test_handlers_receive_events_of_their_type(self) -> None:
        bus = EventBus()
        received: list[object] = []
        bus.subscribe(PageQueryRun, received.append)

        bus.emit(PageQueryRun(path="/a", component_path="a.js", is_page=True))
        bus.emit(PendingPageDataWrite(path="/a"))

        assert received == [PageQueryRun(path="/a", component_path="a.js", is_page=True)]

    def test_handler_exceptions_propagate(self) -> None:
        bus = EventBus()

        def broken(event: PendingPageDataWrite) -> None:
            raise RuntimeError("store failed")

        bus.subscribe(PendingPageDataWrite, broken)

        with pytest.raises(RuntimeError, match="store failed"):
            bus.emit(PendingPageDataWrite(path="/a"))

    def test_null_bus_ignores_everything(self) -> None:
        bus = NullEventBus()
        received: list[object] = []
        bus.subscribe(PageQueryRun, received.append)
        bus.emit(PageQueryRun(path="/a", component_path="a.js", is_page=True))

        assert received == []


class TestBuildState:
    def test_reduces_actions(self) -> None:
        bus = EventBus()
        state = BuildState()
        state.attach(bus)

        bus.emit(PendingPageDataWrite(path="/b"))
        bus.emit(PendingPageDataWrite(path="/a"))
        bus.emit(PendingPageDataWrite(path="/a"))
        run = PageQueryRun(path="/a", component_path="a.js", is_page=True)
        bus.emit(run)
        bus.emit(PageDataSet(id="/a", result_hash="h1"))
        bus.emit(PageDataSet(id="/a", result_hash="h2"))

        assert state.query_runs == {"/a": run}
        assert state.page_data_hashes == {"/a": "h2"}
        assert state.flush_pending() == ["/a", "/b"]
        assert state.flush_pending() == []


class TestResultHashCache:
    def test_entries_are_overwritten(self) -> None:
        cache = ResultHashCache()
        assert cache.get("/a") is None
        assert not cache.matches("/a", "h1")

        cache.set("/a", "h1")
        cache.set("/a", "h2")

        assert cache.get("/a") == "h2"
        assert cache.matches("/a", "h2")
        assert len(cache) == 1
        assert "/a" in cache
        assert list(cache) == ["/a"]

    def test_instances_do_not_share_entries(self) -> None:
        first = ResultHashCache()
        first.set("/a", "h1")

        assert ResultHashCache().get("/a") is None
