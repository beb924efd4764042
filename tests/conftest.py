# tests/conftest.py
"""Shared test fixtures and helpers.

Test doubles:
- FakeEngine: ExecutionEngine returning canned results, optionally held
  open until the test releases it
- RecordingReporter: Reporter that records instead of logging/raising,
  unless told to raise like a production build
- EventRecorder: Collects every event emitted on an EventBus

Hypothesis Configuration:
- "ci" profile: Fast tests for CI (100 examples) - default
- "nightly" profile: Thorough tests (1000 examples)
- "debug" profile: Minimal tests with verbose output (10 examples)

Set profile via environment variable:
    HYPOTHESIS_PROFILE=nightly pytest tests/property/
"""

from __future__ import annotations

import asyncio
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import pytest
from hypothesis import Phase, Verbosity, settings

from querystash.contracts.errors import BuildPanicError, StructuredError
from querystash.contracts.events import PageDataSet, PageQueryRun, PendingPageDataWrite
from querystash.contracts.jobs import ExecutionResult
from querystash.core.config import ProgramSettings, QuerySettings, QuerystashSettings
from querystash.core.events import EventBus

# =============================================================================
# Hypothesis Configuration
# =============================================================================

settings.register_profile(
    "ci",
    max_examples=100,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
)

settings.register_profile(
    "nightly",
    max_examples=1000,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
)

settings.register_profile(
    "debug",
    max_examples=10,
    verbosity=Verbosity.verbose,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
)

settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "ci"))


# =============================================================================
# Test doubles
# =============================================================================


class FakeEngine:
    """ExecutionEngine that returns a fixed result for every query.

    Set `hold` to an asyncio.Event to keep queries pending until it is set.
    Set `error` to make every query raise it.
    """

    def __init__(
        self,
        result: ExecutionResult | Mapping[str, Any] | None = None,
        *,
        hold: asyncio.Event | None = None,
        error: BaseException | None = None,
    ) -> None:
        self.result = result if result is not None else {"data": {}}
        self.hold = hold
        self.error = error
        self.calls: list[tuple[str, dict[str, Any], str]] = []

    async def query(self, query: str, context: Mapping[str, Any], *, query_name: str) -> ExecutionResult | Mapping[str, Any]:
        self.calls.append((query, dict(context), query_name))
        if self.hold is not None:
            await self.hold.wait()
        if self.error is not None:
            raise self.error
        return self.result


class RecordingReporter:
    """Reporter that records calls; raises BuildPanicError if `fatal`."""

    def __init__(self, *, fatal: bool = True) -> None:
        self.fatal = fatal
        self.warnings: list[str] = []
        self.panics: list[list[StructuredError]] = []

    def warn(self, message: str) -> None:
        self.warnings.append(message)

    def panic_on_build(self, errors: list[StructuredError]) -> None:
        self.panics.append(errors)
        if self.fatal:
            raise BuildPanicError(errors)


class EventRecorder:
    """Subscribes to every runner action on a bus and keeps them in order."""

    def __init__(self, bus: EventBus) -> None:
        self.events: list[object] = []
        for event_type in (PendingPageDataWrite, PageQueryRun, PageDataSet):
            bus.subscribe(event_type, self.events.append)

    def of_type(self, event_type: type) -> list[Any]:
        return [event for event in self.events if isinstance(event, event_type)]


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def site_root(tmp_path: Path) -> Path:
    root = tmp_path / "site"
    root.mkdir()
    return root


@pytest.fixture
def qs_settings(site_root: Path) -> QuerystashSettings:
    """Settings rooted at a temporary site, with a short slow-query delay."""
    return QuerystashSettings(
        program=ProgramSettings(directory=site_root),
        query=QuerySettings(slow_query_warning_seconds=0.05),
    )


@pytest.fixture
def bus() -> EventBus:
    return EventBus()


@pytest.fixture
def recorder(bus: EventBus) -> EventRecorder:
    return EventRecorder(bus)


@pytest.fixture
def reporter() -> RecordingReporter:
    return RecordingReporter()
