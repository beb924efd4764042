"""In-memory build state fed by query runner actions."""

from __future__ import annotations

from querystash.contracts.events import PageDataSet, PageQueryRun, PendingPageDataWrite
from querystash.core.events import EventBusProtocol


class BuildState:
    """Reduces query runner actions into queryable build state.

    Attributes:
        pending_page_data_writes: Page identities staged in .cache/json but
            not yet promoted to public page-data
        query_runs: Last PageQueryRun per identity
        page_data_hashes: Last result hash per page identity (only fed when
            build-on-data-change is enabled)

    Example:
        bus = EventBus()
        state = BuildState()
        state.attach(bus)
        ...
        for path in state.flush_pending():
            promote(path)
    """

    def __init__(self) -> None:
        self.pending_page_data_writes: set[str] = set()
        self.query_runs: dict[str, PageQueryRun] = {}
        self.page_data_hashes: dict[str, str] = {}

    def attach(self, bus: EventBusProtocol) -> None:
        """Subscribe this state to the actions it reduces."""
        bus.subscribe(PendingPageDataWrite, self.on_pending_page_data_write)
        bus.subscribe(PageQueryRun, self.on_page_query_run)
        bus.subscribe(PageDataSet, self.on_page_data_set)

    def on_pending_page_data_write(self, event: PendingPageDataWrite) -> None:
        self.pending_page_data_writes.add(event.path)

    def on_page_query_run(self, event: PageQueryRun) -> None:
        self.query_runs[event.path] = event

    def on_page_data_set(self, event: PageDataSet) -> None:
        self.page_data_hashes[event.id] = event.result_hash

    def flush_pending(self) -> list[str]:
        """Return pending page identities (sorted) and clear them."""
        pending = sorted(self.pending_page_data_writes)
        self.pending_page_data_writes.clear()
        return pending
