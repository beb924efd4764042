"""State store actions emitted by the query runner.

These are the notifications the build state reacts to. They are emitted
on the event bus and consumed by BuildState (or any other subscriber,
e.g. an incremental rebuild planner).
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class PendingPageDataWrite:
    """Emitted after a page result is staged in .cache/json.

    The staged file is incomplete until a second pass promotes it to
    public page-data; subscribers collect these paths for that pass.

    Attributes:
        path: Query identity (page path) of the staged result
    """

    path: str


@dataclass(frozen=True, slots=True)
class PageQueryRun:
    """Emitted after every query run, whether or not it wrote anything.

    Attributes:
        path: Query identity
        component_path: Template owning the query
        is_page: Whether this was a page query
    """

    path: str
    component_path: str
    is_page: bool


@dataclass(frozen=True, slots=True)
class PageDataSet:
    """Emitted for page queries when build-on-data-change is enabled.

    Attributes:
        id: Query identity (page path)
        result_hash: Content hash of the page's current result
    """

    id: str
    result_hash: str
