"""Protocols for the collaborators the query runner calls into.

The execution engine is always supplied by the host build. Reporter and
page-data checker have default implementations in core/ but any object
satisfying these protocols can replace them.
"""

from collections.abc import Awaitable, Mapping
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from querystash.contracts.errors import StructuredError
from querystash.contracts.jobs import ExecutionResult


@runtime_checkable
class ExecutionEngine(Protocol):
    """Runs a query against the build's data layer."""

    def query(
        self,
        query: str,
        context: Mapping[str, Any],
        *,
        query_name: str,
    ) -> Awaitable[ExecutionResult | Mapping[str, Any]]:
        """Execute a query.

        Args:
            query: Query text
            context: Variables available to the query
            query_name: Query identity, for tracing correlation

        Returns:
            Awaitable resolving to an ExecutionResult or its dict form
        """
        ...


@runtime_checkable
class Reporter(Protocol):
    """User-facing reporting channel."""

    def warn(self, message: str) -> None:
        """Report an advisory message. Never halts the build."""
        ...

    def panic_on_build(self, errors: list[StructuredError]) -> None:
        """Report a batch of errors. Fatal to a production build."""
        ...


class PageDataChecker(Protocol):
    """Checks whether a page's built page-data file already exists."""

    def __call__(self, public_dir: Path, page_path: str) -> bool: ...
