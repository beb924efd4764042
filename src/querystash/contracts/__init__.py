"""Shared contracts for cross-boundary data types.

This package is a LEAF MODULE with no outbound dependencies to core/engine.
Settings classes are NOT re-exported here - import them from
querystash.core.config.

Import patterns:
    from querystash.contracts import QueryJob, PageContext, ExecutionResult
    from querystash.core.config import QuerystashSettings
"""

from querystash.contracts.errors import (
    BuildPanicError,
    ConfigurationError,
    ErrorLocation,
    QuerystashError,
    StructuredError,
)
from querystash.contracts.events import (
    PageDataSet,
    PageQueryRun,
    PendingPageDataWrite,
)
from querystash.contracts.jobs import (
    PAGE_BOOKKEEPING_KEYS,
    ExecutionResult,
    GraphQLErrorInfo,
    PageContext,
    QueryJob,
    QueryOutcome,
    SourceLocation,
)
from querystash.contracts.protocols import (
    ExecutionEngine,
    PageDataChecker,
    Reporter,
)

__all__ = [
    "PAGE_BOOKKEEPING_KEYS",
    "BuildPanicError",
    "ConfigurationError",
    "ErrorLocation",
    "ExecutionEngine",
    "ExecutionResult",
    "GraphQLErrorInfo",
    "PageContext",
    "PageDataChecker",
    "PageDataSet",
    "PageQueryRun",
    "PendingPageDataWrite",
    "QueryJob",
    "QueryOutcome",
    "QuerystashError",
    "Reporter",
    "SourceLocation",
    "StructuredError",
]
