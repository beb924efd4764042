"""Query engine: timeout monitor, error aggregation, sanitizing, persistence, runner."""

from querystash.engine.error_aggregator import ErrorAggregator
from querystash.engine.persistence import PersistenceRouter
from querystash.engine.runner import QueryRunner
from querystash.engine.sanitizer import (
    BOOKKEEPING_KEYS,
    sanitize_page_context,
    sanitize_page_context_mapping,
)
from querystash.engine.session import BuildSession
from querystash.engine.spans import SpanFactory
from querystash.engine.timeout import TimeoutMonitor, slow_query_message

__all__ = [
    "BOOKKEEPING_KEYS",
    "BuildSession",
    "ErrorAggregator",
    "PersistenceRouter",
    "QueryRunner",
    "SpanFactory",
    "TimeoutMonitor",
    "sanitize_page_context",
    "sanitize_page_context_mapping",
    "slow_query_message",
]
