# src/querystash/core/__init__.py
"""Core infrastructure: Canonical, Configuration, Logging, Events, State, Output."""

from querystash.core.canonical import (
    canonical_json,
    stable_hash,
)
from querystash.core.code_frame import get_code_frame
from querystash.core.config import (
    LoggingSettings,
    ProgramSettings,
    QuerySettings,
    QuerystashSettings,
    load_settings,
    settings_from_env,
)
from querystash.core.error_parser import parse_error
from querystash.core.events import (
    EventBus,
    EventBusProtocol,
    NullEventBus,
)
from querystash.core.logging import (
    configure_logging,
    get_logger,
)
from querystash.core.output import write_text_atomic
from querystash.core.page_data import page_data_exists
from querystash.core.reporter import BuildReporter
from querystash.core.result_cache import ResultHashCache
from querystash.core.state import BuildState

__all__ = [
    "BuildReporter",
    "BuildState",
    "EventBus",
    "EventBusProtocol",
    "LoggingSettings",
    "NullEventBus",
    "ProgramSettings",
    "QuerySettings",
    "QuerystashSettings",
    "ResultHashCache",
    "canonical_json",
    "configure_logging",
    "get_code_frame",
    "get_logger",
    "load_settings",
    "page_data_exists",
    "parse_error",
    "settings_from_env",
    "stable_hash",
    "write_text_atomic",
]
