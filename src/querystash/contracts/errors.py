# src/querystash/contracts/errors.py
"""Error schemas and exceptions.

StructuredError is the shape every reported query error takes: what the
reporter prints and what BuildPanicError carries.
"""

from typing import Any, NotRequired, TypedDict


class ErrorLocation(TypedDict):
    """Start position of an error inside a file."""

    line: int
    column: int


class StructuredError(TypedDict):
    """Schema for a classified, context-enriched error.

    Keys are camelCase where the build tooling reads them verbatim.
    """

    id: str  # Stable error code, e.g. "85901"
    text: str  # Human-readable message
    level: str  # "ERROR" or "WARNING"
    category: str  # "USER", "THIRD_PARTY", "SYSTEM" or "UNKNOWN"
    type: str  # Error family, e.g. "GRAPHQL"
    context: dict[str, Any]  # Diagnostic context (codeFrame, filePath, ...)
    filePath: NotRequired[str]
    location: NotRequired[dict[str, ErrorLocation]]
    docsUrl: NotRequired[str]


class QuerystashError(Exception):
    """Base class for errors raised by querystash."""

    pass


class ConfigurationError(QuerystashError):
    """Raised when settings cannot be loaded or are invalid."""

    pass


class BuildPanicError(QuerystashError):
    """Raised when query errors halt the build.

    Carries the whole batch so the caller can render every error with its
    context in one report.

    Attributes:
        errors: Structured errors that caused the panic, in engine order
    """

    def __init__(self, errors: list[StructuredError]) -> None:
        self.errors = errors
        if len(errors) == 1:
            summary = errors[0]["text"]
        else:
            summary = f"{len(errors)} query errors"
        super().__init__(f"Build failed: {summary}")
