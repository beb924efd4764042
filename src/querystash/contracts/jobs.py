# src/querystash/contracts/jobs.py
"""Query jobs and execution results.

These types answer: "What was asked of the execution engine, and what
came back?"

IMPORTANT:
- QueryJob is immutable input, constructed by the caller per execution
- PageContext keeps build bookkeeping in typed fields and user-visible
  keys in `extra`, so sanitizing is a projection rather than a deletion
- ExecutionResult tolerates malformed engine output (bad locations are
  dropped) because the engine is external and errors must still be reported
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

# Raw page-object key for each bookkeeping field of PageContext.
# Order matches the order the page object is usually built in.
PAGE_BOOKKEEPING_KEYS: Mapping[str, str] = {
    "path": "path",
    "internal_component_name": "internalComponentName",
    "component": "component",
    "component_chunk_name": "componentChunkName",
    "updated_at": "updatedAt",
    "plugin_creator_node": "pluginCreator___NODE",
    "plugin_creator_id": "pluginCreatorId",
    "component_path": "componentPath",
    "context": "context",
    "is_created_by_stateful_create_pages": "isCreatedByStatefulCreatePages",
}


@dataclass(frozen=True, slots=True)
class SourceLocation:
    """1-indexed position of an error in the query text."""

    line: int
    column: int

    @classmethod
    def from_mapping(cls, raw: Any) -> SourceLocation | None:
        """Parse an engine location, returning None if it is malformed.

        Engine output is external data: a location without integer
        line/column is skipped rather than raised on.
        """
        if not isinstance(raw, Mapping):
            return None
        line = raw.get("line")
        column = raw.get("column")
        if type(line) is not int or type(column) is not int:
            return None
        return cls(line=line, column=column)


@dataclass(frozen=True, slots=True)
class GraphQLErrorInfo:
    """A single error reported by the execution engine."""

    message: str
    locations: tuple[SourceLocation, ...] = ()

    @property
    def first_location(self) -> SourceLocation | None:
        """The location the code frame points at, if any."""
        if not self.locations:
            return None
        return self.locations[0]

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> GraphQLErrorInfo:
        raw_locations = raw.get("locations") or ()
        locations = tuple(loc for loc in (SourceLocation.from_mapping(item) for item in raw_locations) if loc is not None)
        return cls(message=str(raw.get("message") or ""), locations=locations)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"message": self.message}
        if self.locations:
            payload["locations"] = [{"line": loc.line, "column": loc.column} for loc in self.locations]
        return payload


class _Unset:
    """Marker for a result key the engine did not set."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "UNSET"


# Distinguishes "no data key" from an explicit `data: null`
UNSET: Any = _Unset()


@dataclass(frozen=True, slots=True)
class ExecutionResult:
    """The execution engine's response.

    Attributes:
        errors: Ordered errors, None or empty when the query succeeded
        data: Arbitrary result payload; UNSET when the engine sent no data
            key (None is an explicit null and is persisted)
        extensions: Engine-specific extras (tracing, cost), passed through
    """

    errors: tuple[GraphQLErrorInfo, ...] | None = None
    data: Any = UNSET
    extensions: Mapping[str, Any] | None = None

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> ExecutionResult:
        """Build from the dict form most engines return."""
        raw_errors = raw.get("errors")
        errors = None
        if raw_errors:
            errors = tuple(GraphQLErrorInfo.from_mapping(item) if isinstance(item, Mapping) else GraphQLErrorInfo(message=str(item)) for item in raw_errors)
        return cls(errors=errors, data=raw.get("data", UNSET), extensions=raw.get("extensions"))

    @classmethod
    def coerce(cls, value: ExecutionResult | Mapping[str, Any]) -> ExecutionResult:
        if isinstance(value, ExecutionResult):
            return value
        return cls.from_mapping(value)

    def to_payload(self) -> dict[str, Any]:
        """Result object as persisted: only the keys the engine set."""
        payload: dict[str, Any] = {}
        if self.errors:
            payload["errors"] = [error.to_dict() for error in self.errors]
        if self.data is not UNSET:
            payload["data"] = self.data
        if self.extensions:
            payload["extensions"] = dict(self.extensions)
        return payload


@dataclass(frozen=True, slots=True)
class PageContext:
    """Context of a page query: page bookkeeping plus user-visible keys.

    A bookkeeping field set to None is treated as absent from the page
    object. `extra` holds everything else (the page's own context keys
    spread at top level), which is what ends up in the public payload.
    """

    path: str | None = None
    internal_component_name: str | None = None
    component: str | None = None
    component_chunk_name: str | None = None
    updated_at: Any = None
    plugin_creator_node: str | None = None
    plugin_creator_id: str | None = None
    component_path: str | None = None
    context: Mapping[str, Any] | None = None
    is_created_by_stateful_create_pages: bool | None = None
    extra: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> PageContext:
        """Split a raw (camelCase) page object into bookkeeping and extra keys."""
        raw_keys = set(PAGE_BOOKKEEPING_KEYS.values())
        fields = {attr: raw.get(key) for attr, key in PAGE_BOOKKEEPING_KEYS.items()}
        extra = {key: value for key, value in raw.items() if key not in raw_keys}
        return cls(**fields, extra=extra)

    def to_mapping(self) -> dict[str, Any]:
        """Raw page object, as handed to the execution engine."""
        mapping = {key: getattr(self, attr) for attr, key in PAGE_BOOKKEEPING_KEYS.items() if getattr(self, attr) is not None}
        mapping.update(self.extra)
        return mapping

    @property
    def query_context(self) -> dict[str, Any]:
        """The page's nested user context (empty when unset)."""
        return dict(self.context or {})


@dataclass(frozen=True, slots=True)
class QueryJob:
    """One query execution request.

    Attributes:
        id: Stable identity of the query slot (page path for pages);
            cache key and output filename basis
        query: Query text; empty means "produce an empty result"
        component_path: Template that owns this query (diagnostics only)
        context: PageContext for page queries, plain mapping otherwise
        is_page: Selects page vs. non-page handling
        hash: Precomputed hash of the query text; names non-page output
        plugin_creator_id: Plugin or creator that registered the query
    """

    id: str
    query: str = ""
    component_path: str = ""
    context: PageContext | Mapping[str, Any] = field(default_factory=dict)
    is_page: bool = False
    hash: str | None = None
    plugin_creator_id: str | None = None

    def __post_init__(self) -> None:
        if self.is_page and not isinstance(self.context, PageContext):
            object.__setattr__(self, "context", PageContext.from_mapping(self.context))

    @property
    def page_context(self) -> PageContext | None:
        """Typed page context, or None for non-page queries."""
        if self.is_page and isinstance(self.context, PageContext):
            return self.context
        return None

    def engine_context(self) -> dict[str, Any]:
        """Variables mapping passed to the execution engine."""
        if isinstance(self.context, PageContext):
            return self.context.to_mapping()
        return dict(self.context)


@dataclass(frozen=True, slots=True)
class QueryOutcome:
    """What a single QueryRunner.run() produced.

    Attributes:
        result: Persisted payload (includes pageContext for page queries)
        result_hash: Content hash of the canonical payload
        written: True if the payload was written, False on a cache hit
        output_path: Destination file (set whether or not it was written)
    """

    result: dict[str, Any]
    result_hash: str
    written: bool
    output_path: Path | None = None
