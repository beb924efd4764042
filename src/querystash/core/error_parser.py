# src/querystash/core/error_parser.py
"""Classify query error messages into StructuredErrors.

Known GraphQL failures get a dedicated error id and the captured names in
their context; anything else falls back to the generic GraphQL error.
Ids are stable: tooling and docs link to them.
"""

import re
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from querystash.contracts.errors import ErrorLocation, StructuredError

GENERIC_GRAPHQL_ERROR_ID = "85901"


@dataclass(frozen=True, slots=True)
class _ErrorHandler:
    regex: re.Pattern[str]
    error_id: str
    category: str
    build_context: Callable[[re.Match[str]], dict[str, Any]]


_HANDLERS: tuple[_ErrorHandler, ...] = (
    _ErrorHandler(
        regex=re.compile(r'Cannot query field "(?P<field>[^"]+)" on type "(?P<type>[^"]+)"'),
        error_id="85923",
        category="USER",
        build_context=lambda m: {"field": m["field"], "type": m["type"]},
    ),
    _ErrorHandler(
        regex=re.compile(r'Unknown argument "(?P<argument>[^"]+)" on field "(?P<field>[^"]+)"'),
        error_id="85924",
        category="USER",
        build_context=lambda m: {"argument": m["argument"], "field": m["field"]},
    ),
    _ErrorHandler(
        regex=re.compile(r'Variable "\$?(?P<variable>[^"]+)" of required type "(?P<type>[^"]+)" was not provided'),
        error_id="85920",
        category="USER",
        build_context=lambda m: {"variable": m["variable"], "type": m["type"]},
    ),
    _ErrorHandler(
        regex=re.compile(r"Syntax Error: (?P<detail>.+)", re.DOTALL),
        error_id="85925",
        category="USER",
        build_context=lambda m: {"detail": m["detail"].strip()},
    ),
)


def parse_error(
    message: str,
    *,
    file_path: str | None = None,
    location: ErrorLocation | None = None,
) -> StructuredError | None:
    """Classify an error message.

    Args:
        message: Error message from the execution engine
        file_path: File the error belongs to, if known
        location: Start position in that file, if known

    Returns:
        StructuredError, or None for an empty message (nothing to report)
    """
    if not message:
        return None

    for handler in _HANDLERS:
        match = handler.regex.search(message)
        if match is not None:
            error_id = handler.error_id
            category = handler.category
            context: dict[str, Any] = {"sourceMessage": message, **handler.build_context(match)}
            break
    else:
        error_id = GENERIC_GRAPHQL_ERROR_ID
        category = "UNKNOWN"
        context = {"sourceMessage": message}

    structured: StructuredError = {
        "id": error_id,
        "text": message,
        "level": "ERROR",
        "category": category,
        "type": "GRAPHQL",
        "context": context,
    }
    if file_path is not None:
        structured["filePath"] = file_path
    if location is not None:
        structured["location"] = {"start": location}
    return structured
