# src/querystash/engine/sanitizer.py
"""Strip build bookkeeping from a page context before it is persisted.

The public payload of a page carries its user-visible context only. Keys
the build uses for routing, chunking and provenance must not leak into it,
and must not change the content hash between otherwise identical runs.
"""

from collections.abc import Mapping
from typing import Any

from querystash.contracts.jobs import PAGE_BOOKKEEPING_KEYS, PageContext

# Exactly these keys are removed; everything else survives unmodified
BOOKKEEPING_KEYS: frozenset[str] = frozenset(PAGE_BOOKKEEPING_KEYS.values())


def sanitize_page_context_mapping(raw: Mapping[str, Any]) -> dict[str, Any]:
    """Copy of a raw page object without the bookkeeping keys.

    The input is not mutated.
    """
    return {key: value for key, value in raw.items() if key not in BOOKKEEPING_KEYS}


def sanitize_page_context(page: PageContext) -> dict[str, Any]:
    """Public pageContext for a typed page context.

    Bookkeeping lives in typed fields, so the public part is the extra
    keys; they are filtered as well in case a caller put a bookkeeping key
    into extra directly.
    """
    return sanitize_page_context_mapping(page.extra)
