# src/querystash/core/result_cache.py
"""In-memory content-hash cache for query results.

Maps query identity -> hash of the result last written to (or confirmed
present in) durable storage. It is owned by a BuildSession and lives only
as long as that session: a fresh process starts cold, which is why page
queries also check that their built output exists.
"""

from __future__ import annotations

from collections.abc import Iterator


class ResultHashCache:
    """Identity -> last persisted result hash.

    Entries are created on first write and overwritten, never merged or
    deleted, for the life of the cache. No locking: each identity is only
    mutated by the job that owns it, under a single event loop.
    """

    def __init__(self) -> None:
        self._hashes: dict[str, str] = {}

    def get(self, identity: str) -> str | None:
        """Last stored hash for an identity, or None if never written."""
        return self._hashes.get(identity)

    def matches(self, identity: str, result_hash: str) -> bool:
        """Whether the stored hash for identity equals result_hash."""
        return self._hashes.get(identity) == result_hash

    def set(self, identity: str, result_hash: str) -> None:
        """Record result_hash as the persisted hash for identity."""
        self._hashes[identity] = result_hash

    def __len__(self) -> int:
        return len(self._hashes)

    def __contains__(self, identity: object) -> bool:
        return identity in self._hashes

    def __iter__(self) -> Iterator[str]:
        return iter(self._hashes)
