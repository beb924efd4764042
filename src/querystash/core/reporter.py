# src/querystash/core/reporter.py
"""Default Reporter: structlog output plus build-mode panics."""

from __future__ import annotations

from typing import Literal

import structlog

from querystash.contracts.errors import BuildPanicError, StructuredError

slog = structlog.get_logger(__name__)


class BuildReporter:
    """Reports warnings and query errors for a build.

    In "build" mode panic_on_build() raises BuildPanicError after logging
    the batch: a production build must not ship pages whose data failed.
    In "develop" mode it only logs, so the development server keeps
    serving while the author fixes the query.

    Attributes:
        warnings: Every message passed to warn(), in order
        errors: Every structured error reported, in order
    """

    def __init__(self, mode: Literal["build", "develop"] = "build") -> None:
        self._mode = mode
        self.warnings: list[str] = []
        self.errors: list[StructuredError] = []

    @property
    def mode(self) -> str:
        return self._mode

    def warn(self, message: str) -> None:
        self.warnings.append(message)
        slog.warning(message)

    def panic_on_build(self, errors: list[StructuredError]) -> None:
        """Log a batch of structured errors; raise in build mode.

        Raises:
            BuildPanicError: In build mode, carrying the whole batch
        """
        self.errors.extend(errors)
        for error in errors:
            slog.error(
                error["text"],
                error_id=error["id"],
                category=error["category"],
                context=error["context"],
            )
        if self._mode == "build":
            raise BuildPanicError(errors)
