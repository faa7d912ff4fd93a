"""Sweep-specific exceptions."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from index_timeseries.infrastructure.process import CommandResult


class SweepError(Exception):
    """Base class for errors raised by the sweep driver."""


class SetupStepError(SweepError):
    """Build or fetch failed under the strict setup policy."""

    def __init__(self, step: str, result: CommandResult) -> None:
        self.step = step
        self.result = result
        super().__init__(f"{step} failed: {result.describe()}")


class BenchmarkFailedError(SweepError):
    """A benchmark invocation failed under the strict benchmark policy."""

    def __init__(self, offset: int, commit: str, result: CommandResult) -> None:
        self.offset = offset
        self.commit = commit
        self.result = result
        super().__init__(
            f"benchmark for {offset} days ago (commit {commit or '<empty>'}) failed: "
            f"{result.describe()}"
        )


__all__ = ["BenchmarkFailedError", "SetupStepError", "SweepError"]
