"""
Benchmark runner interfaces.

A runner invokes one benchmark for one index commit and reports the raw
process outcome. The sweep driver owns profiling and failure policy; runners
should stay thin wrappers around their executable.
"""

from __future__ import annotations

import abc
from typing import Protocol, runtime_checkable

from index_timeseries.infrastructure.process import CommandResult


@runtime_checkable
class BenchmarkRunner(Protocol):
    """
    Common interface all benchmark runners must implement.

    Attributes
    ----------
    name : str
        A short machine-friendly identifier.
    description : str
        A human-friendly summary of what gets run.
    """

    name: str
    description: str

    def execute(self, commit: str) -> CommandResult:
        """
        Run the benchmark against the index at `commit`.

        Parameters
        ----------
        commit : str
            Index commit hash. May be empty when no commit matched; runners
            pass it through unchanged.

        Returns
        -------
        CommandResult
            Exit status of the benchmark process; output is not captured.
        """
        ...


class AbstractBenchmarkRunner(abc.ABC):
    """
    Optional ABC helper for class-based implementations.

    Subclasses should set `name` and `description` and implement `execute`.
    """

    name: str
    description: str

    @abc.abstractmethod
    def execute(self, commit: str) -> CommandResult:  # pragma: no cover - interface only
        """Run the benchmark and return the process outcome."""
        raise NotImplementedError


__all__ = ["AbstractBenchmarkRunner", "BenchmarkRunner"]
