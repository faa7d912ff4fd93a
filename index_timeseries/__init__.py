"""
Index time-series sweep - benchmark a Rust resolver against the crates.io index
as it looked at evenly spaced points in the past.

A sweep builds the benchmark binary once, fetches a snapshot of the
crates.io index archive into a local working copy, then walks backward through
that copy's history in fixed day increments. For each sampled day it resolves
the newest commit older than that day and runs the benchmark against it.

Failure handling is a named policy rather than an accident of unchecked
commands: build/fetch failures abort by default, benchmark failures are logged
and the sweep moves on.
"""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

# Public API exports
from index_timeseries.config import Settings, get_settings
from index_timeseries.domain.models import CommitLookup, StepRecord, SweepReport
from index_timeseries.exceptions import BenchmarkFailedError, SetupStepError, SweepError
from index_timeseries.orchestrator import SweepConfig, plan_sweep, run_sweep
from index_timeseries.runners.abstract import AbstractBenchmarkRunner, BenchmarkRunner
from index_timeseries.schedule import day_offsets
from index_timeseries.utils.logging import configure_logging, get_logger

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Configuration
    "Settings",
    "get_settings",
    # Sweep
    "SweepConfig",
    "day_offsets",
    "plan_sweep",
    "run_sweep",
    # Records
    "CommitLookup",
    "StepRecord",
    "SweepReport",
    # Errors
    "BenchmarkFailedError",
    "SetupStepError",
    "SweepError",
    # Runner abstractions
    "AbstractBenchmarkRunner",
    "BenchmarkRunner",
    # Logging
    "configure_logging",
    "get_logger",
]
