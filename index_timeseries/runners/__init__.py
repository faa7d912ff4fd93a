"""
Runners package for the index time-series sweep.

Re-exports the runner interfaces and the concrete benchmark runner so
downstream code can import from `index_timeseries.runners` directly.
"""

from index_timeseries.runners.abstract import AbstractBenchmarkRunner, BenchmarkRunner
from index_timeseries.runners.crate_benchmark import CrateBenchmarkRunner

__all__ = [
    "AbstractBenchmarkRunner",
    "BenchmarkRunner",
    "CrateBenchmarkRunner",
]
