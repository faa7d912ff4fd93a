"""
Profiling utilities for benchmark invocations.

The work being measured runs in a child process (the benchmark binary), so
this module looks at the process tree below the current interpreter:
- Wall-clock time (perf_counter)
- Peak RSS of all live descendants via a background sampling thread (psutil)
- CPU seconds consumed by reaped children (psutil cpu_times)

Usage example:
    from index_timeseries.utils.profiler import profile_block

    with profile_block("offset-9") as stats:
        runner.execute(commit)

    print(stats.duration_seconds, stats.peak_rss_bytes, stats.child_cpu_seconds)
"""

from __future__ import annotations

import contextlib
import threading
import time
from dataclasses import dataclass, field
from typing import Any, Generator, Optional

import psutil


@dataclass
class ProfileStats:
    """
    Container for profiling measurements.
    """

    label: str
    start_ts: float = field(default=0.0)
    end_ts: float = field(default=0.0)
    duration_seconds: float = field(default=0.0)
    peak_rss_bytes: Optional[int] = field(default=None)
    child_cpu_seconds: Optional[float] = field(default=None)
    extra: dict[str, Any] = field(default_factory=dict)


def _children_cpu_seconds(process: psutil.Process) -> float:
    times = process.cpu_times()
    return times.children_user + times.children_system


def _tree_rss(process: psutil.Process) -> int:
    total = 0
    for child in process.children(recursive=True):
        try:
            total += child.memory_info().rss
        except (psutil.NoSuchProcess, psutil.AccessDenied):
            # Child exited between listing and sampling.
            continue
    return total


@contextlib.contextmanager
def profile_block(label: str, sample_interval_ms: int = 100) -> Generator[ProfileStats, None, None]:
    """
    Context manager to profile the child processes spawned inside a block.

    Parameters
    ----------
    label : str
        Human-friendly label for the profiled block.
    sample_interval_ms : int
        Interval in milliseconds for RSS sampling. Short-lived children can be
        missed entirely when this is large.

    Notes
    -----
    Child CPU time is only accounted by the OS once a child has been waited
    on, which `subprocess.run` does before returning.
    """
    stats = ProfileStats(label=label)
    process = psutil.Process()
    peak_rss = 0
    stop_sampling = threading.Event()

    def _sample_memory() -> None:
        nonlocal peak_rss
        while not stop_sampling.is_set():
            try:
                peak_rss = max(peak_rss, _tree_rss(process))
            except psutil.Error:
                pass
            stop_sampling.wait(timeout=sample_interval_ms / 1000.0)

    cpu_before = _children_cpu_seconds(process)
    sampler = threading.Thread(target=_sample_memory, daemon=True)
    sampler.start()

    stats.start_ts = time.perf_counter()
    try:
        yield stats
    finally:
        stats.end_ts = time.perf_counter()
        stats.duration_seconds = stats.end_ts - stats.start_ts

        stop_sampling.set()
        sampler.join(timeout=1.0)

        stats.peak_rss_bytes = peak_rss if peak_rss > 0 else None
        stats.child_cpu_seconds = max(0.0, _children_cpu_seconds(process) - cpu_before)


__all__ = ["ProfileStats", "profile_block"]
