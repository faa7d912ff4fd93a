"""
Sweep driver: build once, fetch once, then benchmark the index at a series of
points in its history.

Usage (example from CLI):
    from index_timeseries.orchestrator import SweepConfig, run_sweep

    report = run_sweep(SweepConfig.from_settings(get_settings()), progress=print)
    print(report.succeeded, report.failed)

Failure handling is explicit configuration rather than a side effect of
unchecked calls:
- `setup_failure_policy` ("strict" | "tolerant") governs build and fetch.
- `benchmark_failure_policy` ("strict" | "tolerant") governs each benchmark run.
- `empty_commit_policy` ("passthrough" | "skip") governs offsets for which
  the index has no older commit.
"""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, List, Optional, Tuple

from index_timeseries.config import (
    DEFAULT_REMOTE_URL,
    DEFAULT_SNAPSHOT,
    BenchmarkMode,
    EmptyCommitPolicy,
    FailurePolicy,
    Settings,
    get_settings,
)
from index_timeseries.domain.models import (
    CommitLookup,
    PlannedStep,
    SetupRecord,
    StepRecord,
    SweepReport,
)
from index_timeseries.exceptions import BenchmarkFailedError, SetupStepError
from index_timeseries.infrastructure.cargo import CargoBuilder
from index_timeseries.infrastructure.git import GitIndex
from index_timeseries.infrastructure.process import CommandResult
from index_timeseries.runners.abstract import BenchmarkRunner
from index_timeseries.runners.crate_benchmark import CrateBenchmarkRunner
from index_timeseries.schedule import day_offsets, target_time
from index_timeseries.utils.logging import get_logger
from index_timeseries.utils.profiler import profile_block

log = get_logger(__name__)

ProgressCallback = Callable[[str], None]


@dataclass(frozen=True)
class SweepConfig:
    """Effective parameters of one sweep."""

    index_path: Path = Path("index")
    remote_url: str = DEFAULT_REMOTE_URL
    snapshot: str = DEFAULT_SNAPSHOT
    project_dir: Path = Path(".")
    cargo_bin: str = "cargo"
    git_bin: str = "git"
    binary_name: str = "benchmark_from_crates"
    threads: int = 10
    with_solana: bool = True
    mode: Optional[BenchmarkMode] = None
    filter: Optional[str] = None
    start_days: int = 1
    stop_days: int = 70
    step_days: int = 4
    skip_build: bool = False
    skip_fetch: bool = False
    setup_failure_policy: FailurePolicy = "strict"
    benchmark_failure_policy: FailurePolicy = "tolerant"
    empty_commit_policy: EmptyCommitPolicy = "passthrough"

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None, **overrides: Any) -> "SweepConfig":
        """
        Build a config from settings, then apply non-None keyword overrides
        (typically CLI options).
        """
        settings = settings or get_settings()
        config = cls(
            index_path=Path(settings.index_path),
            remote_url=settings.index_remote_url,
            snapshot=settings.index_snapshot,
            project_dir=Path(settings.project_dir),
            cargo_bin=settings.cargo_bin,
            git_bin=settings.git_bin,
            binary_name=settings.benchmark_binary,
            threads=settings.benchmark_threads,
            with_solana=settings.benchmark_with_solana,
            mode=settings.benchmark_mode,
            filter=settings.benchmark_filter,
            start_days=settings.sweep_start_days,
            stop_days=settings.sweep_stop_days,
            step_days=settings.sweep_step_days,
            setup_failure_policy=settings.setup_failure_policy,
            benchmark_failure_policy=settings.benchmark_failure_policy,
            empty_commit_policy=settings.empty_commit_policy,
        )
        known = {f.name for f in fields(cls)}
        unknown = set(overrides) - known
        if unknown:
            raise ValueError(f"Unknown sweep option(s): {', '.join(sorted(unknown))}")
        applied = {k: v for k, v in overrides.items() if v is not None}
        for key in ("index_path", "project_dir"):
            if key in applied:
                applied[key] = Path(applied[key])
        return replace(config, **applied)

    def offsets(self) -> List[int]:
        return list(day_offsets(self.start_days, self.stop_days, self.step_days))


def _build_components(
    config: SweepConfig,
) -> Tuple[CargoBuilder, GitIndex, BenchmarkRunner]:
    """Default collaborators for a config."""
    builder = CargoBuilder(config.project_dir, cargo=config.cargo_bin)
    index = GitIndex(config.index_path, git=config.git_bin)
    # Absolute, since the runner's cwd would otherwise re-anchor a relative path.
    runner = CrateBenchmarkRunner(
        builder.binary_path(config.binary_name).resolve(),
        with_solana=config.with_solana,
        threads=config.threads,
        mode=config.mode,
        filter=config.filter,
        cwd=config.project_dir,
    )
    return builder, index, runner


def _setup_record(step: str, result: CommandResult) -> SetupRecord:
    return SetupRecord(
        step=step,
        status="ok" if result.ok else "failed",
        returncode=result.returncode,
        duration_seconds=round(result.duration_seconds, 2),
        error=None if result.ok else result.describe(),
    )


def _run_setup_step(
    step: str,
    action: Callable[[], CommandResult],
    policy: FailurePolicy,
    report: SweepReport,
) -> None:
    result = action()
    report.setup.append(_setup_record(step, result))
    if result.ok:
        log.info(f"[{step.upper()} OK]", extra={"step": step, "duration": result.duration_seconds})
        return
    if policy == "strict":
        log.error(
            f"[{step.upper()} FAILED] {result.describe()}",
            extra={"step": step, "returncode": result.returncode},
        )
        raise SetupStepError(step, result)
    log.warning(
        f"[{step.upper()} FAILED] {result.describe()}; continuing (tolerant setup policy)",
        extra={"step": step, "returncode": result.returncode, "failure_policy": policy},
    )


def _profiled_execute(
    runner: BenchmarkRunner,
    offset: int,
    lookup: CommitLookup,
    policy: FailurePolicy,
) -> StepRecord:
    with profile_block(f"offset-{offset}") as stats:
        try:
            result = runner.execute(lookup.commit)
        except Exception as exc:  # noqa: BLE001 - runner errors become a failed step when tolerant
            if policy == "strict":
                raise
            log.exception(
                f"[BENCHMARK ERROR] {runner.name} raised for offset {offset}",
                extra={"offset": offset, "commit": lookup.commit},
            )
            result = CommandResult(args=(runner.name,), returncode=None, error=str(exc))

    record = StepRecord(
        offset=offset,
        before=lookup.before,
        commit=lookup.commit,
        status="ok" if result.ok else "failed",
        returncode=result.returncode,
        duration_seconds=round(stats.duration_seconds, 2),
        peak_rss_bytes=stats.peak_rss_bytes,
        child_cpu_seconds=(
            round(stats.child_cpu_seconds, 2) if stats.child_cpu_seconds is not None else None
        ),
        error=None if result.ok else result.describe(),
    )
    if not result.ok and policy == "strict":
        raise BenchmarkFailedError(offset, lookup.commit, result)
    return record


def run_sweep(
    config: Optional[SweepConfig] = None,
    *,
    builder: Optional[CargoBuilder] = None,
    index: Optional[GitIndex] = None,
    runner: Optional[BenchmarkRunner] = None,
    now: Optional[datetime] = None,
    progress: Optional[ProgressCallback] = None,
) -> SweepReport:
    """
    Run the full sweep and return what happened.

    Parameters
    ----------
    config : SweepConfig | None
        Sweep parameters. Defaults to `SweepConfig.from_settings()`.
    builder, index, runner : optional
        Collaborators; missing ones are built from `config`.
    now : datetime | None
        Reference instant for day offsets, fixed for the whole sweep so the
        sampled points stay evenly spaced. Defaults to the current UTC time.
    progress : callable | None
        Receives one human-readable line per offset
        ("Processing for 9 days ago... <commit>").

    Raises
    ------
    SetupStepError
        Build or fetch failed and `setup_failure_policy` is "strict".
    BenchmarkFailedError
        A benchmark failed and `benchmark_failure_policy` is "strict".
    """
    config = config or SweepConfig.from_settings()
    default_builder, default_index, default_runner = _build_components(config)
    builder = builder or default_builder
    index = index or default_index
    runner = runner or default_runner
    now = now or datetime.now(timezone.utc)

    report = SweepReport(started_at=datetime.now(timezone.utc))

    if config.skip_build:
        report.setup.append(SetupRecord(step="build", status="skipped"))
    else:
        _run_setup_step("build", builder.build_release, config.setup_failure_policy, report)

    if config.skip_fetch:
        report.setup.append(SetupRecord(step="fetch", status="skipped"))
    else:
        _run_setup_step(
            "fetch",
            lambda: index.fetch_snapshot(config.remote_url, config.snapshot),
            config.setup_failure_policy,
            report,
        )

    offsets = config.offsets()
    total = len(offsets)
    for position, offset in enumerate(offsets, start=1):
        lookup = index.resolve_commit(target_time(offset, now))
        line = f"Processing for {offset} days ago... {lookup.commit}"
        if progress is not None:
            progress(line)
        log.info(
            f"[STEP {position}/{total}] {line}",
            extra={"offset": offset, "commit": lookup.commit, "position": position},
        )

        if not lookup.found:
            if config.empty_commit_policy == "skip":
                log.warning(
                    f"[STEP {position}/{total}] No commit before {offset} days ago; skipping",
                    extra={"offset": offset, "lookup_error": lookup.error},
                )
                report.steps.append(
                    StepRecord(
                        offset=offset,
                        before=lookup.before,
                        status="skipped",
                        error=lookup.error or "no commit before requested time",
                    )
                )
                continue
            log.warning(
                f"[STEP {position}/{total}] No commit before {offset} days ago; "
                "passing an empty commit to the benchmark",
                extra={"offset": offset, "lookup_error": lookup.error},
            )

        record = _profiled_execute(runner, offset, lookup, config.benchmark_failure_policy)
        report.steps.append(record)
        if record.status == "failed":
            log.warning(
                f"[STEP {position}/{total}] Benchmark failed ({record.error}); continuing",
                extra={"offset": offset, "commit": lookup.commit, "returncode": record.returncode},
            )
        else:
            log.info(
                f"[STEP {position}/{total}] Completed",
                extra={
                    "offset": offset,
                    "commit": lookup.commit,
                    "duration": record.duration_seconds,
                    "peak_rss_bytes": record.peak_rss_bytes,
                },
            )

    report.finished_at = datetime.now(timezone.utc)
    log.info(
        f"[SWEEP COMPLETE] {total} offsets: {report.succeeded} ok, "
        f"{report.failed} failed, {report.skipped} skipped",
        extra={"succeeded": report.succeeded, "failed": report.failed, "skipped": report.skipped},
    )
    return report


def plan_sweep(
    config: Optional[SweepConfig] = None,
    *,
    index: Optional[GitIndex] = None,
    now: Optional[datetime] = None,
) -> List[PlannedStep]:
    """
    Resolve the commit for every offset without building, fetching or
    benchmarking anything.
    """
    config = config or SweepConfig.from_settings()
    index = index or GitIndex(config.index_path, git=config.git_bin)
    now = now or datetime.now(timezone.utc)

    planned: List[PlannedStep] = []
    for offset in config.offsets():
        lookup = index.resolve_commit(target_time(offset, now))
        planned.append(
            PlannedStep(
                offset=offset,
                before=lookup.before,
                commit=lookup.commit,
                commit_time=index.commit_time(lookup.commit),
            )
        )
    return planned


__all__ = [
    "SweepConfig",
    "plan_sweep",
    "run_sweep",
]
