from __future__ import annotations

import sys
from typing import Optional, Sequence

import typer

from index_timeseries.config import get_settings
from index_timeseries.exceptions import SweepError
from index_timeseries.orchestrator import SweepConfig, plan_sweep, run_sweep
from index_timeseries.reporter import print_plan, print_steps
from index_timeseries.utils.logging import configure_logging

app = typer.Typer(help="Benchmark the crates.io index at points spread across its history.")

FAILURE_POLICIES = ("strict", "tolerant")
EMPTY_COMMIT_POLICIES = ("passthrough", "skip")
BENCHMARK_MODES = ("all", "pub", "cargo", "pub-lock", "cargo-lock")


def _choice(value: Optional[str], allowed: Sequence[str], option: str) -> Optional[str]:
    if value is not None and value not in allowed:
        raise typer.BadParameter(f"must be one of: {', '.join(allowed)}", param_hint=option)
    return value


@app.command()
def info() -> None:
    """
    Show effective configuration values.
    """
    config = SweepConfig.from_settings(get_settings())
    typer.echo(
        f"index={config.index_path} snapshot={config.snapshot} remote={config.remote_url}"
    )
    typer.echo(
        f"offsets={config.start_days}..<{config.stop_days} step {config.step_days} "
        f"({len(config.offsets())} runs) | binary={config.binary_name} "
        f"threads={config.threads} with_solana={config.with_solana}"
    )
    typer.echo(
        f"policies: setup={config.setup_failure_policy} "
        f"benchmark={config.benchmark_failure_policy} empty_commit={config.empty_commit_policy}"
    )


@app.command()
def run(
    index_path: Optional[str] = typer.Option(
        None, "--index-path", help="Index working copy (default from settings: ./index)."
    ),
    project_dir: Optional[str] = typer.Option(
        None, "--project-dir", help="Cargo project that builds the benchmark binary."
    ),
    start: Optional[int] = typer.Option(None, "--start", help="First day offset."),
    stop: Optional[int] = typer.Option(None, "--stop", help="Exclusive upper day offset."),
    step: Optional[int] = typer.Option(None, "--step", help="Days between samples."),
    threads: Optional[int] = typer.Option(
        None, "--threads", "-t", help="Threads passed to the benchmark binary."
    ),
    with_solana: Optional[bool] = typer.Option(
        None,
        "--with-solana/--without-solana",
        help="Keep Solana ecosystem crates in the benchmark.",
    ),
    mode: Optional[str] = typer.Option(
        None, "--mode", "-m", help=f"Benchmark mode ({', '.join(BENCHMARK_MODES)})."
    ),
    crate_filter: Optional[str] = typer.Option(
        None, "--filter", help="Only benchmark crates whose name contains this string."
    ),
    skip_build: bool = typer.Option(False, "--skip-build", help="Reuse the existing binary."),
    skip_fetch: bool = typer.Option(False, "--skip-fetch", help="Do not fetch the snapshot."),
    setup_failure_policy: Optional[str] = typer.Option(
        None,
        "--setup-failure-policy",
        help="strict: abort when build/fetch fails; tolerant: warn and continue.",
    ),
    benchmark_failure_policy: Optional[str] = typer.Option(
        None,
        "--benchmark-failure-policy",
        help="strict: abort on the first failed benchmark; tolerant: warn and continue.",
    ),
    empty_commit_policy: Optional[str] = typer.Option(
        None,
        "--empty-commit-policy",
        help="passthrough: run with an empty --commit; skip: warn and skip the offset.",
    ),
    summary: bool = typer.Option(False, "--summary", help="Print a results table at the end."),
) -> None:
    """
    Build, fetch the snapshot, then run the benchmark once per day offset.
    """
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.log_json)

    config = SweepConfig.from_settings(
        settings,
        index_path=index_path,
        project_dir=project_dir,
        start_days=start,
        stop_days=stop,
        step_days=step,
        threads=threads,
        with_solana=with_solana,
        mode=_choice(mode, BENCHMARK_MODES, "--mode"),
        filter=crate_filter,
        skip_build=skip_build,
        skip_fetch=skip_fetch,
        setup_failure_policy=_choice(
            setup_failure_policy, FAILURE_POLICIES, "--setup-failure-policy"
        ),
        benchmark_failure_policy=_choice(
            benchmark_failure_policy, FAILURE_POLICIES, "--benchmark-failure-policy"
        ),
        empty_commit_policy=_choice(
            empty_commit_policy, EMPTY_COMMIT_POLICIES, "--empty-commit-policy"
        ),
    )
    if config.step_days <= 0:
        raise typer.BadParameter("must be positive", param_hint="--step")

    try:
        report = run_sweep(config, progress=typer.echo)
    except SweepError as exc:
        typer.echo(f"Sweep aborted: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    if summary:
        print_steps(report)
    raise typer.Exit(code=report.exit_code())


@app.command()
def plan(
    index_path: Optional[str] = typer.Option(None, "--index-path", help="Index working copy."),
    start: Optional[int] = typer.Option(None, "--start", help="First day offset."),
    stop: Optional[int] = typer.Option(None, "--stop", help="Exclusive upper day offset."),
    step: Optional[int] = typer.Option(None, "--step", help="Days between samples."),
) -> None:
    """
    Show which commit each day offset resolves to, without running anything.
    """
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.log_json)
    config = SweepConfig.from_settings(
        settings, index_path=index_path, start_days=start, stop_days=stop, step_days=step
    )
    if config.step_days <= 0:
        raise typer.BadParameter("must be positive", param_hint="--step")
    print_plan(plan_sweep(config))


def main() -> None:
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()
