"""
Runner for the `benchmark_from_crates` resolver benchmark.

The binary reads the index working copy itself; we only tell it which commit
to check out and how to run. Its stdout (progress bar, timing table) and the
CSV it writes are left alone.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

from index_timeseries.infrastructure.process import CommandResult, CommandRunner, run_command
from index_timeseries.runners.abstract import AbstractBenchmarkRunner


class CrateBenchmarkRunner(AbstractBenchmarkRunner):
    """
    Invoke the release benchmark binary once per commit.

    With the defaults the command line is
    `<binary> --commit <hash> --with-solana -t 10`.
    """

    name: str = "benchmark_from_crates"
    description: str = "Resolve every crate version in the index at a given commit."

    def __init__(
        self,
        binary: Path | str,
        with_solana: bool = True,
        threads: int = 10,
        mode: Optional[str] = None,
        filter: Optional[str] = None,
        cwd: Optional[Path | str] = None,
        run: CommandRunner = run_command,
    ) -> None:
        self.binary = Path(binary)
        self.with_solana = with_solana
        self.threads = threads
        self.mode = mode
        self.filter = filter
        self.cwd = cwd
        self._run = run

    def build_args(self, commit: str) -> List[str]:
        """Arguments after the executable; an empty commit is kept as-is."""
        args = ["--commit", commit]
        if self.with_solana:
            args.append("--with-solana")
        args += ["-t", str(self.threads)]
        if self.mode:
            args += ["--mode", self.mode]
        if self.filter:
            args += ["--filter", self.filter]
        return args

    def execute(self, commit: str) -> CommandResult:
        return self._run([str(self.binary), *self.build_args(commit)], cwd=self.cwd)


__all__ = ["CrateBenchmarkRunner"]
