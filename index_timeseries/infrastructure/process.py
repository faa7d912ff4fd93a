"""
Synchronous external command execution.

Every collaborator of the sweep (cargo, git, the benchmark binary) is an
opaque executable. `run_command` runs one to completion and turns the outcome
into a `CommandResult` value instead of raising, so callers decide through an
explicit policy whether a failure stops the sweep.
"""

from __future__ import annotations

import os
import subprocess
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Mapping, Optional, Sequence

from index_timeseries.utils.logging import get_logger

log = get_logger(__name__)


@dataclass(frozen=True)
class CommandResult:
    """
    Outcome of one external command.

    `returncode` is None when the process could not be started at all
    (missing executable, bad working directory); `error` then holds the reason.
    `stdout`/`stderr` are only populated when output was captured.
    """

    args: tuple[str, ...]
    returncode: Optional[int]
    duration_seconds: float = 0.0
    stdout: str = ""
    stderr: str = ""
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    def describe(self) -> str:
        """Short human-readable status for log lines and exception messages."""
        if self.error is not None:
            return self.error
        detail = f"exit code {self.returncode}"
        stderr = self.stderr.strip()
        if stderr:
            detail += f": {stderr.splitlines()[-1]}"
        return detail


CommandRunner = Callable[..., CommandResult]


def run_command(
    args: Sequence[str],
    cwd: Optional[Path | str] = None,
    capture_output: bool = False,
    env: Optional[Mapping[str, str]] = None,
) -> CommandResult:
    """
    Run `args` and wait for it to exit.

    Parameters
    ----------
    args : sequence of str
        Executable and arguments; no shell is involved.
    cwd : Path | str | None
        Working directory for the child. None keeps the current one.
    capture_output : bool
        Capture stdout/stderr as text. When False the child inherits this
        process's streams, so its output shows up live on the terminal.
    env : mapping | None
        Extra environment variables layered over the current environment.
    """
    argv = tuple(str(a) for a in args)
    child_env = {**os.environ, **env} if env else None
    log.debug("[EXEC] %s", " ".join(argv), extra={"argv": list(argv), "cwd": str(cwd or ".")})

    start = time.perf_counter()
    try:
        proc = subprocess.run(
            argv,
            cwd=str(cwd) if cwd is not None else None,
            env=child_env,
            text=True,
            capture_output=capture_output,
            check=False,
        )
    except OSError as exc:
        duration = time.perf_counter() - start
        log.warning(
            "[EXEC FAILED] could not start %s: %s",
            argv[0],
            exc,
            extra={"argv": list(argv), "error": str(exc)},
        )
        return CommandResult(args=argv, returncode=None, duration_seconds=duration, error=str(exc))

    duration = time.perf_counter() - start
    result = CommandResult(
        args=argv,
        returncode=proc.returncode,
        duration_seconds=duration,
        stdout=proc.stdout or "",
        stderr=proc.stderr or "",
    )
    log.debug(
        "[EXEC DONE] %s -> %s",
        argv[0],
        proc.returncode,
        extra={"returncode": proc.returncode, "duration": round(duration, 3)},
    )
    return result


__all__ = ["CommandResult", "CommandRunner", "run_command"]
