"""
Pytest configuration for the index time-series sweep.

Provides fixtures for:
- A recording fake command runner (no real processes)
- Settings isolation from the developer's environment / .env
- Throwaway git repositories with controlled commit dates
"""

from __future__ import annotations

import os
import shutil
import subprocess
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence

import pytest

from index_timeseries.config import get_settings
from index_timeseries.infrastructure.process import CommandResult

FIXED_NOW = datetime(2024, 12, 1, 12, 0, 0, tzinfo=timezone.utc)


class RecordingRunner:
    """
    Stand-in for `run_command` that records every call.

    `responses` maps a predicate over the argv tuple to the result to return;
    the first matching entry wins, otherwise the call succeeds with empty output.
    """

    def __init__(self) -> None:
        self.calls: List[Dict[str, object]] = []
        self.responses: List[tuple[Callable[[tuple[str, ...]], bool], CommandResult]] = []

    def respond(
        self,
        predicate: Callable[[tuple[str, ...]], bool],
        returncode: Optional[int] = 0,
        stdout: str = "",
        stderr: str = "",
        error: Optional[str] = None,
    ) -> None:
        self.responses.append(
            (
                predicate,
                CommandResult(
                    args=(), returncode=returncode, stdout=stdout, stderr=stderr, error=error
                ),
            )
        )

    def __call__(
        self,
        args: Sequence[str],
        cwd: Optional[Path | str] = None,
        capture_output: bool = False,
        env: Optional[Dict[str, str]] = None,
    ) -> CommandResult:
        argv = tuple(str(a) for a in args)
        self.calls.append({"args": argv, "cwd": cwd, "capture_output": capture_output})
        for predicate, result in self.responses:
            if predicate(argv):
                return CommandResult(
                    args=argv,
                    returncode=result.returncode,
                    stdout=result.stdout,
                    stderr=result.stderr,
                    error=result.error,
                )
        return CommandResult(args=argv, returncode=0)

    @property
    def argvs(self) -> List[tuple[str, ...]]:
        return [call["args"] for call in self.calls]  # type: ignore[misc]


@pytest.fixture
def recording_runner() -> RecordingRunner:
    return RecordingRunner()


@pytest.fixture
def fixed_now() -> datetime:
    return FIXED_NOW


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch: pytest.MonkeyPatch, tmp_path_factory) -> None:
    """
    Keep tests independent of any .env or exported sweep variables.
    """
    for name in list(os.environ):
        if name.startswith(("INDEX_", "BENCHMARK_", "SWEEP_", "LOG_")) or name.endswith(
            "_FAILURE_POLICY"
        ):
            monkeypatch.delenv(name, raising=False)
    monkeypatch.delenv("EMPTY_COMMIT_POLICY", raising=False)
    monkeypatch.chdir(tmp_path_factory.mktemp("cwd"))
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture(scope="session")
def git_available() -> bool:
    return shutil.which("git") is not None


def _git_env(when: datetime) -> Dict[str, str]:
    stamp = when.strftime("%Y-%m-%dT%H:%M:%S+0000")
    return {
        **os.environ,
        "GIT_AUTHOR_NAME": "Index Bot",
        "GIT_AUTHOR_EMAIL": "bot@example.com",
        "GIT_COMMITTER_NAME": "Index Bot",
        "GIT_COMMITTER_EMAIL": "bot@example.com",
        "GIT_AUTHOR_DATE": stamp,
        "GIT_COMMITTER_DATE": stamp,
        "GIT_CONFIG_NOSYSTEM": "1",
        "GIT_CONFIG_GLOBAL": os.devnull,
    }


def make_dated_repo(path: Path, days_ago: Sequence[int], now: datetime = FIXED_NOW) -> List[str]:
    """
    Create a git repository at `path` with one commit per entry of `days_ago`
    (oldest first when given in descending order). Returns hashes in creation order.
    """
    path.mkdir(parents=True, exist_ok=True)
    subprocess.run(["git", "init", "-q", str(path)], check=True, env=_git_env(now))
    hashes: List[str] = []
    for days in days_ago:
        when = now - timedelta(days=days)
        (path / "config.json").write_text(f'{{"days_ago": {days}}}\n', encoding="utf-8")
        env = _git_env(when)
        subprocess.run(["git", "-C", str(path), "add", "config.json"], check=True, env=env)
        subprocess.run(
            ["git", "-C", str(path), "commit", "-q", "-m", f"{days} days ago"],
            check=True,
            env=env,
        )
        head = subprocess.run(
            ["git", "-C", str(path), "rev-parse", "HEAD"],
            check=True,
            capture_output=True,
            text=True,
        )
        hashes.append(head.stdout.strip())
    return hashes


@pytest.fixture
def dated_repo_factory(git_available: bool) -> Callable[..., List[str]]:
    if not git_available:
        pytest.skip("git executable not available")
    return make_dated_repo
