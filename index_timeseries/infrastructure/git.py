"""
Git wrapper for the local crates.io index working copy.

All commands run as `git -C <path> ...` so the working copy location is
explicit and independent of the process's current directory.
"""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from index_timeseries.domain.models import CommitLookup
from index_timeseries.infrastructure.process import CommandResult, CommandRunner, run_command
from index_timeseries.utils.logging import get_logger

log = get_logger(__name__)


def format_git_date(moment: datetime) -> str:
    """Render `moment` in a form `git log --before` parses unambiguously."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc).strftime("%Y-%m-%d %H:%M:%S +0000")


class GitIndex:
    """
    A version-controlled snapshot of the package index.

    Parameters
    ----------
    path : Path | str
        Location of the working copy. It must already be a git repository;
        nothing here clones it.
    git : str
        Git executable.
    run : CommandRunner
        Command runner, replaceable in tests.
    """

    def __init__(
        self,
        path: Path | str = "index",
        git: str = "git",
        run: CommandRunner = run_command,
    ) -> None:
        self.path = Path(path)
        self.git = git
        self._run = run

    def _git(self, *args: str, capture_output: bool = True) -> CommandResult:
        return self._run([self.git, "-C", str(self.path), *args], capture_output=capture_output)

    def is_repository(self) -> bool:
        return self._git("rev-parse", "--git-dir").ok

    def fetch_snapshot(self, remote_url: str, snapshot: str) -> CommandResult:
        """
        Fetch `snapshot` from `remote_url` into a local branch of the same name.

        Progress output goes straight to the terminal.
        """
        refspec = f"{snapshot}:{snapshot}"
        log.info(
            f"[FETCH] {refspec} from {remote_url}",
            extra={"index_path": str(self.path), "refspec": refspec},
        )
        return self._git("fetch", remote_url, refspec, capture_output=False)

    def resolve_commit(self, before: datetime) -> CommitLookup:
        """
        Find the newest commit on any ref that is strictly older than `before`.
        """
        result = self._git(
            "log",
            f"--before={format_git_date(before)}",
            "-n",
            "1",
            "--all",
            "--pretty=format:%H",
        )
        if not result.ok:
            log.warning(
                f"[RESOLVE FAILED] {result.describe()}",
                extra={"index_path": str(self.path), "before": before.isoformat()},
            )
            return CommitLookup(before=before, commit="", error=result.describe())
        return CommitLookup(before=before, commit=result.stdout.strip())

    def commit_time(self, commit: str) -> Optional[datetime]:
        """Committer timestamp of `commit`, or None if it cannot be read."""
        if not commit:
            return None
        result = self._git("show", "-s", "--format=%cI", commit)
        if not result.ok:
            return None
        stamp = result.stdout.strip()
        try:
            return datetime.fromisoformat(stamp)
        except ValueError:
            log.debug("Unparseable commit time", extra={"commit": commit, "value": stamp})
            return None


__all__ = ["GitIndex", "format_git_date"]
