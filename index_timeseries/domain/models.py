"""
Domain models for the index time-series sweep.

Records describe what happened at each stage of a sweep: the setup steps
(build, fetch), the commit resolved for each day offset, and the outcome of
the benchmark invocation for that commit.
"""
from __future__ import annotations

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

StepStatus = Literal["ok", "failed", "skipped"]


class CommitLookup(BaseModel):
    """
    Result of asking the index for the newest commit before an instant.

    `commit` is empty when no commit qualifies or the query itself failed;
    `error` tells the two apart.
    """

    before: datetime = Field(..., description="Upper bound passed to `git log --before`.")
    commit: str = Field("", description="Full commit hash, or empty.")
    error: Optional[str] = Field(None, description="Why the query failed, if it did.")

    model_config = {"frozen": True}

    @property
    def found(self) -> bool:
        return bool(self.commit)


class SetupRecord(BaseModel):
    """Outcome of a one-off step that runs before the loop."""

    step: Literal["build", "fetch"]
    status: StepStatus
    returncode: Optional[int] = None
    duration_seconds: float = 0.0
    error: Optional[str] = None

    model_config = {"frozen": True}


class StepRecord(BaseModel):
    """Outcome of one loop iteration: one day offset, one benchmark run."""

    offset: int = Field(..., description="Days before now used for the lookup.")
    before: datetime
    commit: str = ""
    status: StepStatus
    returncode: Optional[int] = None
    duration_seconds: float = 0.0
    peak_rss_bytes: Optional[int] = None
    child_cpu_seconds: Optional[float] = None
    error: Optional[str] = None

    model_config = {"frozen": True}


class PlannedStep(BaseModel):
    """A dry-run row: which commit a given offset would benchmark."""

    offset: int
    before: datetime
    commit: str = ""
    commit_time: Optional[datetime] = None

    model_config = {"frozen": True}


class SweepReport(BaseModel):
    """Everything a sweep did, in order."""

    started_at: datetime
    finished_at: Optional[datetime] = None
    setup: List[SetupRecord] = Field(default_factory=list)
    steps: List[StepRecord] = Field(default_factory=list)

    def _count(self, status: StepStatus) -> int:
        return sum(1 for step in self.steps if step.status == status)

    @property
    def succeeded(self) -> int:
        return self._count("ok")

    @property
    def failed(self) -> int:
        return self._count("failed")

    @property
    def skipped(self) -> int:
        return self._count("skipped")

    def exit_code(self) -> int:
        # Failures that did not raise were tolerated by policy; the sweep
        # itself still counts as a success.
        return 0


__all__ = [
    "CommitLookup",
    "PlannedStep",
    "SetupRecord",
    "StepRecord",
    "StepStatus",
    "SweepReport",
]
