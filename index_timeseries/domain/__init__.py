"""
Domain package for the index time-series sweep.

Exports the record types produced by the sweep driver and consumed by the
reporter. Keep this package focused on data definitions.
"""

from index_timeseries.domain.models import (
    CommitLookup,
    PlannedStep,
    SetupRecord,
    StepRecord,
    StepStatus,
    SweepReport,
)

__all__ = [
    "CommitLookup",
    "PlannedStep",
    "SetupRecord",
    "StepRecord",
    "StepStatus",
    "SweepReport",
]
