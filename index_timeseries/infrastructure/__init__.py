"""
Infrastructure package for the index time-series sweep.

Wraps the external tools the sweep drives (cargo, git) behind small classes
that return `CommandResult` values. Keep this layer focused on process I/O,
decoupled from scheduling and failure policy.
"""

from index_timeseries.infrastructure.cargo import CargoBuilder
from index_timeseries.infrastructure.git import GitIndex, format_git_date
from index_timeseries.infrastructure.process import CommandResult, CommandRunner, run_command

__all__ = [
    "CargoBuilder",
    "CommandResult",
    "CommandRunner",
    "GitIndex",
    "format_git_date",
    "run_command",
]
