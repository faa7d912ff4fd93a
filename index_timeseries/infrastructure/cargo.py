"""
Cargo wrapper for producing the release benchmark binary.
"""

from __future__ import annotations

from pathlib import Path

from index_timeseries.infrastructure.process import CommandResult, CommandRunner, run_command
from index_timeseries.utils.logging import get_logger

log = get_logger(__name__)


class CargoBuilder:
    """
    Builds the Rust project in `project_dir` with optimizations enabled.
    """

    def __init__(
        self,
        project_dir: Path | str = ".",
        cargo: str = "cargo",
        run: CommandRunner = run_command,
    ) -> None:
        self.project_dir = Path(project_dir)
        self.cargo = cargo
        self._run = run

    def build_release(self) -> CommandResult:
        """Run `cargo build --release`; output streams to the terminal."""
        log.info("[BUILD] cargo build --release", extra={"project_dir": str(self.project_dir)})
        return self._run([self.cargo, "build", "--release"], cwd=self.project_dir)

    def binary_path(self, name: str) -> Path:
        return self.project_dir / "target" / "release" / name


__all__ = ["CargoBuilder"]
