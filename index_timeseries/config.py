"""
Configuration settings for the index time-series sweep.

Uses Pydantic Settings to load environment variables (and an optional `.env`)
for the index working copy, the benchmark binary, the day-offset schedule and
the failure policies. Defaults reproduce the historical shell sweep exactly.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

FailurePolicy = Literal["strict", "tolerant"]
EmptyCommitPolicy = Literal["passthrough", "skip"]
BenchmarkMode = Literal["all", "pub", "cargo", "pub-lock", "cargo-lock"]

DEFAULT_REMOTE_URL = "https://github.com/rust-lang/crates.io-index-archive.git"
DEFAULT_SNAPSHOT = "snapshot-2024-11-27"


class Settings(BaseSettings):
    # Index working copy
    index_path: str = Field("index", alias="INDEX_PATH")
    index_remote_url: str = Field(DEFAULT_REMOTE_URL, alias="INDEX_REMOTE_URL")
    index_snapshot: str = Field(DEFAULT_SNAPSHOT, alias="INDEX_SNAPSHOT")

    # Build + benchmark binary
    project_dir: str = Field(".", alias="PROJECT_DIR")
    cargo_bin: str = Field("cargo", alias="CARGO_BIN")
    git_bin: str = Field("git", alias="GIT_BIN")
    benchmark_binary: str = Field("benchmark_from_crates", alias="BENCHMARK_BINARY")
    benchmark_threads: int = Field(10, ge=0, alias="BENCHMARK_THREADS")
    benchmark_with_solana: bool = Field(True, alias="BENCHMARK_WITH_SOLANA")
    benchmark_mode: Optional[BenchmarkMode] = Field(None, alias="BENCHMARK_MODE")
    benchmark_filter: Optional[str] = Field(None, alias="BENCHMARK_FILTER")

    # Schedule (days before now)
    sweep_start_days: int = Field(1, ge=0, alias="SWEEP_START_DAYS")
    sweep_stop_days: int = Field(70, ge=0, alias="SWEEP_STOP_DAYS")
    sweep_step_days: int = Field(4, gt=0, alias="SWEEP_STEP_DAYS")

    # Failure handling
    setup_failure_policy: FailurePolicy = Field("strict", alias="SETUP_FAILURE_POLICY")
    benchmark_failure_policy: FailurePolicy = Field("tolerant", alias="BENCHMARK_FAILURE_POLICY")
    empty_commit_policy: EmptyCommitPolicy = Field("passthrough", alias="EMPTY_COMMIT_POLICY")

    # Application
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_json: bool = Field(False, alias="LOG_JSON")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Retrieve a cached instance of Settings to avoid repeated env parsing.
    """
    return Settings()


__all__ = [
    "BenchmarkMode",
    "DEFAULT_REMOTE_URL",
    "DEFAULT_SNAPSHOT",
    "EmptyCommitPolicy",
    "FailurePolicy",
    "Settings",
    "get_settings",
]
