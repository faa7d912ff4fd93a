from __future__ import annotations

from datetime import datetime, timedelta, timezone
from pathlib import Path

from index_timeseries.infrastructure.cargo import CargoBuilder
from index_timeseries.infrastructure.git import GitIndex, format_git_date

HASH = "0123456789abcdef0123456789abcdef01234567"


def test_format_git_date_normalizes_to_utc():
    moment = datetime(2024, 11, 26, 13, 30, 5, tzinfo=timezone(timedelta(hours=2)))

    assert format_git_date(moment) == "2024-11-26 11:30:05 +0000"
    assert format_git_date(datetime(2024, 1, 2, 3, 4, 5)) == "2024-01-02 03:04:05 +0000"


def test_resolve_commit_queries_all_refs_with_single_result(recording_runner, fixed_now):
    recording_runner.respond(lambda argv: "log" in argv, stdout=f"{HASH}\n")
    index = GitIndex(Path("/data/index"), run=recording_runner)
    before = fixed_now - timedelta(days=9)

    lookup = index.resolve_commit(before)

    assert lookup.commit == HASH
    assert lookup.found
    assert lookup.before == before
    assert recording_runner.argvs == [
        (
            "git",
            "-C",
            "/data/index",
            "log",
            "--before=2024-11-22 12:00:00 +0000",
            "-n",
            "1",
            "--all",
            "--pretty=format:%H",
        )
    ]
    assert recording_runner.calls[0]["capture_output"] is True


def test_resolve_commit_with_no_history_is_empty(recording_runner, fixed_now):
    index = GitIndex("index", run=recording_runner)

    lookup = index.resolve_commit(fixed_now)

    assert lookup.commit == ""
    assert not lookup.found
    assert lookup.error is None


def test_resolve_commit_failure_is_empty_with_error(recording_runner, fixed_now):
    recording_runner.respond(
        lambda argv: "log" in argv, returncode=128, stderr="fatal: not a git repository"
    )
    index = GitIndex("missing", run=recording_runner)

    lookup = index.resolve_commit(fixed_now)

    assert lookup.commit == ""
    assert lookup.error == "exit code 128: fatal: not a git repository"


def test_fetch_snapshot_uses_matching_refspec(recording_runner):
    index = GitIndex("index", run=recording_runner)

    result = index.fetch_snapshot(
        "https://github.com/rust-lang/crates.io-index-archive.git", "snapshot-2024-11-27"
    )

    assert result.ok
    assert recording_runner.argvs == [
        (
            "git",
            "-C",
            "index",
            "fetch",
            "https://github.com/rust-lang/crates.io-index-archive.git",
            "snapshot-2024-11-27:snapshot-2024-11-27",
        )
    ]
    assert recording_runner.calls[0]["capture_output"] is False


def test_commit_time_parses_iso_output(recording_runner):
    recording_runner.respond(lambda argv: "show" in argv, stdout="2024-11-27T08:15:00+00:00\n")
    index = GitIndex("index", run=recording_runner)

    assert index.commit_time(HASH) == datetime(2024, 11, 27, 8, 15, tzinfo=timezone.utc)
    assert index.commit_time("") is None
    assert len(recording_runner.calls) == 1


def test_is_repository_reflects_rev_parse(recording_runner):
    recording_runner.respond(lambda argv: "rev-parse" in argv, returncode=128)

    assert GitIndex("index", run=recording_runner).is_repository() is False


def test_cargo_builds_release_in_project_dir(recording_runner):
    builder = CargoBuilder("/work", run=recording_runner)

    builder.build_release()

    assert recording_runner.argvs == [("cargo", "build", "--release")]
    assert recording_runner.calls[0]["cwd"] == Path("/work")
    assert builder.binary_path("benchmark_from_crates") == Path(
        "/work/target/release/benchmark_from_crates"
    )
