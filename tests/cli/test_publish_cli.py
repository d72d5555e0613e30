"""CLI tests for the publish and check commands."""

from __future__ import annotations

import json
from collections.abc import Iterator
from pathlib import Path

import pytest
import structlog
from typer.testing import CliRunner

from seqfile_publish.cli.publish import EXIT_FAILED, EXIT_PARTIAL, app

runner = CliRunner()


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    for name in (
        "SEQFILE_FILE_EXIST",
        "SEQFILE_TEMP_PREFIX",
        "SEQFILE_TEMP_FILE_NAME",
        "SEQFILE_EAGER_DELETE",
        "SEQFILE_MOVE_EXISTING",
        "SEQFILE_DONE_FILE_NAME",
        "SEQFILE_CHARSET",
        "SEQFILE_JOURNAL_DIR",
    ):
        monkeypatch.delenv(name, raising=False)
    yield
    # configure_logging binds the runner's stderr, which is closed afterwards
    structlog.reset_defaults()


@pytest.fixture
def source(tmp_path: Path) -> Path:
    path = tmp_path / "source.csv"
    path.write_text("id,value\n1,42\n")
    return path


def test_publish_writes_target(tmp_path: Path, source: Path) -> None:
    target = tmp_path / "out" / "data.csv"

    result = runner.invoke(
        app, ["publish", str(source), str(target), "--temp-prefix", ".tmp-"]
    )

    assert result.exit_code == 0
    assert "PUBLISHED" in result.output
    assert target.read_text() == "id,value\n1,42\n"
    assert not (tmp_path / "out" / ".tmp-data.csv").exists()


def test_publish_json_output(tmp_path: Path, source: Path) -> None:
    target = tmp_path / "data.csv"

    result = runner.invoke(
        app,
        [
            "publish",
            str(source),
            str(target),
            "--done-file-name",
            "${file:name}.done",
            "--json",
        ],
    )

    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["status"] == "completed"
    assert data["produced_path"] == str(target)
    assert data["done_file"] == str(tmp_path / "data.csv.done")
    assert data["headers"] == {"SeqFileNameProduced": str(target)}


def test_publish_ignore_skips(tmp_path: Path, source: Path) -> None:
    target = tmp_path / "data.csv"
    target.write_text("old")

    result = runner.invoke(
        app, ["publish", str(source), str(target), "--file-exist", "ignore"]
    )

    assert result.exit_code == 0
    assert "SKIPPED" in result.output
    assert target.read_text() == "old"


def test_publish_fail_policy_exit_code(tmp_path: Path, source: Path) -> None:
    target = tmp_path / "data.csv"
    target.write_text("old")

    result = runner.invoke(
        app, ["publish", str(source), str(target), "--file-exist", "Fail"]
    )

    assert result.exit_code == EXIT_FAILED
    assert "FAILED" in result.output
    assert target.read_text() == "old"


def test_publish_blocked_by_predecessor(tmp_path: Path, source: Path) -> None:
    (tmp_path / "previous.csv").write_text("pending")
    target = tmp_path / "data.csv"

    result = runner.invoke(
        app,
        ["publish", str(source), str(target), "--previous", "previous.csv"],
    )

    assert result.exit_code == EXIT_FAILED
    assert not target.exists()


def test_publish_partial_exit_code(tmp_path: Path, source: Path) -> None:
    """Test a done file that cannot be written yields the partial exit code."""
    target = tmp_path / "data.csv"
    # A directory in the done file's place makes the sentinel write fail
    (tmp_path / "data.csv.done").mkdir()

    result = runner.invoke(
        app,
        ["publish", str(source), str(target), "--done-file-name", "{file:name}.done"],
    )

    assert result.exit_code == EXIT_PARTIAL
    assert target.read_text() == "id,value\n1,42\n"


def test_publish_move_existing(tmp_path: Path, source: Path) -> None:
    target = tmp_path / "data.csv"
    target.write_text("old")

    result = runner.invoke(
        app,
        [
            "publish",
            str(source),
            str(target),
            "--file-exist",
            "Move",
            "--move-existing",
            "${file:parent}/archive/${file:onlyname}",
            "--no-eager-delete",
            "--temp-prefix",
            ".tmp-",
        ],
    )

    assert result.exit_code == 0
    assert (tmp_path / "archive" / "data.csv").read_text() == "old"


def test_publish_invalid_configuration(tmp_path: Path, source: Path) -> None:
    result = runner.invoke(
        app,
        [
            "publish",
            str(source),
            str(tmp_path / "data.csv"),
            "--file-exist",
            "Append",
            "--temp-prefix",
            ".tmp-",
        ],
    )

    assert result.exit_code == EXIT_FAILED
    assert not (tmp_path / "data.csv").exists()


def test_publish_unknown_policy(tmp_path: Path, source: Path) -> None:
    result = runner.invoke(
        app,
        ["publish", str(source), str(tmp_path / "data.csv"), "--file-exist", "Maybe"],
    )

    assert result.exit_code == EXIT_FAILED


def test_publish_missing_source(tmp_path: Path) -> None:
    result = runner.invoke(
        app, ["publish", str(tmp_path / "missing.csv"), str(tmp_path / "data.csv")]
    )

    assert result.exit_code == EXIT_FAILED


def test_publish_policy_from_environment(
    tmp_path: Path, source: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    target = tmp_path / "data.csv"
    target.write_text("old")
    monkeypatch.setenv("SEQFILE_FILE_EXIST", "Ignore")

    result = runner.invoke(app, ["publish", str(source), str(target)])

    assert result.exit_code == 0
    assert target.read_text() == "old"


def test_publish_writes_journal(tmp_path: Path, source: Path) -> None:
    journal_root = tmp_path / "journal-root"

    result = runner.invoke(
        app,
        [
            "publish",
            str(source),
            str(tmp_path / "data.csv"),
            "--journal-dir",
            str(journal_root),
        ],
    )

    assert result.exit_code == 0
    journals = list((journal_root / ".seqfile" / "journal").glob("*.jsonl"))
    assert len(journals) == 1
    lines = [json.loads(line) for line in journals[0].read_text().splitlines()]
    assert lines[0]["type"] == "header"
    assert lines[-1]["state"] == "complete"


def test_check_ready(tmp_path: Path) -> None:
    result = runner.invoke(
        app, ["check", str(tmp_path / "data.csv"), "--previous", "previous.csv"]
    )

    assert result.exit_code == 0
    assert "Ready to publish" in result.output


def test_check_blocked(tmp_path: Path) -> None:
    (tmp_path / "previous.csv").write_text("pending")

    result = runner.invoke(
        app, ["check", str(tmp_path / "data.csv"), "--previous", "previous.csv"]
    )

    assert result.exit_code == EXIT_FAILED
