"""Tests for the predecessor gate."""

from pathlib import Path

import pytest

from seqfile_publish.core.errors import SequenceViolation
from seqfile_publish.publish.gate import check_predecessor, predecessor_path


@pytest.mark.parametrize("marker", [None, ""])
def test_no_marker_is_ok(tmp_path: Path, recording_ops, marker: str | None) -> None:
    check_predecessor(recording_ops, str(tmp_path), marker)
    assert recording_ops.calls == []


def test_absent_predecessor_is_ok(tmp_path: Path, recording_ops) -> None:
    check_predecessor(recording_ops, str(tmp_path), "b.txt")
    assert recording_ops.calls == [("exists", f"{tmp_path}/b.txt")]


def test_present_predecessor_blocks(tmp_path: Path, recording_ops) -> None:
    """Test a present predecessor raises and only an existence check ran."""
    (tmp_path / "b.txt").write_text("still here")

    with pytest.raises(SequenceViolation) as exc_info:
        check_predecessor(recording_ops, str(tmp_path), "b.txt")

    assert str(exc_info.value) == "File still exists: b.txt"
    assert exc_info.value.path == f"{tmp_path}/b.txt"
    assert recording_ops.mutations == []


def test_cleared_predecessor_unblocks(tmp_path: Path, recording_ops) -> None:
    """Test the caller can re-drive once the predecessor is consumed."""
    predecessor = tmp_path / "b.txt"
    predecessor.write_text("pending")

    with pytest.raises(SequenceViolation):
        check_predecessor(recording_ops, str(tmp_path), "b.txt")

    predecessor.unlink()
    check_predecessor(recording_ops, str(tmp_path), "b.txt")


def test_predecessor_only_checked_in_target_directory(
    tmp_path: Path, recording_ops
) -> None:
    (tmp_path / "b.txt").write_text("elsewhere")
    target_dir = tmp_path / "out"
    target_dir.mkdir()

    check_predecessor(recording_ops, str(target_dir), "b.txt")


def test_predecessor_path_separator() -> None:
    assert predecessor_path("/data/out", "b.txt") == "/data/out/b.txt"
    assert predecessor_path("C:\\out", "b.txt", "\\") == "C:\\out\\b.txt"
    assert predecessor_path("", "b.txt") == "b.txt"
