"""Tests for the local file-operations collaborator."""

import errno
import io
from pathlib import Path
from unittest.mock import patch

import pytest

from seqfile_publish.fs.operations import FileOperations, LocalFileOperations


def test_satisfies_protocol() -> None:
    assert isinstance(LocalFileOperations(), FileOperations)


class TestExists:
    def test_file(self, tmp_path: Path) -> None:
        path = tmp_path / "a.txt"
        path.write_text("x")
        assert LocalFileOperations().exists(str(path))

    def test_missing(self, tmp_path: Path) -> None:
        assert not LocalFileOperations().exists(str(tmp_path / "a.txt"))

    def test_directory_is_not_a_file(self, tmp_path: Path) -> None:
        assert not LocalFileOperations().exists(str(tmp_path))


class TestDelete:
    def test_deletes_file(self, tmp_path: Path) -> None:
        path = tmp_path / "a.txt"
        path.write_text("x")

        assert LocalFileOperations().delete(str(path))
        assert not path.exists()

    def test_missing_file_counts_as_deleted(self, tmp_path: Path) -> None:
        assert LocalFileOperations().delete(str(tmp_path / "a.txt"))

    def test_failure_returns_false(self, tmp_path: Path) -> None:
        """Test an OS error is reported as False, not raised."""
        path = tmp_path / "a.txt"
        path.write_text("x")

        with patch.object(Path, "unlink", side_effect=PermissionError("denied")):
            assert not LocalFileOperations().delete(str(path))
        assert path.exists()


class TestRename:
    def test_renames(self, tmp_path: Path) -> None:
        src = tmp_path / ".tmp-a.txt"
        dst = tmp_path / "a.txt"
        src.write_text("payload")

        assert LocalFileOperations().rename(str(src), str(dst))
        assert not src.exists()
        assert dst.read_text() == "payload"

    def test_creates_destination_directory(self, tmp_path: Path) -> None:
        src = tmp_path / "a.txt"
        dst = tmp_path / "archive" / "2024" / "a.txt"
        src.write_text("old")

        assert LocalFileOperations().rename(str(src), str(dst))
        assert dst.read_text() == "old"

    def test_refuses_to_clobber(self, tmp_path: Path) -> None:
        """Test an existing destination makes the rename fail."""
        src = tmp_path / ".tmp-a.txt"
        dst = tmp_path / "a.txt"
        src.write_text("new")
        dst.write_text("old")

        assert not LocalFileOperations().rename(str(src), str(dst))
        assert src.read_text() == "new"
        assert dst.read_text() == "old"

    def test_missing_source(self, tmp_path: Path) -> None:
        assert not LocalFileOperations().rename(
            str(tmp_path / "missing"), str(tmp_path / "a.txt")
        )

    def test_cross_device_fallback(self, tmp_path: Path) -> None:
        """Test EXDEV falls back to copy and unlink."""
        src = tmp_path / ".tmp-a.txt"
        dst = tmp_path / "a.txt"
        src.write_text("payload")
        cross_device = OSError(errno.EXDEV, "Invalid cross-device link")

        with patch.object(Path, "rename", side_effect=cross_device):
            assert LocalFileOperations().rename(str(src), str(dst))

        assert not src.exists()
        assert dst.read_text() == "payload"

    def test_other_rename_error(self, tmp_path: Path) -> None:
        src = tmp_path / ".tmp-a.txt"
        src.write_text("payload")

        with patch.object(Path, "rename", side_effect=PermissionError("denied")):
            assert not LocalFileOperations().rename(
                str(src), str(tmp_path / "a.txt")
            )
        assert src.exists()


class TestWrite:
    def test_bytes(self, tmp_path: Path) -> None:
        path = tmp_path / "a.bin"
        LocalFileOperations().write(str(path), b"\x00\x01")
        assert path.read_bytes() == b"\x00\x01"

    def test_str_uses_charset(self, tmp_path: Path) -> None:
        path = tmp_path / "a.txt"
        LocalFileOperations(charset="latin-1").write(str(path), "café")
        assert path.read_bytes() == "café".encode("latin-1")

    def test_file_object(self, tmp_path: Path) -> None:
        path = tmp_path / "a.txt"
        LocalFileOperations().write(str(path), io.BytesIO(b"streamed"))
        assert path.read_bytes() == b"streamed"

    def test_source_path(self, tmp_path: Path) -> None:
        source = tmp_path / "source.csv"
        source.write_bytes(b"a,b\n1,2\n")
        path = tmp_path / "out" / "report.csv"

        LocalFileOperations().write(str(path), source)

        assert path.read_bytes() == b"a,b\n1,2\n"

    def test_overwrites_by_default(self, tmp_path: Path) -> None:
        path = tmp_path / "a.txt"
        path.write_text("old content")
        LocalFileOperations().write(str(path), b"new")
        assert path.read_bytes() == b"new"

    def test_append(self, tmp_path: Path) -> None:
        path = tmp_path / "a.txt"
        path.write_bytes(b"line1\n")
        LocalFileOperations().write(str(path), b"line2\n", append=True)
        assert path.read_bytes() == b"line1\nline2\n"

    def test_creates_parent(self, tmp_path: Path) -> None:
        path = tmp_path / "nested" / "dir" / "a.txt"
        LocalFileOperations().write(str(path), b"x")
        assert path.exists()

    def test_no_auto_create(self, tmp_path: Path) -> None:
        path = tmp_path / "nested" / "a.txt"
        with pytest.raises(OSError):
            LocalFileOperations(auto_create=False).write(str(path), b"x")

    def test_unsupported_payload(self, tmp_path: Path) -> None:
        """Test an unsupported payload is rejected before the file is touched."""
        path = tmp_path / "a.txt"
        with pytest.raises(TypeError):
            LocalFileOperations().write(str(path), 42)
        assert not path.exists()
