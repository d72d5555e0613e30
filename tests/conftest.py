"""Pytest configuration and fixtures for seqfile-publish tests."""

from collections.abc import Callable
from typing import Any

import pytest

from seqfile_publish.fs.operations import LocalFileOperations


class RecordingFileOperations(LocalFileOperations):
    """Local file operations that record every call and can be told to fail.

    Args:
        fail: Operation names ("exists", "delete", "rename", "write") mapped to
            a predicate on the first path argument; a matching call fails the
            way the primitive reports failure (False for delete and rename,
            OSError for write); a matching exists raises PermissionError
    """

    def __init__(self, fail: dict[str, Callable[[str], bool]] | None = None) -> None:
        super().__init__()
        self.calls: list[tuple[str, ...]] = []
        self.fail = fail or {}

    def _should_fail(self, op: str, path: str) -> bool:
        predicate = self.fail.get(op)
        return predicate is not None and predicate(path)

    @property
    def mutations(self) -> list[tuple[str, ...]]:
        return [call for call in self.calls if call[0] != "exists"]

    def ops(self) -> list[str]:
        return [call[0] for call in self.calls]

    def exists(self, path: str) -> bool:
        self.calls.append(("exists", path))
        if self._should_fail("exists", path):
            raise PermissionError(f"Permission denied: {path}")
        return super().exists(path)

    def delete(self, path: str) -> bool:
        self.calls.append(("delete", path))
        if self._should_fail("delete", path):
            return False
        return super().delete(path)

    def rename(self, src: str, dst: str) -> bool:
        self.calls.append(("rename", src, dst))
        if self._should_fail("rename", src):
            return False
        return super().rename(src, dst)

    def write(self, path: str, payload: Any, *, append: bool = False) -> None:
        self.calls.append(("write", path))
        if self._should_fail("write", path):
            raise OSError("disk full")
        super().write(path, payload, append=append)


@pytest.fixture
def recording_ops() -> RecordingFileOperations:
    """File operations that record calls and never fail."""
    return RecordingFileOperations()


@pytest.fixture
def make_ops() -> Callable[..., RecordingFileOperations]:
    """Factory for recording file operations with injected failures."""

    def _make(**fail: Callable[[str], bool]) -> RecordingFileOperations:
        return RecordingFileOperations(fail=fail)

    return _make
