"""File-operation primitives the publisher is built on.

The publisher never touches storage directly. It calls ``exists``,
``delete``, ``rename`` and ``write`` on a :class:`FileOperations`
implementation; :class:`LocalFileOperations` is the pathlib-based one used
for local directories.
"""

import errno
import os
import shutil
from pathlib import Path
from typing import Any, BinaryIO, Protocol, runtime_checkable

from seqfile_publish.core.constants import DEFAULT_CHARSET
from seqfile_publish.fs.paths import only_path
from seqfile_publish.utils.logging import debug

Payload = bytes | str | BinaryIO | Path


@runtime_checkable
class FileOperations(Protocol):
    """Storage primitives used by the publisher.

    ``delete`` and ``rename`` report failure by returning False; ``write``
    raises on I/O failure.
    """

    def exists(self, path: str) -> bool: ...

    def delete(self, path: str) -> bool: ...

    def rename(self, src: str, dst: str) -> bool: ...

    def write(self, path: str, payload: Any, *, append: bool = False) -> None: ...


class LocalFileOperations:
    """File operations against the local filesystem.

    Args:
        charset: Encoding used for str payloads
        auto_create: Create missing parent directories on write and rename
    """

    def __init__(
        self, charset: str = DEFAULT_CHARSET, auto_create: bool = True
    ) -> None:
        self.charset = charset
        self.auto_create = auto_create

    def exists(self, path: str) -> bool:
        return Path(path).is_file()

    def delete(self, path: str) -> bool:
        """Delete a file.

        Returns:
            True if the file is gone afterwards, False if it could not be removed
        """
        file_path = Path(path)
        try:
            file_path.unlink(missing_ok=True)
        except OSError as e:
            debug(f"Failed to delete {file_path}: {e}")
            return False
        debug(f"Deleted file: {file_path}")
        return True

    def rename(self, src: str, dst: str) -> bool:
        """Rename a file without clobbering an existing destination.

        Returns:
            True on success, False if the destination exists or the rename failed
        """
        src_path = Path(src)
        dst_path = Path(dst)

        if dst_path.exists():
            debug(f"Rename refused, destination exists: {dst_path}")
            return False

        try:
            self._ensure_parent_dir(dst)
            src_path.rename(dst_path)
        except OSError as e:
            if e.errno != errno.EXDEV:
                debug(f"Rename failed: {src_path} -> {dst_path}: {e}")
                return False
            return self._move_across_devices(src_path, dst_path)

        debug(f"Renamed: {src_path} -> {dst_path}")
        return True

    def _move_across_devices(self, src_path: Path, dst_path: Path) -> bool:
        # Cross-device move: copy + fsync + remove
        try:
            shutil.copy2(str(src_path), str(dst_path))
            with dst_path.open("rb") as handle:
                os.fsync(handle.fileno())
            src_path.unlink()
        except OSError as e:
            debug(f"Cross-device move failed: {src_path} -> {dst_path}: {e}")
            dst_path.unlink(missing_ok=True)
            return False

        debug(f"Cross-device move: {src_path} -> {dst_path}")
        return True

    def write(self, path: str, payload: Any, *, append: bool = False) -> None:
        """Write a payload to a file.

        Args:
            path: Destination file path
            payload: bytes, str, a binary file object or a source Path
            append: Append to an existing file instead of truncating it

        Raises:
            OSError: If the file cannot be written
            TypeError: If the payload type is not supported
        """
        if not isinstance(payload, bytes | bytearray | memoryview | str | Path) and (
            not hasattr(payload, "read")
        ):
            raise TypeError(f"Unsupported payload type: {type(payload).__name__}")

        self._ensure_parent_dir(path)
        mode = "ab" if append else "wb"

        with open(path, mode) as handle:
            if isinstance(payload, bytes | bytearray | memoryview):
                handle.write(payload)
            elif isinstance(payload, str):
                handle.write(payload.encode(self.charset))
            elif isinstance(payload, Path):
                with payload.open("rb") as source:
                    shutil.copyfileobj(source, handle)
            else:
                shutil.copyfileobj(payload, handle)

        debug(f"Wrote file: {path} (append={append})")

    def _ensure_parent_dir(self, path: str) -> None:
        parent = only_path(path)
        if self.auto_create and parent:
            Path(parent).mkdir(parents=True, exist_ok=True)
