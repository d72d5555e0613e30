"""Predecessor gate: enforces publish order between successive writes."""

from seqfile_publish.core.errors import SequenceViolation
from seqfile_publish.fs.operations import FileOperations
from seqfile_publish.fs.paths import join_path


def predecessor_path(
    target_dir: str, previous_file_name: str, separator: str = "/"
) -> str:
    return join_path(target_dir, previous_file_name, separator)


def check_predecessor(
    operations: FileOperations,
    target_dir: str,
    previous_file_name: str | None,
    *,
    separator: str = "/",
) -> None:
    """Block the write while the predecessor file is still present.

    Only ``exists`` is called, so a blocked write leaves storage untouched.

    Args:
        operations: File operations providing ``exists``
        target_dir: Directory of the target about to be written
        previous_file_name: File name that must be absent; None/empty skips
            the check
        separator: Separator used to join the name onto ``target_dir``

    Raises:
        SequenceViolation: If the predecessor file exists
    """
    if not previous_file_name:
        return

    path = predecessor_path(target_dir, previous_file_name, separator)
    if operations.exists(path):
        raise SequenceViolation(previous_file_name, path)
