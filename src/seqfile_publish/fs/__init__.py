"""Filesystem primitives, path helpers and the publish journal.

This module provides the file-operation collaborator the publisher drives,
string-level path helpers, and the JSONL journal of publish transitions.
"""

from seqfile_publish.fs.journal import PublishJournal
from seqfile_publish.fs.operations import FileOperations, LocalFileOperations
from seqfile_publish.fs.paths import create_temp_file_name, normalize_path

__all__ = [
    "FileOperations",
    "LocalFileOperations",
    "PublishJournal",
    "create_temp_file_name",
    "normalize_path",
]
