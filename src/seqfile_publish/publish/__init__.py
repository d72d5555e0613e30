"""The publish protocol: gate, conflict resolution, relocation, done files."""

from seqfile_publish.publish.done_file import DoneFileEmitter, create_done_file_name
from seqfile_publish.publish.gate import check_predecessor
from seqfile_publish.publish.publisher import SequentialFilePublisher, publish_file
from seqfile_publish.publish.relocator import ExistingFileRelocator
from seqfile_publish.publish.resolver import (
    ConflictAction,
    ConflictResolver,
    resolve_conflict,
)

__all__ = [
    "ConflictAction",
    "ConflictResolver",
    "DoneFileEmitter",
    "ExistingFileRelocator",
    "SequentialFilePublisher",
    "check_predecessor",
    "create_done_file_name",
    "publish_file",
    "resolve_conflict",
]
