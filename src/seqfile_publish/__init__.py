"""seqfile-publish: sequenced, crash-safe file publication.

Publishes payloads under their final name only once they are complete,
resolves existing targets according to a conflict policy, enforces publish
order through predecessor files and emits optional done files.
"""

from seqfile_publish.core.errors import (
    CleanupFailure,
    ConfigurationError,
    EmptyMoveTarget,
    RelocationFailure,
    RenameFailure,
    SentinelWriteFailure,
    SeqFileError,
    SequenceViolation,
    TargetExistsError,
    UnresolvedPlaceholder,
    WriteFailure,
)
from seqfile_publish.core.schemas import (
    ConflictPolicy,
    PublisherConfig,
    PublishRequest,
    PublishResult,
    PublishStatus,
    TempNaming,
)
from seqfile_publish.publish.publisher import SequentialFilePublisher, publish_file

__version__ = "0.1.0"

__all__ = [
    "CleanupFailure",
    "ConfigurationError",
    "ConflictPolicy",
    "EmptyMoveTarget",
    "PublishRequest",
    "PublishResult",
    "PublishStatus",
    "PublisherConfig",
    "RelocationFailure",
    "RenameFailure",
    "SentinelWriteFailure",
    "SeqFileError",
    "SequenceViolation",
    "SequentialFilePublisher",
    "TargetExistsError",
    "TempNaming",
    "UnresolvedPlaceholder",
    "WriteFailure",
    "publish_file",
]
