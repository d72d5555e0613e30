"""Pydantic schemas for publisher configuration, requests and results.

These schemas define the data structures used throughout seqfile-publish:
- ConflictPolicy: What to do with a file already present at the target
- TempNaming / PublisherConfig: Options validated once, at setup time
- PublishRequest: One payload bound for one target
- PublishResult / PublishEvent: Observable outcome of a publish call

All schemas use Pydantic v2 for validation and serialization.
"""

import uuid
from datetime import UTC, datetime
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    PrivateAttr,
    field_serializer,
    field_validator,
    model_validator,
)

from seqfile_publish.core.constants import (
    DEFAULT_CHARSET,
    DEFAULT_SEPARATOR,
    PREVIOUS_FILE_NAME_HEADER,
)
from seqfile_publish.core.errors import ConfigurationError, SeqFileError


class ConflictPolicy(str, Enum):
    """Action to take when a file already exists at the target path.

    Attributes:
        IGNORE: Leave the existing file alone and report success
        FAIL: Abort with TargetExistsError
        OVERRIDE: Delete the existing file, then publish
        MOVE: Relocate the existing file using the move-existing template
        TRY_RENAME: Skip existence checks and let the rename decide
        APPEND: Append to the existing file (direct writes only)
    """

    IGNORE = "Ignore"
    FAIL = "Fail"
    OVERRIDE = "Override"
    MOVE = "Move"
    TRY_RENAME = "TryRename"
    APPEND = "Append"

    @classmethod
    def _missing_(cls, value: object) -> "ConflictPolicy | None":
        if isinstance(value, str):
            wanted = value.replace("_", "").replace("-", "").lower()
            for member in cls:
                if member.value.lower() == wanted:
                    return member
        return None


class TempNaming(BaseModel):
    """How to name the temporary file a payload is written to before renaming.

    Exactly one of ``prefix`` or ``pattern`` must be set.

    Attributes:
        prefix: Prepended to the target's base name, same directory
        pattern: Template evaluated against the target's file name; a relative
            result is placed in the target's directory
    """

    prefix: str | None = None
    pattern: str | None = None

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def validate_choice(self) -> "TempNaming":
        if bool(self.prefix) == bool(self.pattern):
            raise ConfigurationError(
                "Temp naming needs exactly one of prefix or pattern",
                option="temp_naming",
            )
        return self


class PublisherConfig(BaseModel):
    """Publisher options, validated once when the publisher is configured.

    Attributes:
        file_exist: Conflict policy for an existing target
        temp_naming: Temp-and-rename strategy; None writes directly
        eager_delete_target_file: Resolve conflicts before writing the temp
            file (True) or after it (False)
        move_existing: Template used to relocate an existing target (Move only)
        done_file_name: Pattern of the empty sentinel written after publishing
        separator: Separator used when joining names onto a directory
        charset: Encoding applied to str payloads
    """

    file_exist: ConflictPolicy = ConflictPolicy.OVERRIDE
    temp_naming: TempNaming | None = None
    eager_delete_target_file: bool = True
    move_existing: str | None = None
    done_file_name: str | None = None
    separator: str = DEFAULT_SEPARATOR
    charset: str = DEFAULT_CHARSET

    model_config = ConfigDict(frozen=True)

    @field_validator("file_exist", mode="before")
    @classmethod
    def parse_file_exist(cls, value: Any) -> Any:
        if isinstance(value, str) and not isinstance(value, ConflictPolicy):
            try:
                return ConflictPolicy(value)
            except ValueError as e:
                raise ConfigurationError(
                    f"Unknown file_exist policy: {value}", option="file_exist"
                ) from e
        return value

    @field_validator("done_file_name")
    @classmethod
    def validate_done_file_name(cls, value: str | None) -> str | None:
        if value is not None and not value.strip():
            raise ConfigurationError(
                "done_file_name must not be empty", option="done_file_name"
            )
        return value

    @model_validator(mode="after")
    def validate_combinations(self) -> "PublisherConfig":
        if self.file_exist is ConflictPolicy.APPEND and self.temp_naming is not None:
            raise ConfigurationError(
                "file_exist=Append cannot be combined with temp naming",
                option="file_exist",
            )
        if self.file_exist is ConflictPolicy.MOVE and not self.move_existing:
            raise ConfigurationError(
                "file_exist=Move requires move_existing",
                option="move_existing",
            )
        if self.move_existing and self.file_exist is not ConflictPolicy.MOVE:
            raise ConfigurationError(
                "move_existing is only valid with file_exist=Move",
                option="file_exist",
            )
        return self

    @property
    def writes_via_temp(self) -> bool:
        return self.temp_naming is not None


class PublishRequest(BaseModel):
    """A payload bound for a target path.

    Attributes:
        target: Final path the payload becomes visible under
        payload: bytes, str, a binary file object or a local source Path
        previous_file_name: File that must be absent from the target's
            directory; falls back to the SeqFilePreviousFileName header
        headers: Free-form request metadata
        request_id: Correlation identifier for logs and journals
    """

    target: Path
    payload: Any = b""
    previous_file_name: str | None = None
    headers: dict[str, str] = Field(default_factory=dict)
    request_id: str = Field(default_factory=lambda: uuid.uuid4().hex)

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    @property
    def predecessor(self) -> str | None:
        if self.previous_file_name:
            return self.previous_file_name
        return self.headers.get(PREVIOUS_FILE_NAME_HEADER) or None


class PublishState(str, Enum):
    """States of a single publish call."""

    START = "start"
    PRE_CHECK = "pre_check"
    WRITING = "writing"
    POST_CHECK = "post_check"
    RENAMING = "renaming"
    DONE_FILE_WRITE = "done_file_write"
    COMPLETE = "complete"
    SKIPPED = "skipped"
    ABORTED = "aborted"


class PublishStatus(str, Enum):
    """Top-level outcome of a publish call.

    Attributes:
        COMPLETED: Target and (if configured) done file were written
        SKIPPED: Ignore policy left an existing target untouched
        PARTIAL: Target was published but the done file failed
        FAILED: Target was not published
    """

    COMPLETED = "completed"
    SKIPPED = "skipped"
    PARTIAL = "partial"
    FAILED = "failed"


class PublishEvent(BaseModel):
    """A state transition emitted while publishing."""

    ts: datetime = Field(default_factory=lambda: datetime.now(UTC))
    request_id: str
    state: PublishState
    target: str
    detail: dict[str, Any] = Field(default_factory=dict)

    @field_serializer("ts")
    def serialize_ts(self, ts: datetime) -> str:
        return ts.isoformat()


class PublishResult(BaseModel):
    """Outcome of a publish call.

    Attributes:
        target: Logical target the request named
        status: Top-level outcome
        produced_path: Path actually published, None unless Target was written
        temp_path: Temp file used, if any
        done_file: Done file written, if any
        error: Serialized error for partial/failed outcomes
        events: State transitions in the order they happened
        headers: Result metadata (SeqFileNameProduced)
    """

    target: Path
    status: PublishStatus
    produced_path: Path | None = None
    temp_path: Path | None = None
    done_file: Path | None = None
    error: dict[str, Any] | None = None
    events: list[PublishEvent] = Field(default_factory=list)
    headers: dict[str, str] = Field(default_factory=dict)

    _exception: SeqFileError | None = PrivateAttr(default=None)

    @field_serializer("target", "produced_path", "temp_path", "done_file")
    def serialize_path(self, path: Path | None) -> str | None:
        """Serialize Path to string for JSON."""
        return str(path) if path is not None else None

    @property
    def ok(self) -> bool:
        return self.status in (PublishStatus.COMPLETED, PublishStatus.SKIPPED)

    @property
    def exception(self) -> SeqFileError | None:
        return self._exception

    def with_exception(self, exc: SeqFileError) -> "PublishResult":
        self._exception = exc
        return self

    def raise_for_status(self) -> "PublishResult":
        """Re-raise the captured error for partial and failed outcomes."""
        if self._exception is not None and not self.ok:
            raise self._exception
        return self
