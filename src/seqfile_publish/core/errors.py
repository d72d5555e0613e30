"""Custom exceptions for seqfile-publish.

This module defines the typed exceptions raised while configuring a publisher
and while driving a publish call through its state machine. Every exception
can be rendered with ``to_dict()`` for CLI/JSON output.
"""

from typing import Any


class SeqFileError(Exception):
    """Base exception for all seqfile-publish errors.

    Attributes:
        retryable: True when re-driving the same publish call may succeed
            once the filesystem state has changed
    """

    error_code = "seqfile_error"
    retryable = False

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for JSON output.

        Returns:
            Dictionary representation suitable for JSON responses
        """
        return {
            "error": self.error_code,
            "message": str(self),
            "retryable": self.retryable,
        }


class ConfigurationError(SeqFileError):
    """Raised when publisher options are missing or incompatible.

    Detected once, when the configuration is built. Never retried.

    Attributes:
        option: Name of the offending option, if a single one is to blame
    """

    error_code = "configuration_error"

    def __init__(self, message: str, option: str | None = None) -> None:
        self.option = option
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        if self.option is not None:
            result["option"] = self.option
        return result


class SequenceViolation(SeqFileError):
    """Raised when the predecessor file is still present.

    The caller may re-drive the publish call once the predecessor has been
    consumed.

    Attributes:
        previous_file_name: File name that blocked the write
        path: Resolved path of the predecessor
    """

    error_code = "sequence_violation"
    retryable = True

    def __init__(self, previous_file_name: str, path: str | None = None) -> None:
        self.previous_file_name = previous_file_name
        self.path = path
        super().__init__(f"File still exists: {previous_file_name}")

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["previous_file_name"] = self.previous_file_name
        if self.path is not None:
            result["path"] = self.path
        return result

    def __repr__(self) -> str:
        return (
            f"SequenceViolation(previous_file_name={self.previous_file_name!r}, "
            f"path={self.path!r})"
        )


class TargetExistsError(SeqFileError):
    """Raised when the target exists and the conflict policy is Fail.

    Attributes:
        target: Path of the existing target file
    """

    error_code = "target_exists"

    def __init__(self, target: str) -> None:
        self.target = target
        super().__init__(f"File already exists: {target}. Cannot write new file.")

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["target"] = self.target
        return result


class OperationFailure(SeqFileError):
    """Base class for failures of a file-operations primitive.

    Attributes:
        path: Path the failed operation was applied to
    """

    error_code = "operation_failure"

    def __init__(self, message: str, path: str) -> None:
        self.path = path
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["path"] = self.path
        return result


class CleanupFailure(OperationFailure):
    """Raised when an existing target, temp file or done file cannot be deleted."""

    error_code = "cleanup_failure"

    def __init__(self, path: str) -> None:
        super().__init__(f"Cannot delete file: {path}", path)


class RenameFailure(OperationFailure):
    """Raised when the temp file cannot be renamed to the target.

    The temp file is left in place for diagnosis.

    Attributes:
        destination: Rename destination
    """

    error_code = "rename_failure"

    def __init__(self, path: str, destination: str) -> None:
        self.destination = destination
        super().__init__(
            f"Cannot rename file from: {path} to: {destination}", path
        )

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["destination"] = self.destination
        return result


class RelocationFailure(RenameFailure):
    """Raised when an existing target cannot be moved out of the way."""

    error_code = "relocation_failure"


class WriteFailure(OperationFailure):
    """Raised when the write primitive fails."""

    error_code = "write_failure"

    def __init__(self, path: str, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Cannot write file: {path}: {reason}", path)


class SentinelWriteFailure(WriteFailure):
    """Raised when the done file cannot be written after a successful publish."""

    error_code = "sentinel_write_failure"


class UnresolvedPlaceholder(ConfigurationError):
    """Raised when a name pattern still holds placeholders after substitution.

    Raised at setup for done-file patterns, and at publish time when a
    template meets a token it does not know.

    Attributes:
        file_name: File name the pattern was resolved for
        remainder: The pattern after substitution
    """

    error_code = "unresolved_placeholder"

    def __init__(self, file_name: str, remainder: str) -> None:
        self.file_name = file_name
        self.remainder = remainder
        super().__init__(f"Cannot resolve placeholders for {file_name}: {remainder}")

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["file_name"] = self.file_name
        result["remainder"] = self.remainder
        return result


class EmptyMoveTarget(SeqFileError):
    """Raised when the move-existing template evaluates to an empty string."""

    error_code = "empty_move_target"

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(
            f"Move target evaluated to an empty string, cannot move: {path}"
        )

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["path"] = self.path
        return result
