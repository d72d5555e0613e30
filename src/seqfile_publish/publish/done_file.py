"""Done-file (sentinel) naming and emission.

A done file is an empty marker written next to a published file once it is
complete. Consumers poll for the marker instead of the payload itself.

Supported placeholders in the done-file pattern:

- ``${file:name}`` / ``$simple{file:name}`` / ``{file:name}``: the
  published file's base name
- ``${file:name.noext}`` / ``$simple{file:name.noext}`` /
  ``{file:name.noext}``: the base name without its extension

Each token is substituted once (first occurrence). Anything else that still
looks like a placeholder afterwards is a configuration error.
"""

import re

from seqfile_publish.core.constants import (
    FILE_NAME_NOEXT_TOKENS,
    FILE_NAME_TOKENS,
    UNRESOLVED_MARKERS,
)
from seqfile_publish.core.errors import (
    CleanupFailure,
    ConfigurationError,
    SentinelWriteFailure,
    UnresolvedPlaceholder,
)
from seqfile_publish.core.templates import strip_ext
from seqfile_publish.fs.operations import FileOperations
from seqfile_publish.fs.paths import (
    has_directory,
    join_path,
    normalize_path,
    only_path,
    strip_path,
)
from seqfile_publish.utils.logging import debug


def _substitute_once(pattern: str, token: str, value: str) -> str:
    if token.startswith("{"):
        # A bare token must not be the tail of a ${...} or $simple{...} token
        bare = re.compile(r"(?<!\$)(?<!\$simple)" + re.escape(token))
        return bare.sub(lambda _: value, pattern, count=1)
    return pattern.replace(token, value, 1)


def create_done_file_name(target: str, pattern: str, separator: str = "/") -> str:
    """Compute the done-file path for a published target.

    Args:
        target: Path the payload was published under
        pattern: Done-file pattern, e.g. ``${file:name}.done``
        separator: Separator used when joining onto the target's directory

    Returns:
        Done-file path; in the target's directory unless the substituted
        pattern carries its own directory

    Raises:
        ConfigurationError: If the pattern is empty or substitutes to nothing
        UnresolvedPlaceholder: If unsupported placeholders remain
    """
    if not pattern:
        raise ConfigurationError("done_file_name must not be empty", "done_file_name")

    only_name = strip_path(target)
    no_ext = strip_ext(only_name)

    resolved = pattern
    for token in FILE_NAME_TOKENS:
        resolved = _substitute_once(resolved, token, only_name)
    for token in FILE_NAME_NOEXT_TOKENS:
        resolved = _substitute_once(resolved, token, no_ext)

    if any(marker in resolved for marker in UNRESOLVED_MARKERS):
        raise UnresolvedPlaceholder(target, resolved)
    if not resolved:
        raise ConfigurationError(
            f"done_file_name resolved to an empty name for {target}", "done_file_name"
        )

    if has_directory(resolved):
        return normalize_path(resolved, separator)

    directory = only_path(target)
    return normalize_path(join_path(directory, resolved, separator), separator)


class DoneFileEmitter:
    """Writes the empty done file for a published target.

    Args:
        operations: File operations used to delete and write the marker
        pattern: Done-file pattern
        separator: Separator used for path joins
    """

    def __init__(
        self, operations: FileOperations, pattern: str, separator: str = "/"
    ) -> None:
        self.operations = operations
        self.pattern = pattern
        self.separator = separator

    def done_file_for(self, target: str) -> str:
        return create_done_file_name(target, self.pattern, self.separator)

    def emit(self, target: str) -> str:
        """Write the done file for ``target``.

        Returns:
            Path of the done file written

        Raises:
            UnresolvedPlaceholder: Pattern could not be fully substituted
            CleanupFailure: An existing done file could not be deleted
            SentinelWriteFailure: The done file could not be written
        """
        done_file = self.done_file_for(target)
        debug(f"Writing done file: {done_file}")

        if self.operations.exists(done_file) and not self.operations.delete(
            done_file
        ):
            raise CleanupFailure(done_file)

        try:
            self.operations.write(done_file, b"")
        except Exception as e:
            raise SentinelWriteFailure(done_file, str(e)) from e

        return done_file
