"""Core constants for seqfile-publish.

This module defines constants used throughout the package:
- Request/result header names
- Placeholder tokens understood in done-file and temp-file name patterns
- Environment variable names and configuration defaults
"""

# ============================================================================
# Headers
# ============================================================================

#: Request header naming the file that must be gone before a write proceeds
PREVIOUS_FILE_NAME_HEADER = "SeqFilePreviousFileName"

#: Result header holding the path that was actually produced
FILE_NAME_PRODUCED_HEADER = "SeqFileNameProduced"

# ============================================================================
# Placeholders
# ============================================================================

#: Tokens replaced by the target's base name in done-file patterns
FILE_NAME_TOKENS: tuple[str, ...] = (
    "${file:name}",
    "$simple{file:name}",
    "{file:name}",
)

#: Tokens replaced by the target's base name without extension
FILE_NAME_NOEXT_TOKENS: tuple[str, ...] = (
    "${file:name.noext}",
    "$simple{file:name.noext}",
    "{file:name.noext}",
)

#: Markers that indicate a placeholder survived substitution
UNRESOLVED_MARKERS: tuple[str, ...] = ("${", "$simple{", "{file:")

# ============================================================================
# Configuration
# ============================================================================

#: Default path separator used when joining names onto a directory
DEFAULT_SEPARATOR = "/"

#: Default charset for str payloads
DEFAULT_CHARSET = "utf-8"

#: Directory (relative to a journal root) that holds publish journals
JOURNAL_DIR = ".seqfile/journal"

#: Journal file schema version
JOURNAL_SCHEMA_VERSION = "1.0"

#: Environment variables read by ``load_config_from_env``
ENV_FILE_EXIST = "SEQFILE_FILE_EXIST"
ENV_TEMP_PREFIX = "SEQFILE_TEMP_PREFIX"
ENV_TEMP_FILE_NAME = "SEQFILE_TEMP_FILE_NAME"
ENV_EAGER_DELETE = "SEQFILE_EAGER_DELETE"
ENV_MOVE_EXISTING = "SEQFILE_MOVE_EXISTING"
ENV_DONE_FILE_NAME = "SEQFILE_DONE_FILE_NAME"
ENV_CHARSET = "SEQFILE_CHARSET"
ENV_JOURNAL_DIR = "SEQFILE_JOURNAL_DIR"
ENV_DEBUG = "SEQFILE_DEBUG"

#: Values treated as true for boolean environment variables
TRUTHY_VALUES: tuple[str, ...] = ("1", "true", "yes", "on")
