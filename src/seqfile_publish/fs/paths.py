"""Path utilities for publish operations.

This module provides the string-level path helpers the publisher uses to
derive temp names, predecessor paths and done-file names. All helpers work
on plain strings so that non-local file-operation backends see exactly the
names the publisher computed.
"""

import posixpath
from pathlib import Path

from seqfile_publish.core.schemas import TempNaming
from seqfile_publish.core.templates import (
    FileNameContext,
    TemplateEvaluator,
    evaluate_template,
)


def normalize_path(path: str | Path, separator: str = "/") -> str:
    """Normalize a path for consistent handling.

    Canonicalizes mixed separators to ``separator`` and collapses redundant
    ``.``/``..`` segments. Relative paths stay relative.

    Args:
        path: Path to normalize
        separator: Separator to emit

    Returns:
        Normalized path string
    """
    raw = str(path).replace("\\", "/")
    if not raw:
        return raw

    normalized = posixpath.normpath(raw)
    if separator != "/":
        normalized = normalized.replace("/", separator)
    return normalized


def only_path(path: str | Path) -> str:
    """Return the directory part of a path, or an empty string if it has none."""
    raw = str(path).replace("\\", "/")
    parent, sep, _ = raw.rpartition("/")
    if not sep:
        return ""
    return parent or "/"


def strip_path(path: str | Path) -> str:
    """Return the base name of a path."""
    return str(path).replace("\\", "/").rpartition("/")[2]


def has_directory(name: str) -> bool:
    """True if a name carries a directory component."""
    return "/" in name or "\\" in name


def join_path(directory: str, name: str, separator: str = "/") -> str:
    """Join a name onto a directory, leaving the name alone if directory is empty."""
    if not directory:
        return name
    if directory.endswith(("/", "\\")):
        return f"{directory}{name}"
    return f"{directory}{separator}{name}"


def create_temp_file_name(
    target: str | Path,
    naming: TempNaming,
    *,
    separator: str = "/",
    evaluator: TemplateEvaluator = evaluate_template,
) -> str:
    """Compute the temporary name a payload is written to before renaming.

    Args:
        target: Final target path
        naming: Temp naming strategy (prefix or pattern)
        separator: Separator used when joining onto the target's directory
        evaluator: Template evaluator for pattern-based naming

    Returns:
        Temp file path in the target's directory (or wherever an absolute
        pattern points)
    """
    target_str = str(target)
    directory = only_path(target_str)

    if naming.prefix:
        name = f"{naming.prefix}{strip_path(target_str)}"
    else:
        only_name = strip_path(target_str)
        context = FileNameContext(
            name=only_name, only_name=only_name, parent=directory
        )
        name = evaluator(naming.pattern or "", context)
        if Path(name).is_absolute():
            return normalize_path(name, separator)

    return normalize_path(join_path(directory, name, separator), separator)
