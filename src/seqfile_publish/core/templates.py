"""File-name templates used for move-existing and temp-file naming.

Templates use the ``${file:...}`` syntax (``$simple{file:...}`` is accepted as
an alias). Only the attributes carried by :class:`FileNameContext` are
available; anything else is rejected with :class:`UnresolvedPlaceholder`.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass

from seqfile_publish.core.errors import UnresolvedPlaceholder

__all__ = [
    "FileNameContext",
    "TemplateEvaluator",
    "evaluate_template",
    "strip_ext",
]

_TOKEN_RE = re.compile(r"\$(?:simple)?\{([^}]*)\}")


@dataclass(frozen=True)
class FileNameContext:
    """Read-only view of a file name used to evaluate templates.

    Attributes:
        name: Full file name as given (may include directories)
        only_name: Base name without any directory
        parent: Parent directory, empty when the name has none
    """

    name: str
    only_name: str
    parent: str

    @classmethod
    def from_path(cls, path: str, separator: str = "/") -> FileNameContext:
        normalized = path.replace("\\", "/")
        parent, _, only_name = normalized.rpartition("/")
        if separator != "/":
            parent = parent.replace("/", separator)
        return cls(name=path, only_name=only_name, parent=parent)


TemplateEvaluator = Callable[[str, FileNameContext], str]


def strip_ext(name: str) -> str:
    """Strip the last extension from a file name (``a.tar.gz`` -> ``a.tar``)."""
    base_start = max(name.rfind("/"), name.rfind("\\")) + 1
    dot = name.rfind(".")
    if dot <= base_start:
        return name
    return name[:dot]


def _ext(name: str) -> str:
    if "." not in name:
        return ""
    return name.rsplit(".", 1)[1]


def _lookup(expression: str, context: FileNameContext) -> str | None:
    values = {
        "file:name": context.name,
        "file:name.noext": strip_ext(context.name),
        "file:name.ext": _ext(context.only_name),
        "file:ext": _ext(context.only_name),
        "file:onlyname": context.only_name,
        "file:onlyname.noext": strip_ext(context.only_name),
        "file:parent": context.parent,
    }
    return values.get(expression.strip())


def evaluate_template(template: str, context: FileNameContext) -> str:
    """Evaluate a file-name template against a context.

    Args:
        template: Template such as ``archive/${file:onlyname}.bak``
        context: File-name attributes available to the template

    Returns:
        The template with every token substituted

    Raises:
        UnresolvedPlaceholder: If the template uses an unknown token
    """

    def _replace(match: re.Match[str]) -> str:
        value = _lookup(match.group(1), context)
        if value is None:
            raise UnresolvedPlaceholder(context.name, template)
        return value

    return _TOKEN_RE.sub(_replace, template)
