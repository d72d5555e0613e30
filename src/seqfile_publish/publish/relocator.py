"""Relocation of an existing target file before it is replaced."""

from seqfile_publish.core.errors import EmptyMoveTarget, RelocationFailure
from seqfile_publish.core.templates import (
    FileNameContext,
    TemplateEvaluator,
    evaluate_template,
)
from seqfile_publish.fs.operations import FileOperations
from seqfile_publish.fs.paths import normalize_path
from seqfile_publish.utils.logging import debug


class ExistingFileRelocator:
    """Moves an existing file to the destination named by a template.

    Only the file's name, base name and parent directory are visible to the
    template. The destination is used as evaluated, so a relative destination
    is relative to the same base as the path being moved.

    Args:
        operations: File operations providing ``rename``
        move_template: Template such as ``${file:parent}/archive/${file:onlyname}``
        evaluator: Template evaluator
        separator: Separator used to canonicalize the destination
    """

    def __init__(
        self,
        operations: FileOperations,
        move_template: str,
        evaluator: TemplateEvaluator = evaluate_template,
        separator: str = "/",
    ) -> None:
        self.operations = operations
        self.move_template = move_template
        self.evaluator = evaluator
        self.separator = separator

    def destination_for(self, path: str) -> str:
        """Evaluate the move template for ``path``.

        Raises:
            EmptyMoveTarget: If the template evaluates to an empty string
        """
        context = FileNameContext.from_path(path, self.separator)
        to = self.evaluator(self.move_template, context)
        if not to or not to.strip():
            raise EmptyMoveTarget(path)
        return normalize_path(to, self.separator)

    def relocate(self, path: str) -> str:
        """Move the file at ``path`` out of the way.

        Returns:
            The destination the file was moved to

        Raises:
            EmptyMoveTarget: If the template evaluates to an empty string
            RelocationFailure: If the rename fails
        """
        to = self.destination_for(path)
        debug(f"Moving existing file: {path} -> {to}")
        if not self.operations.rename(path, to):
            raise RelocationFailure(path, to)
        return to
