"""Conflict policy resolution for an existing file at the target path."""

from enum import Enum
from typing import assert_never

from seqfile_publish.core.errors import CleanupFailure, TargetExistsError
from seqfile_publish.core.schemas import ConflictPolicy
from seqfile_publish.fs.operations import FileOperations
from seqfile_publish.publish.relocator import ExistingFileRelocator
from seqfile_publish.utils.logging import debug


class ConflictAction(str, Enum):
    """Action decided for a target path."""

    PROCEED = "proceed"
    SKIP_SILENTLY = "skip_silently"
    FAIL = "fail"
    MOVE_THEN_PROCEED = "move_then_proceed"
    DELETE_THEN_PROCEED = "delete_then_proceed"


def resolve_conflict(policy: ConflictPolicy, target_exists: bool) -> ConflictAction:
    """Decide what to do about the target for a given policy.

    Args:
        policy: Configured conflict policy
        target_exists: Whether a file is present at the target

    Returns:
        Exactly one ConflictAction; PROCEED whenever the target is absent
    """
    if not target_exists:
        return ConflictAction.PROCEED

    if policy is ConflictPolicy.IGNORE:
        return ConflictAction.SKIP_SILENTLY
    elif policy is ConflictPolicy.FAIL:
        return ConflictAction.FAIL
    elif policy is ConflictPolicy.MOVE:
        return ConflictAction.MOVE_THEN_PROCEED
    elif policy is ConflictPolicy.OVERRIDE:
        return ConflictAction.DELETE_THEN_PROCEED
    elif policy is ConflictPolicy.TRY_RENAME or policy is ConflictPolicy.APPEND:
        return ConflictAction.PROCEED
    else:
        assert_never(policy)


class ConflictResolver:
    """Checks the target and carries out the decided conflict action.

    Args:
        operations: File operations used for the existence check and delete
        policy: Configured conflict policy
        relocator: Relocator used for Move; required when policy is Move
    """

    def __init__(
        self,
        operations: FileOperations,
        policy: ConflictPolicy,
        relocator: ExistingFileRelocator | None = None,
    ) -> None:
        self.operations = operations
        self.policy = policy
        self.relocator = relocator

    @property
    def checks_existence(self) -> bool:
        return self.policy is not ConflictPolicy.TRY_RENAME

    def decide(self, target: str) -> ConflictAction:
        """Resolve the action for ``target`` without side effects."""
        if not self.checks_existence:
            return ConflictAction.PROCEED
        return resolve_conflict(self.policy, self.operations.exists(target))

    def apply(self, target: str) -> ConflictAction:
        """Resolve and carry out the action for ``target``.

        Returns:
            The action taken. SKIP_SILENTLY tells the caller to stop without
            writing anything further.

        Raises:
            TargetExistsError: Policy is Fail and the target exists
            CleanupFailure: Override could not delete the target
            RelocationFailure: Move could not relocate the target
            EmptyMoveTarget: Move template evaluated to an empty string
        """
        action = self.decide(target)

        if action is ConflictAction.FAIL:
            raise TargetExistsError(target)
        elif action is ConflictAction.MOVE_THEN_PROCEED:
            if self.relocator is None:
                raise RuntimeError("Move policy requires a relocator")
            self.relocator.relocate(target)
        elif action is ConflictAction.DELETE_THEN_PROCEED:
            debug(f"Deleting existing file: {target}")
            if not self.operations.delete(target):
                raise CleanupFailure(target)
        elif action is ConflictAction.SKIP_SILENTLY:
            debug(f"An existing file already exists: {target}. Ignoring it.")

        return action
