"""Sequenced, crash-safe publisher.

This module provides the SequentialFilePublisher class that drives a single
publish call through its states:

    START -> PRE_CHECK -> WRITING -> POST_CHECK -> RENAMING
          -> DONE_FILE_WRITE -> COMPLETE

with ABORTED reachable from any state and SKIPPED for the Ignore policy.
Every transition is logged through structlog and handed to the configured
event sinks (for example a PublishJournal).

Failures abort the remaining steps. Nothing is retried or rolled back: a temp
file or a deleted target may be left behind for the next call's own checks
to deal with.
"""

from collections.abc import Callable, Iterable
from pathlib import Path
from typing import Any

import structlog

from seqfile_publish.core.constants import FILE_NAME_PRODUCED_HEADER
from seqfile_publish.core.errors import (
    CleanupFailure,
    OperationFailure,
    RenameFailure,
    SeqFileError,
    WriteFailure,
)
from seqfile_publish.core.schemas import (
    ConflictPolicy,
    PublisherConfig,
    PublishEvent,
    PublishRequest,
    PublishResult,
    PublishState,
    PublishStatus,
    TempNaming,
)
from seqfile_publish.core.templates import TemplateEvaluator, evaluate_template
from seqfile_publish.fs.operations import FileOperations, LocalFileOperations
from seqfile_publish.fs.paths import create_temp_file_name, only_path
from seqfile_publish.publish.done_file import DoneFileEmitter
from seqfile_publish.publish.gate import check_predecessor
from seqfile_publish.publish.relocator import ExistingFileRelocator
from seqfile_publish.publish.resolver import ConflictAction, ConflictResolver

EventSink = Callable[[PublishEvent], None]
FailureHandler = Callable[[PublishRequest, PublishResult], None]


def _operation_failure(error: Exception, path: str) -> OperationFailure:
    """Wrap an unexpected collaborator exception as a typed failure."""
    failure = OperationFailure(f"File operation failed for {path}: {error}", path)
    failure.__cause__ = error
    return failure


class _PublishRun:
    """Per-call bookkeeping: current state, emitted events and bound logger."""

    def __init__(
        self, request: PublishRequest, logger: Any, sinks: Iterable[EventSink]
    ) -> None:
        self.request = request
        self.target = str(request.target)
        self.logger = logger
        self.sinks = list(sinks)
        self.state = PublishState.START
        self.events: list[PublishEvent] = []
        self.temp_path: str | None = None

    def transition(self, state: PublishState, **detail: Any) -> None:
        self.state = state
        event = PublishEvent(
            request_id=self.request.request_id,
            state=state,
            target=self.target,
            detail=detail,
        )
        self.events.append(event)
        self.logger.debug("publish.transition", state=state.value, **detail)
        for sink in self.sinks:
            sink(event)


class SequentialFilePublisher:
    """Publishes payloads under their final name in a crash-safe order.

    Args:
        config: Validated publisher configuration
        operations: File operations; defaults to the local filesystem
        evaluator: Template evaluator for move and temp-name templates
        logger: Optional structlog logger instance
        event_sinks: Callables receiving every PublishEvent
        on_failure: Called with (request, result) for partial and failed
            outcomes
    """

    def __init__(
        self,
        config: PublisherConfig,
        operations: FileOperations | None = None,
        *,
        evaluator: TemplateEvaluator = evaluate_template,
        logger: Any = None,
        event_sinks: Iterable[EventSink] = (),
        on_failure: FailureHandler | None = None,
    ) -> None:
        self.config = config
        self.operations = operations or LocalFileOperations(charset=config.charset)
        self.evaluator = evaluator
        self._logger = logger or structlog.get_logger()
        self._event_sinks = list(event_sinks)
        self._on_failure = on_failure

        relocator = None
        if config.move_existing:
            relocator = ExistingFileRelocator(
                self.operations,
                config.move_existing,
                evaluator=evaluator,
                separator=config.separator,
            )
        self.resolver = ConflictResolver(self.operations, config.file_exist, relocator)

        self.done_file_emitter: DoneFileEmitter | None = None
        if config.done_file_name:
            self.done_file_emitter = DoneFileEmitter(
                self.operations, config.done_file_name, config.separator
            )
            # Surface unsupported placeholders at setup rather than per call
            self.done_file_emitter.done_file_for("probe.txt")

    def add_event_sink(self, sink: EventSink) -> None:
        self._event_sinks.append(sink)

    def publish(self, request: PublishRequest) -> PublishResult:
        """Publish one payload.

        Args:
            request: Target, payload and optional predecessor

        Returns:
            PublishResult with status completed, skipped, partial or failed
        """
        bound_logger = self._logger.bind(
            request_id=request.request_id,
            target=str(request.target),
            policy=self.config.file_exist.value,
            temp_mode=self.config.writes_via_temp,
            eager_delete=self.config.eager_delete_target_file,
        )
        run = _PublishRun(request, bound_logger, self._event_sinks)
        run.transition(PublishState.START)

        try:
            check_predecessor(
                self.operations,
                only_path(run.target),
                request.predecessor,
                separator=self.config.separator,
            )
            naming = self.config.temp_naming
            if naming is None:
                action = self._write_direct(run)
            else:
                action = self._write_via_temp(run, naming)
        except SeqFileError as e:
            return self._abort(run, e, PublishStatus.FAILED)
        except Exception as e:
            failure = _operation_failure(e, run.temp_path or run.target)
            return self._abort(run, failure, PublishStatus.FAILED)

        if action is ConflictAction.SKIP_SILENTLY:
            run.transition(PublishState.SKIPPED, temp_path=run.temp_path)
            bound_logger.info("publish.skipped", reason="target exists")
            return PublishResult(
                target=request.target,
                status=PublishStatus.SKIPPED,
                temp_path=self._as_path(run.temp_path),
                events=run.events,
            )

        done_file: str | None = None
        if self.done_file_emitter is not None:
            run.transition(PublishState.DONE_FILE_WRITE)
            try:
                done_file = self.done_file_emitter.emit(run.target)
            except SeqFileError as e:
                return self._abort(
                    run, e, PublishStatus.PARTIAL, produced_path=run.target
                )
            except Exception as e:
                done_path = self.done_file_emitter.done_file_for(run.target)
                return self._abort(
                    run,
                    _operation_failure(e, done_path),
                    PublishStatus.PARTIAL,
                    produced_path=run.target,
                )

        run.transition(
            PublishState.COMPLETE, produced_path=run.target, done_file=done_file
        )
        bound_logger.info(
            "publish.completed",
            produced_path=run.target,
            temp_path=run.temp_path,
            done_file=done_file,
        )
        return PublishResult(
            target=request.target,
            status=PublishStatus.COMPLETED,
            produced_path=Path(run.target),
            temp_path=self._as_path(run.temp_path),
            done_file=self._as_path(done_file),
            events=run.events,
            headers={FILE_NAME_PRODUCED_HEADER: run.target},
        )

    def _write_direct(self, run: _PublishRun) -> ConflictAction:
        run.transition(PublishState.PRE_CHECK)
        action = self.resolver.apply(run.target)
        if action is ConflictAction.SKIP_SILENTLY:
            return action

        append = self.config.file_exist is ConflictPolicy.APPEND
        run.transition(PublishState.WRITING, path=run.target, append=append)
        self._write(run.target, run.request.payload, append=append)
        return action

    def _write_via_temp(
        self, run: _PublishRun, naming: TempNaming
    ) -> ConflictAction:
        temp_target = create_temp_file_name(
            run.target,
            naming,
            separator=self.config.separator,
            evaluator=self.evaluator,
        )
        run.temp_path = temp_target
        eager = self.config.eager_delete_target_file
        checks = self.resolver.checks_existence

        run.transition(PublishState.PRE_CHECK, temp_path=temp_target, eager=eager)
        action = ConflictAction.PROCEED
        if eager:
            action = self.resolver.apply(run.target)
            if action is ConflictAction.SKIP_SILENTLY:
                return action

        if checks and self.operations.exists(temp_target):
            if not self.operations.delete(temp_target):
                raise CleanupFailure(temp_target)

        run.transition(PublishState.WRITING, path=temp_target, append=False)
        self._write(temp_target, run.request.payload)

        if not eager:
            run.transition(PublishState.POST_CHECK)
            # Ignore and Fail leave the temp file behind. Move relocates in lazy
            # mode as well, not only Ignore, Fail and Override.
            action = self.resolver.apply(run.target)
            if action is ConflictAction.SKIP_SILENTLY:
                return action

        run.transition(PublishState.RENAMING, src=temp_target, dst=run.target)
        if not self.operations.rename(temp_target, run.target):
            raise RenameFailure(temp_target, run.target)
        return action

    def _write(self, path: str, payload: Any, *, append: bool = False) -> None:
        try:
            self.operations.write(path, payload, append=append)
        except SeqFileError:
            raise
        except Exception as e:
            raise WriteFailure(path, str(e)) from e

    def _abort(
        self,
        run: _PublishRun,
        error: SeqFileError,
        status: PublishStatus,
        *,
        produced_path: str | None = None,
    ) -> PublishResult:
        failed_state = run.state
        run.transition(
            PublishState.ABORTED,
            failed_state=failed_state.value,
            error=error.error_code,
        )

        if status is PublishStatus.PARTIAL:
            log = run.logger.warning
        else:
            log = run.logger.error
        log(
            f"publish.{status.value}",
            failed_state=failed_state.value,
            error=error.error_code,
            reason=str(error),
            temp_path=run.temp_path,
        )

        headers: dict[str, str] = {}
        if produced_path is not None:
            headers[FILE_NAME_PRODUCED_HEADER] = produced_path

        result = PublishResult(
            target=run.request.target,
            status=status,
            produced_path=self._as_path(produced_path),
            temp_path=self._as_path(run.temp_path),
            error=error.to_dict(),
            events=run.events,
            headers=headers,
        ).with_exception(error)

        if self._on_failure is not None:
            self._on_failure(run.request, result)
        return result

    @staticmethod
    def _as_path(path: str | None) -> Path | None:
        return Path(path) if path is not None else None


def publish_file(
    target: str | Path,
    payload: Any,
    config: PublisherConfig | None = None,
    *,
    previous_file_name: str | None = None,
    operations: FileOperations | None = None,
) -> PublishResult:
    """Publish a single payload with a one-off publisher.

    Args:
        target: Final target path
        payload: bytes, str, binary file object or source Path
        config: Publisher configuration (defaults: Override, direct write)
        previous_file_name: File that must be absent before writing
        operations: File operations; defaults to the local filesystem

    Returns:
        PublishResult for the call
    """
    publisher = SequentialFilePublisher(config or PublisherConfig(), operations)
    request = PublishRequest(
        target=Path(target), payload=payload, previous_file_name=previous_file_name
    )
    return publisher.publish(request)
