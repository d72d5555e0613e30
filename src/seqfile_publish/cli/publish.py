"""CLI commands for publishing files and checking publish order."""

from __future__ import annotations

import importlib
import json
import uuid
from pathlib import Path
from typing import TYPE_CHECKING, Annotated, Any

if TYPE_CHECKING:  # pragma: no cover - typing only
    import typer
    from typer import Typer as TyperType
else:  # pragma: no cover - runtime fallback for typing
    typer = importlib.import_module("typer")
    TyperType = Any

from rich.console import Console

from seqfile_publish.core.errors import ConfigurationError, SequenceViolation
from seqfile_publish.core.schemas import PublishRequest, PublishResult, PublishStatus
from seqfile_publish.core.settings import load_config_from_env, resolve_journal_dir
from seqfile_publish.fs.journal import PublishJournal
from seqfile_publish.fs.operations import LocalFileOperations
from seqfile_publish.fs.paths import only_path
from seqfile_publish.publish.gate import check_predecessor
from seqfile_publish.publish.publisher import SequentialFilePublisher
from seqfile_publish.utils.logging import configure_logging

app: TyperType = typer.Typer(help="Publish files in order, crash-safe.")

EXIT_FAILED = 1
EXIT_PARTIAL = 2

FileExistOption = Annotated[
    str | None,
    typer.Option(
        "--file-exist",
        help="Policy for an existing target: Ignore, Fail, Override, Move, "
        "TryRename or Append.",
    ),
]
TempPrefixOption = Annotated[
    str | None,
    typer.Option("--temp-prefix", help="Write to <prefix><name> first, then rename."),
]
TempFileNameOption = Annotated[
    str | None,
    typer.Option("--temp-file-name", help="Template for the temporary file name."),
]
EagerDeleteOption = Annotated[
    bool | None,
    typer.Option(
        "--eager-delete/--no-eager-delete",
        help="Resolve an existing target before (eager) or after writing the "
        "temp file.",
    ),
]
MoveExistingOption = Annotated[
    str | None,
    typer.Option("--move-existing", help="Template for relocating the target."),
]
DoneFileNameOption = Annotated[
    str | None,
    typer.Option("--done-file-name", help="Pattern of the empty done file."),
]
PreviousOption = Annotated[
    str | None,
    typer.Option("--previous", help="File that must be gone before publishing."),
]
JournalDirOption = Annotated[
    Path | None,
    typer.Option("--journal-dir", help="Directory to write a publish journal to."),
]
JsonFlag = Annotated[
    bool,
    typer.Option("--json", help="Emit the result as JSON."),
]
VerboseFlag = Annotated[
    bool,
    typer.Option("--verbose", help="Log every state transition."),
]

_console = Console()


def _exit_code(result: PublishResult) -> int:
    if result.status is PublishStatus.PARTIAL:
        return EXIT_PARTIAL
    if result.status is PublishStatus.FAILED:
        return EXIT_FAILED
    return 0


def _show_result(result: PublishResult) -> None:
    name = result.target.name
    if result.status is PublishStatus.COMPLETED:
        line = f"✅ [green]PUBLISHED[/green] {result.produced_path}"
        if result.done_file is not None:
            line += f" (done file: {result.done_file.name})"
        _console.print(line)
    elif result.status is PublishStatus.SKIPPED:
        _console.print(f"⚠️ [yellow]SKIPPED[/yellow] {name} (target exists)")
    elif result.status is PublishStatus.PARTIAL:
        reason = result.error["message"] if result.error else "unknown"
        _console.print(
            f"⚠️ [yellow]PARTIAL[/yellow] {name} published, done file failed "
            f"({reason})"
        )
    else:
        reason = result.error["message"] if result.error else "unknown"
        _console.print(f"❌ [red]FAILED[/red] {name} ({reason})")


def publish_command(
    source: Annotated[Path, typer.Argument(help="File whose bytes are published.")],
    target: Annotated[Path, typer.Argument(help="Final target path.")],
    file_exist: FileExistOption = None,
    temp_prefix: TempPrefixOption = None,
    temp_file_name: TempFileNameOption = None,
    eager_delete: EagerDeleteOption = None,
    move_existing: MoveExistingOption = None,
    done_file_name: DoneFileNameOption = None,
    previous: PreviousOption = None,
    journal_dir: JournalDirOption = None,
    json_output: JsonFlag = False,
    verbose: VerboseFlag = False,
) -> None:
    """Publish SOURCE's content under TARGET."""

    configure_logging(verbose=verbose, json_output=json_output, quiet=not verbose)

    try:
        config = load_config_from_env(
            file_exist=file_exist,
            temp_prefix=temp_prefix,
            temp_file_name=temp_file_name,
            eager_delete_target_file=eager_delete,
            move_existing=move_existing,
            done_file_name=done_file_name,
        )
        publisher = SequentialFilePublisher(
            config, LocalFileOperations(charset=config.charset)
        )
    except ConfigurationError as exc:
        typer.secho(f"Invalid configuration: {exc}", err=True, fg=typer.colors.RED)
        raise typer.Exit(code=EXIT_FAILED) from exc

    if not source.is_file():
        typer.secho(f"Source file not found: {source}", err=True, fg=typer.colors.RED)
        raise typer.Exit(code=EXIT_FAILED)

    request = PublishRequest(
        target=target, payload=source, previous_file_name=previous
    )

    journal_root = resolve_journal_dir(journal_dir)
    if journal_root is not None:
        with PublishJournal(
            uuid.uuid4().hex, journal_root, config=config
        ) as journal:
            publisher.add_event_sink(journal.record)
            result = publisher.publish(request)
    else:
        result = publisher.publish(request)

    if json_output:
        typer.echo(json.dumps(result.model_dump(mode="json"), indent=2))
    else:
        _show_result(result)

    code = _exit_code(result)
    if code:
        raise typer.Exit(code=code)


def check_command(
    target: Annotated[Path, typer.Argument(help="Target about to be published.")],
    previous: Annotated[
        str, typer.Option("--previous", help="File that must be gone.")
    ],
) -> None:
    """Check whether TARGET may be published yet."""

    try:
        check_predecessor(LocalFileOperations(), only_path(str(target)), previous)
    except SequenceViolation as exc:
        typer.secho(str(exc), err=True, fg=typer.colors.YELLOW)
        raise typer.Exit(code=EXIT_FAILED) from exc

    typer.secho(f"Ready to publish: {target}", fg=typer.colors.GREEN)


app.command("publish")(publish_command)
app.command("check")(check_command)


def run_cli(args: list[str] | None = None) -> None:
    app(args=args)
