"""Publish journal writer.

This module writes publish journals in JSONL format: one header line with the
publisher configuration, then one line per state transition. A journal lets
an operator reconstruct what an interrupted run left behind (a stray temp
file, a deleted target that was never replaced).
"""

import json
import os
import platform
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from seqfile_publish.core.constants import JOURNAL_DIR, JOURNAL_SCHEMA_VERSION
from seqfile_publish.core.schemas import PublisherConfig, PublishEvent
from seqfile_publish.utils.logging import debug


class PublishJournal:
    """Writes publish journals in JSONL format.

    Each journal file contains:
    - Header line with metadata (type: "header")
    - One JSON object per state transition (type: "event")
    """

    def __init__(
        self,
        journal_id: str,
        root: Path,
        config: PublisherConfig | None = None,
    ) -> None:
        """Initialize journal writer.

        Args:
            journal_id: Unique identifier for this journal
            root: Directory under which ``.seqfile/journal`` is created
            config: Publisher configuration recorded in the header
        """
        self.journal_id = journal_id
        self.root = root.resolve()
        self.config = config
        self._journal_file: Any = None
        self._header_written = False

        journal_dir = self.root / JOURNAL_DIR
        try:
            journal_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise OSError(
                f"Cannot create journal directory {journal_dir}: {e}. "
                "Ensure the directory is writable or choose a different root."
            ) from e

        self.path = journal_dir / f"{journal_id}.jsonl"
        debug(f"Publish journal will be written to: {self.path}")

    def write_header(self) -> None:
        """Write journal header with session metadata."""
        if self._header_written:
            return

        header: dict[str, Any] = {
            "type": "header",
            "schema_version": JOURNAL_SCHEMA_VERSION,
            "journal_id": self.journal_id,
            "generated_at": datetime.now(UTC).isoformat(),
            "root": str(self.root),
            "config": self.config.model_dump(mode="json") if self.config else None,
            "system": {
                "os": platform.system(),
                "python": platform.python_version(),
            },
        }

        self._write_line(header)
        self._header_written = True

    def record(self, event: PublishEvent) -> None:
        """Append a state transition to the journal.

        Args:
            event: Transition emitted by the publisher
        """
        if not self._header_written:
            self.write_header()

        entry = {"type": "event", **event.model_dump(mode="json")}
        self._write_line(entry)

    __call__ = record

    def _write_line(self, data: dict[str, Any]) -> None:
        """Write a JSON line to the journal file."""
        if self._journal_file is None:
            self._journal_file = open(self.path, "a", encoding="utf-8")

        json_line = json.dumps(data, ensure_ascii=False, separators=(",", ":"))
        self._journal_file.write(json_line + "\n")
        self._journal_file.flush()
        os.fsync(self._journal_file.fileno())

    def close(self) -> None:
        """Close the journal file."""
        if self._journal_file is not None:
            self._journal_file.close()
            self._journal_file = None
        debug(f"Closed journal file: {self.path}")

    def __enter__(self) -> "PublishJournal":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
