"""CLI entrypoints for seqfile-publish."""

from seqfile_publish.cli.publish import app

__all__ = ["app"]
