"""Environment-driven publisher configuration."""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from seqfile_publish.core.constants import (
    ENV_CHARSET,
    ENV_DONE_FILE_NAME,
    ENV_EAGER_DELETE,
    ENV_FILE_EXIST,
    ENV_JOURNAL_DIR,
    ENV_MOVE_EXISTING,
    ENV_TEMP_FILE_NAME,
    ENV_TEMP_PREFIX,
    TRUTHY_VALUES,
)
from seqfile_publish.core.schemas import PublisherConfig, TempNaming

__all__ = ["load_config_from_env", "resolve_journal_dir"]


def _env_bool(value: str) -> bool:
    return value.strip().lower() in TRUTHY_VALUES


def load_config_from_env(
    environ: Mapping[str, str] | None = None, **overrides: Any
) -> PublisherConfig:
    """Build a PublisherConfig from SEQFILE_* environment variables.

    Args:
        environ: Mapping to read from; defaults to ``os.environ``
        **overrides: Field values that win over the environment. A value of
            None means "not given" and leaves the environment value in place.

    Returns:
        Validated PublisherConfig

    Raises:
        ConfigurationError: If the combined options are incompatible
    """
    env = os.environ if environ is None else environ
    values: dict[str, Any] = {}

    if env.get(ENV_FILE_EXIST):
        values["file_exist"] = env[ENV_FILE_EXIST]
    if env.get(ENV_EAGER_DELETE):
        values["eager_delete_target_file"] = _env_bool(env[ENV_EAGER_DELETE])
    if env.get(ENV_MOVE_EXISTING):
        values["move_existing"] = env[ENV_MOVE_EXISTING]
    if env.get(ENV_DONE_FILE_NAME):
        values["done_file_name"] = env[ENV_DONE_FILE_NAME]
    if env.get(ENV_CHARSET):
        values["charset"] = env[ENV_CHARSET]

    temp_prefix = overrides.pop("temp_prefix", None)
    temp_file_name = overrides.pop("temp_file_name", None)
    if not (temp_prefix or temp_file_name):
        temp_prefix = env.get(ENV_TEMP_PREFIX)
        temp_file_name = env.get(ENV_TEMP_FILE_NAME)
    if temp_prefix or temp_file_name:
        values["temp_naming"] = TempNaming(
            prefix=temp_prefix or None, pattern=temp_file_name or None
        )

    values.update({key: value for key, value in overrides.items() if value is not None})
    return PublisherConfig(**values)


def resolve_journal_dir(
    journal_dir: str | Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> Path | None:
    """Resolve where publish journals go, if anywhere.

    Args:
        journal_dir: Explicit directory; wins over SEQFILE_JOURNAL_DIR

    Returns:
        Expanded directory path, or None when journaling is off
    """
    env = os.environ if environ is None else environ
    chosen: str | Path | None = journal_dir or env.get(ENV_JOURNAL_DIR)
    if not chosen:
        return None
    return Path(chosen).expanduser()
