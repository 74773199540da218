"""Resolve run options from CLI flags, environment and a config file."""

import logging
import os
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from testbrain.errors import ConfigurationError
from testbrain.models.options import RunOptions

log = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = Path("~/.test-brain.yaml")
ENV_PREFIX = "TESTBRAIN_"

# Config file / environment key -> RunOptions field
OPTION_KEYS: Mapping[str, str] = {
    "timeout": "timeout",
    "json": "json_output",
    "verbose": "verbose",
    "include": "include",
    "exclude": "exclude",
    "in_order": "in_order",
    "seed": "seed",
    "dry_run": "dry_run",
}


def resolve_options(
    targets: Sequence[str],
    cli_values: Mapping[str, Any],
    *,
    config_file: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> RunOptions:
    """Merge every configuration layer into a validated RunOptions.

    Precedence, highest first: CLI flags, ``TESTBRAIN_*`` environment
    variables, the YAML config file, built-in defaults. ``None`` values in
    ``cli_values`` mean the flag was not given.

    Raises:
        ConfigurationError: If any layer holds an invalid value, or in-order
            execution is combined with an explicit seed

    """
    values: dict[str, Any] = {}
    values.update(load_config_file(config_file))
    values.update(load_env_config(os.environ if environ is None else environ))
    values.update({k: v for k, v in cli_values.items() if v is not None})

    try:
        options = RunOptions(targets=list(targets), **values)
    except ValidationError as e:
        errors = "; ".join(
            f"{'.'.join(str(loc) for loc in error['loc'])}: {error['msg']}"
            for error in e.errors()
        )
        raise ConfigurationError(f"Invalid configuration: {errors}") from e

    if options.in_order and options.seed is not None:
        raise ConfigurationError("Cannot use a random seed when running tests in order")
    return options


def load_config_file(path: Path | None) -> dict[str, Any]:
    """Load option values from a YAML config file.

    Without an explicit ``path`` the default ``~/.test-brain.yaml`` is read
    if it exists.
    """
    explicit = path is not None
    config_path = (path or DEFAULT_CONFIG_FILE).expanduser()

    if not config_path.is_file():
        if explicit:
            raise ConfigurationError(f"Config file not found: {config_path}")
        return {}

    try:
        with config_path.open(encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigurationError(f"Cannot read config file {config_path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {config_path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Config file {config_path} must be a mapping, got {type(data).__name__}"
        )

    log.info("Using config file: %s", config_path)
    values: dict[str, Any] = {}
    for key, value in data.items():
        normalized = str(key).replace("-", "_").lower()
        if normalized not in OPTION_KEYS:
            raise ConfigurationError(f"Unknown option '{key}' in {config_path}")
        values[OPTION_KEYS[normalized]] = value
    return values


def load_env_config(environ: Mapping[str, str]) -> dict[str, Any]:
    """Collect option values from ``TESTBRAIN_*`` environment variables."""
    values: dict[str, Any] = {}
    for key, field_name in OPTION_KEYS.items():
        raw = environ.get(f"{ENV_PREFIX}{key.upper()}")
        if raw is not None and raw.strip():
            values[field_name] = raw.strip()
    return values
