"""Tests for configuration resolution."""

from pathlib import Path

import pytest

from testbrain.config import load_config_file, load_env_config, resolve_options
from testbrain.errors import ConfigurationError
from testbrain.models.options import DEFAULT_TIMEOUT


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    return tmp_path / "test-brain.yaml"


def test_defaults() -> None:
    """Uses built-in defaults when nothing is configured."""
    options = resolve_options([], {}, environ={})

    assert options.targets == (".",)
    assert options.timeout == DEFAULT_TIMEOUT
    assert options.include == r"_test\.sh$"
    assert options.exclude == "^$"
    assert not options.in_order
    assert options.seed is None
    assert not options.json_output
    assert not options.verbose
    assert not options.dry_run


def test_default_config_file_is_read(
    monkeypatch: pytest.MonkeyPatch, config_file: Path
) -> None:
    """Reads the default config file when it exists."""
    config_file.write_text("timeout: 12\nverbose: true\n")
    monkeypatch.setattr("testbrain.config.DEFAULT_CONFIG_FILE", config_file)

    options = resolve_options(["tests"], {}, environ={})

    assert options.timeout == 12.0
    assert options.verbose
    assert options.targets == ("tests",)


def test_precedence(config_file: Path) -> None:
    """CLI flags beat environment variables, which beat the config file."""
    config_file.write_text("timeout: 10\ninclude: from-file\nexclude: from-file\n")
    environ = {"TESTBRAIN_TIMEOUT": "20", "TESTBRAIN_INCLUDE": "from-env"}

    options = resolve_options(
        [],
        {"timeout": 30.0, "include": None, "exclude": None},
        config_file=config_file,
        environ=environ,
    )

    assert options.timeout == 30.0
    assert options.include == "from-env"
    assert options.exclude == "from-file"


def test_env_values_are_coerced() -> None:
    """Parses booleans and numbers given as environment strings."""
    options = resolve_options(
        [],
        {},
        environ={
            "TESTBRAIN_JSON": "true",
            "TESTBRAIN_SEED": "-5",
            "TESTBRAIN_DRY_RUN": "1",
            "TESTBRAIN_IN_ORDER": "false",
        },
    )

    assert options.json_output
    assert options.seed == -5
    assert options.dry_run
    assert not options.in_order


def test_invalid_env_value() -> None:
    """Reports values that cannot be parsed."""
    with pytest.raises(ConfigurationError, match="Invalid configuration: seed"):
        resolve_options([], {}, environ={"TESTBRAIN_SEED": "abc"})


def test_non_positive_timeout() -> None:
    """Rejects timeouts that are not positive."""
    with pytest.raises(ConfigurationError, match="timeout"):
        resolve_options([], {"timeout": 0.0}, environ={})


@pytest.mark.parametrize("value", ["inf", "nan"])
def test_non_finite_timeout(value: str) -> None:
    """Rejects timeouts that are not finite numbers."""
    with pytest.raises(ConfigurationError, match="timeout"):
        resolve_options([], {}, environ={"TESTBRAIN_TIMEOUT": value})

    with pytest.raises(ConfigurationError, match="timeout"):
        resolve_options([], {"timeout": float(value)}, environ={})


def test_seed_out_of_range() -> None:
    """Rejects seeds that do not fit in a signed 64-bit integer."""
    with pytest.raises(ConfigurationError, match="seed"):
        resolve_options([], {"seed": 2**63}, environ={})


def test_in_order_with_seed() -> None:
    """Rejects an explicit seed combined with in-order execution."""
    with pytest.raises(ConfigurationError, match="random seed"):
        resolve_options([], {"in_order": True, "seed": 42}, environ={})


def test_in_order_with_seed_across_layers(config_file: Path) -> None:
    """Checks the conflict after merging all layers."""
    config_file.write_text("in-order: true\n")

    with pytest.raises(ConfigurationError, match="random seed"):
        resolve_options(
            [], {}, config_file=config_file, environ={"TESTBRAIN_SEED": "7"}
        )


def test_in_order_disabled_with_seed() -> None:
    """Accepts a seed when in-order is explicitly off."""
    environ = {"TESTBRAIN_IN_ORDER": "false", "TESTBRAIN_SEED": "7"}

    options = resolve_options([], {}, environ=environ)

    assert options.seed == 7


def test_load_config_file_normalizes_keys(config_file: Path) -> None:
    """Accepts dashed keys and maps them to option names."""
    config_file.write_text("in-order: true\ndry_run: true\njson: false\n")

    assert load_config_file(config_file) == {
        "in_order": True,
        "dry_run": True,
        "json_output": False,
    }


def test_load_config_file_empty(config_file: Path) -> None:
    """Treats an empty file as no configuration."""
    config_file.write_text("")

    assert load_config_file(config_file) == {}


def test_load_config_file_missing_default() -> None:
    """Ignores a missing default config file."""
    assert load_config_file(None) == {}


def test_load_config_file_missing_explicit(tmp_path: Path) -> None:
    """Fails when an explicitly given config file does not exist."""
    with pytest.raises(ConfigurationError, match="Config file not found"):
        load_config_file(tmp_path / "missing.yaml")


def test_load_config_file_unknown_key(config_file: Path) -> None:
    """Rejects keys that are not options."""
    config_file.write_text("timeout: 5\nparallel: 4\n")

    with pytest.raises(ConfigurationError, match="Unknown option 'parallel'"):
        load_config_file(config_file)


def test_load_config_file_invalid_yaml(config_file: Path) -> None:
    """Reports YAML syntax errors."""
    config_file.write_text("timeout: [5\n")

    with pytest.raises(ConfigurationError, match="Invalid YAML"):
        load_config_file(config_file)


def test_load_config_file_not_a_mapping(config_file: Path) -> None:
    """Rejects documents that are not mappings."""
    config_file.write_text("- timeout\n- 5\n")

    with pytest.raises(ConfigurationError, match="must be a mapping"):
        load_config_file(config_file)


def test_load_env_config_ignores_blank_and_foreign_values() -> None:
    """Only reads non-empty TESTBRAIN_* option variables."""
    environ = {
        "TESTBRAIN_VERBOSE": "  ",
        "TESTBRAIN_EXCLUDE": " skip ",
        "TESTBRAIN_UNRELATED": "x",
        "TIMEOUT": "3",
    }

    assert load_env_config(environ) == {"exclude": "skip"}
