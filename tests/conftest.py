"""Fixtures shared by every test suite."""

import io
import os
from pathlib import Path

import pytest

from testbrain.sinks import OutputSinks


@pytest.fixture(autouse=True)
def _isolate_configuration(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Keep the user's config file and TESTBRAIN_* variables out of tests."""
    monkeypatch.setattr(
        "testbrain.config.DEFAULT_CONFIG_FILE", tmp_path / "no-such-config.yaml"
    )
    for name in list(os.environ):
        if name.startswith("TESTBRAIN_"):
            monkeypatch.delenv(name)


@pytest.fixture
def sinks() -> OutputSinks:
    """Sinks writing to in-memory buffers."""
    return OutputSinks(out=io.StringIO(), err=io.StringIO())
