"""Fixtures for module tests running real shell scripts."""

import stat
from pathlib import Path
from typing import Protocol

import pytest


class WriteScriptFn(Protocol):
    """Protocol for test script creation function."""

    def __call__(self, name: str, body: str, *, executable: bool = True) -> Path:
        """Write a /bin/sh script below the test root and return its path."""


@pytest.fixture
def scripts_root(tmp_path: Path) -> Path:
    """Directory the scripts are written to."""
    root = tmp_path / "tests"
    root.mkdir()
    return root


@pytest.fixture
def write_script(scripts_root: Path) -> WriteScriptFn:
    """Return a function to create shell scripts in the test root."""

    def _write(name: str, body: str, *, executable: bool = True) -> Path:
        path = scripts_root / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(f"#!/bin/sh\n{body}\n")
        if executable:
            path.chmod(path.stat().st_mode | stat.S_IXUSR)
        return path

    return _write

