"""Exceptions that abort a whole test run."""

from pathlib import Path


class TestbrainError(Exception):
    """Base class for errors that stop testbrain before any test runs."""

    __test__ = False


class ConfigurationError(TestbrainError):
    """Raised when options, patterns or config files are invalid."""


class DiscoveryError(TestbrainError):
    """Raised when a target path cannot be read or walked."""

    def __init__(self, path: str | Path, reason: str) -> None:
        super().__init__(f"Error reading test target {path}: {reason}")
        self.path = str(path)
        self.reason = reason
