"""Models for test execution results."""

from dataclasses import dataclass
from pathlib import Path
from typing import Literal

UNKNOWN_EXIT_CODE = -1
SKIP_EXIT_CODE = 99

TestOutcome = Literal["passed", "skipped", "failed", "errored"]


@dataclass(frozen=True, kw_only=True)
class TestScript:
    """A discovered test script.

    ``relative_path`` is the report key, always using forward slashes.
    """

    __test__ = False

    relative_path: str
    absolute_path: Path


@dataclass(frozen=True, kw_only=True)
class TestResult:
    """Result of a single test script execution.

    ``output`` holds the combined stdout/stderr of the script when it was
    buffered, and is None when the output was streamed live.
    """

    __test__ = False

    test_file: str
    outcome: TestOutcome
    exit_code: int
    output: str | None = None

    @property
    def is_failure(self) -> bool:
        return self.outcome in ("failed", "errored")
