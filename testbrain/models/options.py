"""Options controlling a single test run."""

from collections.abc import Sequence

from pydantic import Field, field_validator

from testbrain.models.base import Model

DEFAULT_TIMEOUT = 300.0
DEFAULT_INCLUDE = r"_test\.sh$"
DEFAULT_EXCLUDE = r"^$"

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1


class RunOptions(Model):
    """Resolved, immutable configuration for one run of the engine."""

    targets: Sequence[str] = Field(
        default=(".",), description="Files or directories to search for tests"
    )
    include: str = Field(
        default=DEFAULT_INCLUDE,
        description="Regex a discovered file path must match to be run",
    )
    exclude: str = Field(
        default=DEFAULT_EXCLUDE,
        description="Regex excluding matching file paths",
    )
    timeout: float = Field(
        default=DEFAULT_TIMEOUT,
        gt=0,
        allow_inf_nan=False,
        description="Per-test timeout in seconds",
    )
    in_order: bool = Field(
        default=False, description="Run tests in lexicographic order"
    )
    seed: int | None = Field(
        default=None,
        ge=INT64_MIN,
        le=INT64_MAX,
        description="Shuffle seed (None means generate one at run start)",
    )
    json_output: bool = Field(default=False, description="Emit a JSON report")
    verbose: bool = Field(default=False, description="Stream test output live")
    dry_run: bool = Field(default=False, description="List tests without running")

    @field_validator("targets")
    @classmethod
    def _default_to_current_directory(cls, targets: Sequence[str]) -> Sequence[str]:
        return tuple(targets) if targets else (".",)
