"""JSON documents emitted by the reporters."""

from collections.abc import Sequence

from pydantic import Field

from testbrain.models.base import Model


class ReportEntry(Model):
    """A passed or skipped test."""

    filename: str = Field(..., description="Test path relative to the test root")


class FailedReportEntry(Model):
    """A failed test and its exit code."""

    filename: str = Field(..., description="Test path relative to the test root")
    exitcode: int = Field(..., description="Exit code, -1 when unknown")


class JsonReport(Model):
    """Summary of a completed run."""

    passed: int
    skipped: int
    failed: int
    seed: int = Field(..., description="Seed used for ordering, -1 when in order")
    in_order: bool = Field(..., alias="inOrder")
    passed_list: Sequence[ReportEntry] = Field(default_factory=list, alias="passedList")
    skipped_list: Sequence[ReportEntry] = Field(
        default_factory=list, alias="skippedList"
    )
    failed_list: Sequence[FailedReportEntry] = Field(
        default_factory=list, alias="failedList"
    )


class DryRunReport(Model):
    """Tests that would have been run."""

    root: str
    seed: int = Field(..., description="Seed used for ordering, -1 when in order")
    in_order: bool = Field(..., alias="inOrder")
    tests: Sequence[str] = Field(default_factory=list)
