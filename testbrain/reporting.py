"""Render run progress and results as text or JSON."""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass

from testbrain.models.report import (
    DryRunReport,
    FailedReportEntry,
    JsonReport,
    ReportEntry,
)
from testbrain.models.result import TestResult
from testbrain.models.summary import NOT_RANDOMIZED_SEED, RunSummary
from testbrain.sinks import OutputSinks


class Color:
    """ANSI color codes for terminal output."""

    GREEN = "\033[92m"
    RED = "\033[91m"
    YELLOW = "\033[93m"
    RESET = "\033[0m"
    BOLD = "\033[1m"


VERDICTS = {
    "passed": ("PASSED", Color.GREEN),
    "skipped": ("SKIPPED", Color.YELLOW),
    "failed": ("FAILED", Color.RED + Color.BOLD),
    "errored": ("FAILED", Color.RED + Color.BOLD),
}


@dataclass(frozen=True, kw_only=True)
class Reporter(ABC):
    """Receives run events and writes them to the output sinks."""

    sinks: OutputSinks

    def run_started(self, test_count: int, seed: int | None) -> None:
        """Announce the discovered tests; ``seed`` is None when not shuffled."""

    def test_started(self, test_file: str, index: int, total: int) -> None:
        """Announce test number ``index`` (1-based) of ``total``."""

    def test_finished(self, result: TestResult) -> None:
        """Report the verdict of a single test."""

    @abstractmethod
    def dry_run(self, root: str, order: Sequence[str], seed: int | None) -> None:
        """Report the tests a real run would execute, in order."""

    @abstractmethod
    def run_finished(self, summary: RunSummary) -> None:
        """Report the summary of the whole run."""


@dataclass(frozen=True, kw_only=True)
class TextReporter(Reporter):
    """Human readable progress, colored when writing to a terminal."""

    verbose: bool = False

    def run_started(self, test_count: int, seed: int | None) -> None:
        self.sinks.write_out(f"Found {test_count} test files\n")
        if seed is not None:
            self.sinks.write_out(f"Using seed: {seed}\n")

    def test_started(self, test_file: str, index: int, total: int) -> None:
        self.sinks.write_out(f"Running test {test_file} ({index}/{total})\n")

    def test_finished(self, result: TestResult) -> None:
        label, color = VERDICTS[result.outcome]
        verdict = self._paint(f"{label}: {result.test_file}", color)
        self.sinks.write_out(f"{verdict}\n\n")
        # Spawn errors never reach the live stream, so show them even when verbose.
        shown = not self.verbose or result.outcome == "errored"
        if result.is_failure and shown and result.output:
            output = result.output
            if not output.endswith("\n"):
                output += "\n"
            self.sinks.write_out(f"Test output:\n{output}")

    def dry_run(self, root: str, order: Sequence[str], seed: int | None) -> None:
        self.sinks.write_out(f"Test root: {root}\n")
        self.sinks.write_out("Test files:\n")
        for test_file in order:
            self.sinks.write_out(f"\t{test_file}\n")

    def run_finished(self, summary: RunSummary) -> None:
        line = (
            f"Tests complete: {summary.passed_count} Passed, "
            f"{summary.skipped_count} Skipped, {summary.failed_count} Failed"
        )
        color = Color.GREEN if summary.all_passed else Color.RED
        self.sinks.write_out(f"{self._paint(line, color + Color.BOLD)}\n\n")

        if summary.skipped:
            self.sinks.write_out(self._paint("  Skipped tests:", Color.YELLOW) + "\n")
            for result in summary.skipped:
                self.sinks.write_out(f"    {result.test_file}\n")
            self.sinks.write_out("\n")

        if summary.failed:
            heading = self._paint("  Failed tests:", Color.RED + Color.BOLD)
            self.sinks.write_out(f"{heading}\n")
            for result in summary.failed:
                self.sinks.write_out(
                    f"    {result.test_file} with exit code {result.exit_code}\n"
                )
            self.sinks.write_out("\n")

    def _paint(self, text: str, color: str) -> str:
        if not self.sinks.out_is_tty:
            return text
        return f"{color}{text}{Color.RESET}"


@dataclass(frozen=True, kw_only=True)
class JsonReporter(Reporter):
    """A single JSON document, written once the run is over."""

    def dry_run(self, root: str, order: Sequence[str], seed: int | None) -> None:
        report = DryRunReport(
            root=root,
            seed=NOT_RANDOMIZED_SEED if seed is None else seed,
            in_order=seed is None,
            tests=list(order),
        )
        self.sinks.write_out(report.model_dump_json(by_alias=True) + "\n")

    def run_finished(self, summary: RunSummary) -> None:
        report = build_json_report(summary)
        self.sinks.write_out(report.model_dump_json(by_alias=True) + "\n")


def build_json_report(summary: RunSummary) -> JsonReport:
    """Convert a run summary to its JSON document."""
    return JsonReport(
        passed=summary.passed_count,
        skipped=summary.skipped_count,
        failed=summary.failed_count,
        seed=summary.seed,
        in_order=summary.in_order,
        passed_list=[ReportEntry(filename=r.test_file) for r in summary.passed],
        skipped_list=[ReportEntry(filename=r.test_file) for r in summary.skipped],
        failed_list=[
            FailedReportEntry(filename=r.test_file, exitcode=r.exit_code)
            for r in summary.failed
        ],
    )


def create_reporter(
    sinks: OutputSinks, *, json_output: bool, verbose: bool
) -> Reporter:
    """Return the reporter matching the requested output mode."""
    if json_output:
        return JsonReporter(sinks=sinks)
    return TextReporter(sinks=sinks, verbose=verbose)
