"""Aggregated outcome of a whole test run."""

from collections.abc import Sequence
from dataclasses import dataclass

from testbrain.models.result import TestResult

NOT_RANDOMIZED_SEED = -1


@dataclass(frozen=True, kw_only=True)
class RunSummary:
    """Results partitioned by outcome, in execution order."""

    passed: Sequence[TestResult]
    skipped: Sequence[TestResult]
    failed: Sequence[TestResult]
    seed: int
    in_order: bool

    @property
    def passed_count(self) -> int:
        return len(self.passed)

    @property
    def skipped_count(self) -> int:
        return len(self.skipped)

    @property
    def failed_count(self) -> int:
        return len(self.failed)

    @property
    def total_count(self) -> int:
        return self.passed_count + self.skipped_count + self.failed_count

    @property
    def non_passing(self) -> Sequence[TestResult]:
        return [*self.skipped, *self.failed]

    @property
    def all_passed(self) -> bool:
        return not self.failed
