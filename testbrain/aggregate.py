"""Partition test results into a run summary."""

from collections.abc import Sequence

from testbrain.models.result import TestResult
from testbrain.models.summary import NOT_RANDOMIZED_SEED, RunSummary


def aggregate_results(
    results: Sequence[TestResult], *, seed: int, in_order: bool
) -> RunSummary:
    """Split ``results`` by outcome, keeping execution order in each bucket.

    Errored results count as failures. The reported seed is
    ``NOT_RANDOMIZED_SEED`` when the run was not shuffled.
    """
    passed: list[TestResult] = []
    skipped: list[TestResult] = []
    failed: list[TestResult] = []

    for result in results:
        match result.outcome:
            case "passed":
                passed.append(result)
            case "skipped":
                skipped.append(result)
            case "failed" | "errored":
                failed.append(result)

    return RunSummary(
        passed=passed,
        skipped=skipped,
        failed=failed,
        seed=NOT_RANDOMIZED_SEED if in_order else seed,
        in_order=in_order,
    )
