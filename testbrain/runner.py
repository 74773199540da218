"""Test runner coordinating discovery, ordering, execution and reporting."""

import logging
from dataclasses import dataclass, field

from testbrain.aggregate import aggregate_results
from testbrain.discovery import discover_test_scripts
from testbrain.models.options import RunOptions
from testbrain.models.result import TestResult, TestScript
from testbrain.models.summary import RunSummary
from testbrain.ordering import generate_seed, order_test_scripts
from testbrain.platform import PlatformSupport, get_platform_support
from testbrain.process import run_test_script
from testbrain.reporting import Reporter, create_reporter
from testbrain.sinks import OutputSinks

log = logging.getLogger(__name__)

EXIT_SUCCESS = 0
EXIT_TESTS_FAILED = 1


@dataclass(frozen=True, kw_only=True)
class RunOutcome:
    """What a run produced: the summary (None for dry runs) and exit code."""

    summary: RunSummary | None
    exit_code: int
    order: list[str] = field(default_factory=list)


@dataclass(frozen=True, kw_only=True)
class TestRunner:
    """Runs every discovered test script, one at a time.

    Configuration and discovery errors propagate to the caller; anything
    that goes wrong with an individual test is recorded in its result and
    the remaining tests still run.
    """

    __test__ = False

    options: RunOptions
    sinks: OutputSinks = field(default_factory=OutputSinks.standard)
    platform: PlatformSupport = field(default_factory=get_platform_support)

    async def run(self) -> RunOutcome:
        """Discover, order and run the tests, then report the results.

        Returns:
            The run outcome; its exit code is 0 when every test passed or
            nothing was executed, 1 otherwise.

        Raises:
            ConfigurationError: If an include/exclude pattern is invalid
            DiscoveryError: If a target cannot be read

        """
        options = self.options
        seed = options.seed if options.seed is not None else generate_seed()
        reporter = create_reporter(
            self.sinks, json_output=options.json_output, verbose=options.verbose
        )

        discovered = discover_test_scripts(
            options.targets, options.include, options.exclude
        )
        scripts = order_test_scripts(
            discovered.scripts, in_order=options.in_order, seed=seed
        )
        order = [script.relative_path for script in scripts]
        shuffle_seed = None if options.in_order else seed
        log.debug("Test root %s, order %s", discovered.root, order)

        reporter.run_started(len(scripts), shuffle_seed)
        if options.dry_run:
            reporter.dry_run(discovered.root, order, shuffle_seed)
            return RunOutcome(summary=None, exit_code=EXIT_SUCCESS, order=order)

        results = await self._run_all(scripts, reporter)
        summary = aggregate_results(results, seed=seed, in_order=options.in_order)
        reporter.run_finished(summary)

        log.info(
            "Run complete: passed=%d skipped=%d failed=%d",
            summary.passed_count,
            summary.skipped_count,
            summary.failed_count,
        )
        exit_code = EXIT_SUCCESS if summary.all_passed else EXIT_TESTS_FAILED
        return RunOutcome(summary=summary, exit_code=exit_code, order=order)

    async def _run_all(
        self, scripts: list[TestScript], reporter: Reporter
    ) -> list[TestResult]:
        # Live streaming would corrupt the JSON document on stdout.
        stream_live = self.options.verbose and not self.options.json_output
        results: list[TestResult] = []
        for index, script in enumerate(scripts, start=1):
            reporter.test_started(script.relative_path, index, len(scripts))
            result = await run_test_script(
                script,
                timeout=self.options.timeout,
                verbose=stream_live,
                sinks=self.sinks,
                platform=self.platform,
            )
            log.debug(
                "Test completed: file=%s outcome=%s exit_code=%d",
                result.test_file,
                result.outcome,
                result.exit_code,
            )
            reporter.test_finished(result)
            results.append(result)
        return results
