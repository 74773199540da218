"""CLI entry point for the testbrain test runner."""

import argparse
import asyncio
import logging
import sys
from collections.abc import Sequence
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

from testbrain.config import resolve_options
from testbrain.errors import TestbrainError
from testbrain.models.options import RunOptions
from testbrain.runner import TestRunner
from testbrain.sinks import OutputSinks

EXIT_USAGE_ERROR = 2


def get_version() -> str:
    """Return the installed package version."""
    try:
        return version("testbrain")
    except PackageNotFoundError:
        return "0+unknown"


async def run(options: RunOptions, sinks: OutputSinks) -> int:
    """Run the tests described by ``options`` and return the exit code."""
    log = logging.getLogger("testbrain")
    runner = TestRunner(options=options, sinks=sinks)

    try:
        outcome = await runner.run()
    except TestbrainError as e:
        log.debug("Run aborted", exc_info=e)
        sinks.write_err(f"{e}\n")
        return EXIT_USAGE_ERROR

    return outcome.exit_code


def build_parser() -> argparse.ArgumentParser:
    """Build the command line parser."""
    parser = argparse.ArgumentParser(
        prog="testbrain",
        description="Run test scripts in isolated processes and report the results",
    )
    parser.add_argument(
        "targets",
        nargs="*",
        metavar="TARGET",
        help="Test files or directories to run (default: current directory)",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Config file (default: ~/.test-brain.yaml)",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        help="Timeout in seconds for each individual test (default: 300)",
    )
    parser.add_argument(
        "--json",
        dest="json_output",
        action="store_true",
        default=None,
        help="Output the results as JSON",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=None,
        help="Stream the output of tests while they run",
    )
    parser.add_argument(
        "--include",
        help=r"Regex of test file paths to run (default: _test\.sh$)",
    )
    parser.add_argument(
        "--exclude",
        help="Regex of test file paths to skip (default: ^$)",
    )
    parser.add_argument(
        "--in-order",
        action="store_true",
        default=None,
        help="Run tests in lexicographic order instead of shuffling them",
    )
    parser.add_argument(
        "--seed",
        type=int,
        help="Seed for shuffling the test order (default: generated)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        default=None,
        help="List the tests that would run without running them",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Log debug information to stderr",
    )
    parser.add_argument("--version", action="version", version=get_version())
    return parser


def main(argv: Sequence[str] | None = None) -> None:
    """CLI entry point."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    sinks = OutputSinks.standard()
    try:
        options = resolve_options(
            args.targets,
            {
                "timeout": args.timeout,
                "json_output": args.json_output,
                "verbose": args.verbose,
                "include": args.include,
                "exclude": args.exclude,
                "in_order": args.in_order,
                "seed": args.seed,
                "dry_run": args.dry_run,
            },
            config_file=args.config,
        )
    except TestbrainError as e:
        sinks.write_err(f"{e}\n")
        sys.exit(EXIT_USAGE_ERROR)

    exit_code = asyncio.run(run(options, sinks))
    sys.exit(exit_code)


if __name__ == "__main__":  # pragma: no cover
    main()
