"""Run a single test script as a child process under a timeout."""

import asyncio
import codecs
import io
import logging
import os
from collections.abc import Callable
from typing import Any

from testbrain.models.result import (
    SKIP_EXIT_CODE,
    UNKNOWN_EXIT_CODE,
    TestResult,
    TestScript,
)
from testbrain.platform import (
    CleanExit,
    ExitOutcome,
    PlatformSupport,
    SignaledExit,
    SpawnFailure,
    get_platform_support,
)
from testbrain.sinks import OutputSinks

log = logging.getLogger(__name__)

TIMEOUT_ENV_VAR = "TESTBRAIN_TIMEOUT"
READ_CHUNK_SIZE = 4096
# How long to wait for output pipes and killed processes once the race is over.
CLEANUP_GRACE_PERIOD = 2.0


async def run_test_script(
    script: TestScript,
    *,
    timeout: float,
    verbose: bool,
    sinks: OutputSinks,
    platform: PlatformSupport | None = None,
) -> TestResult:
    """Run ``script`` to completion or until ``timeout`` seconds elapse.

    In verbose mode the script's stdout and stderr are streamed to ``sinks``
    as they are produced and the result carries no output. Otherwise both
    streams are merged into the result's ``output``.

    Args:
        script: Script to execute
        timeout: Seconds the script may run before it is killed
        verbose: Stream output live instead of buffering it
        sinks: Destinations for live output and timeout notices
        platform: Platform adapter (defaults to the current host's)

    Returns:
        The script's result. Spawn failures and timeouts are recorded in the
        result rather than raised.

    """
    platform = platform or get_platform_support()
    kwargs: dict[str, Any] = {
        "cwd": script.absolute_path.parent,
        "env": {**os.environ, TIMEOUT_ENV_VAR: str(int(timeout))},
        "stdin": asyncio.subprocess.DEVNULL,
        "stdout": asyncio.subprocess.PIPE,
        "stderr": asyncio.subprocess.PIPE if verbose else asyncio.subprocess.STDOUT,
    }
    platform.configure_subprocess(kwargs)

    try:
        process = await asyncio.create_subprocess_exec(
            str(script.absolute_path), **kwargs
        )
    except OSError as e:
        log.debug("Could not start %s: %s", script.absolute_path, e)
        return result_from_exit(script.relative_path, SpawnFailure(message=str(e)))

    log.debug("Started %s (pid %d)", script.relative_path, process.pid)
    buffer = io.StringIO()
    if verbose:
        pumps = [
            asyncio.create_task(_pump(process.stdout, sinks.write_out)),
            asyncio.create_task(_pump(process.stderr, sinks.write_err)),
        ]
    else:
        pumps = [asyncio.create_task(_pump(process.stdout, buffer.write))]

    exited = asyncio.create_task(process.wait())
    done, _ = await asyncio.wait({exited}, timeout=timeout)
    timed_out = exited not in done

    if timed_out:
        log.info(
            "Killing %s (pid %d) after %s",
            script.relative_path,
            process.pid,
            format_timeout(timeout),
        )
        platform.kill(process)
        await _settle([exited], "process exit")
    await _settle(pumps, "output")

    output = None if verbose else buffer.getvalue()
    if timed_out:
        marker = f"Killed by testbrain: Timed out after {format_timeout(timeout)}\n"
        if verbose:
            sinks.write_err(marker)
        else:
            if output and not output.endswith("\n"):
                output += "\n"
            output = (output or "") + marker
        return TestResult(
            test_file=script.relative_path,
            outcome="failed",
            exit_code=UNKNOWN_EXIT_CODE,
            output=output,
        )

    log.debug("%s exited with %s", script.relative_path, process.returncode)
    return result_from_exit(
        script.relative_path, platform.normalize_exit(process.returncode), output
    )


def result_from_exit(
    test_file: str, exit_outcome: ExitOutcome, output: str | None = None
) -> TestResult:
    """Map a normalized exit outcome to a test result."""
    match exit_outcome:
        case CleanExit(code=0):
            return TestResult(
                test_file=test_file, outcome="passed", exit_code=0, output=output
            )
        case CleanExit(code=code) if code == SKIP_EXIT_CODE:
            return TestResult(
                test_file=test_file, outcome="skipped", exit_code=code, output=output
            )
        case CleanExit(code=code):
            return TestResult(
                test_file=test_file, outcome="failed", exit_code=code, output=output
            )
        case SignaledExit(code=code):
            return TestResult(
                test_file=test_file, outcome="failed", exit_code=code, output=output
            )
        case SpawnFailure(code=code, message=message):
            return TestResult(
                test_file=test_file, outcome="errored", exit_code=code, output=message
            )


def format_timeout(seconds: float) -> str:
    """Format a timeout the way it is shown in kill notices, e.g. ``1s``."""
    if float(seconds).is_integer():
        return f"{int(seconds)}s"
    return f"{seconds:g}s"


async def _pump(
    stream: asyncio.StreamReader | None, write: Callable[[str], Any]
) -> None:
    if stream is None:
        return
    decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
    while chunk := await stream.read(READ_CHUNK_SIZE):
        write(decoder.decode(chunk))
    if tail := decoder.decode(b"", final=True):
        write(tail)


async def _settle(tasks: list[asyncio.Task[Any]], what: str) -> None:
    """Wait briefly for ``tasks`` and cancel whatever is still pending."""
    _, pending = await asyncio.wait(tasks, timeout=CLEANUP_GRACE_PERIOD)
    for task in pending:
        log.warning("Gave up waiting for %s", what)
        task.cancel()
    if pending:
        await asyncio.gather(*pending, return_exceptions=True)
