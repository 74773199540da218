"""Platform specific process handling."""

import asyncio
from dataclasses import dataclass
from typing import Any

from testbrain.models.result import UNKNOWN_EXIT_CODE


@dataclass(frozen=True, kw_only=True)
class CleanExit:
    """The process exited on its own with a numeric status."""

    code: int


@dataclass(frozen=True, kw_only=True)
class SignaledExit:
    """The process was killed by a signal or its status is not a number."""

    returncode: int | None = None

    @property
    def code(self) -> int:
        return UNKNOWN_EXIT_CODE


@dataclass(frozen=True, kw_only=True)
class SpawnFailure:
    """The process could not be started at all."""

    message: str

    @property
    def code(self) -> int:
        return UNKNOWN_EXIT_CODE


ExitOutcome = CleanExit | SignaledExit | SpawnFailure


class PlatformSupport:
    """Base class describing platform specific behaviour."""

    @property
    def is_windows(self) -> bool:
        return False

    def configure_subprocess(self, kwargs: dict[str, Any]) -> None:
        """Mutate subprocess keyword arguments with platform settings."""

    def normalize_exit(self, returncode: int | None) -> ExitOutcome:
        """Turn a raw return code into a platform independent outcome."""
        if returncode is None or returncode < 0:
            return SignaledExit(returncode=returncode)
        return CleanExit(code=returncode)

    def kill(self, process: asyncio.subprocess.Process) -> None:
        """Forcibly terminate ``process``."""
        try:
            process.kill()
        except ProcessLookupError:
            pass
