"""Process handling for Windows."""

import asyncio
import logging
import subprocess
from typing import Any

from testbrain.platform.base import CleanExit, ExitOutcome, PlatformSupport

log = logging.getLogger(__name__)

TASKKILL_TIMEOUT = 5.0


class WindowsPlatformSupport(PlatformSupport):
    """Windows reports every exit status as an unsigned number."""

    @property
    def is_windows(self) -> bool:
        return True

    def configure_subprocess(self, kwargs: dict[str, Any]) -> None:
        if hasattr(subprocess, "CREATE_NEW_PROCESS_GROUP"):
            kwargs.setdefault("creationflags", subprocess.CREATE_NEW_PROCESS_GROUP)

    def normalize_exit(self, returncode: int | None) -> ExitOutcome:
        if returncode is None:
            return super().normalize_exit(returncode)
        return CleanExit(code=returncode & 0xFFFFFFFF)

    def kill(self, process: asyncio.subprocess.Process) -> None:
        # taskkill /T also ends the children holding the output pipes.
        try:
            completed = subprocess.run(
                ["taskkill", "/F", "/T", "/PID", str(process.pid)],
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                timeout=TASKKILL_TIMEOUT,
                check=False,
            )
        except (OSError, subprocess.TimeoutExpired) as e:
            log.debug("taskkill failed for pid %d: %s", process.pid, e)
            super().kill(process)
            return
        if completed.returncode != 0:
            log.debug(
                "taskkill exited with %d for pid %d", completed.returncode, process.pid
            )
            super().kill(process)
