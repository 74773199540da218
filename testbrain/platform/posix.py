"""Process handling for Unix-like systems."""

import asyncio
import logging
import os
import signal
from typing import Any

from testbrain.platform.base import PlatformSupport

log = logging.getLogger(__name__)


class PosixPlatformSupport(PlatformSupport):
    """Runs each test in its own session so the whole tree can be killed."""

    def configure_subprocess(self, kwargs: dict[str, Any]) -> None:
        kwargs.setdefault("start_new_session", True)

    def kill(self, process: asyncio.subprocess.Process) -> None:
        # The child leads its own process group, so grandchildren holding
        # the output pipes go down with it.
        try:
            os.killpg(process.pid, signal.SIGKILL)
        except ProcessLookupError:
            return
        except PermissionError:
            log.debug("Cannot signal process group %d, killing pid only", process.pid)
            super().kill(process)
