"""Platform adapters for spawning, killing and decoding test processes."""

import sys

from testbrain.platform.base import (
    CleanExit,
    ExitOutcome,
    PlatformSupport,
    SignaledExit,
    SpawnFailure,
)
from testbrain.platform.posix import PosixPlatformSupport
from testbrain.platform.windows import WindowsPlatformSupport


def get_platform_support() -> PlatformSupport:
    """Return the platform adapter for the current host."""
    if sys.platform == "win32":
        return WindowsPlatformSupport()
    return PosixPlatformSupport()


__all__ = [
    "CleanExit",
    "ExitOutcome",
    "PlatformSupport",
    "PosixPlatformSupport",
    "SignaledExit",
    "SpawnFailure",
    "WindowsPlatformSupport",
    "get_platform_support",
]
