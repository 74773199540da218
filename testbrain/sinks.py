"""Output sinks injected into the engine."""

import sys
from dataclasses import dataclass
from typing import TextIO


@dataclass(frozen=True, kw_only=True)
class OutputSinks:
    """Destinations for everything testbrain shows the user.

    ``out`` receives progress, results and reports. ``err`` receives
    diagnostics, live stderr of tests in verbose mode and timeout notices.
    """

    out: TextIO
    err: TextIO

    @classmethod
    def standard(cls) -> "OutputSinks":
        """Sinks bound to the process's stdout and stderr."""
        return cls(out=sys.stdout, err=sys.stderr)

    def write_out(self, text: str) -> None:
        self.out.write(text)
        self.out.flush()

    def write_err(self, text: str) -> None:
        self.err.write(text)
        self.err.flush()

    @property
    def out_is_tty(self) -> bool:
        isatty = getattr(self.out, "isatty", None)
        return bool(isatty and isatty())
