"""Allow ``python -m testbrain``."""

from testbrain.cli import main

main()
