"""Execution order of discovered test scripts."""

import random
import time
from collections.abc import Sequence
from typing import TypeVar

from testbrain.models.result import TestScript

T = TypeVar("T")


def order_test_scripts(
    scripts: Sequence[TestScript], *, in_order: bool, seed: int
) -> list[TestScript]:
    """Sort scripts by relative path, then shuffle them unless ``in_order``."""
    ordered = sorted(scripts, key=lambda script: script.relative_path)
    if in_order:
        return ordered
    return shuffle(ordered, seed)


def shuffle(items: Sequence[T], seed: int) -> list[T]:
    """Return a Fisher-Yates shuffled copy of ``items``.

    The generator is created from ``seed`` for this call only, so the same
    seed and the same input always give the same permutation.
    """
    # Seeding from the signed bytes keeps S and -S distinct.
    rng = random.Random(seed.to_bytes(8, "big", signed=True))
    shuffled = list(items)
    for i in range(len(shuffled) - 1, 0, -1):
        j = rng.randint(0, i)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled


def generate_seed() -> int:
    """Derive a signed 64-bit seed from the high resolution clock."""
    value = time.time_ns() & 0xFFFFFFFFFFFFFFFF
    if value >= 2**63:
        value -= 2**64
    return value
