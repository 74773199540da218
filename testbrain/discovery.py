"""Discover test scripts below a set of target paths."""

import logging
import os
import re
import stat
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path, PurePath

from testbrain.errors import ConfigurationError, DiscoveryError
from testbrain.models.result import TestScript

log = logging.getLogger(__name__)


@dataclass(frozen=True, kw_only=True)
class DiscoveredScripts:
    """Scripts found by a discovery pass and the root they are relative to."""

    root: str
    scripts: Sequence[TestScript]

    @property
    def relative_paths(self) -> Sequence[str]:
        return [script.relative_path for script in self.scripts]


def discover_test_scripts(
    targets: Sequence[str],
    include: str,
    exclude: str,
) -> DiscoveredScripts:
    """Find test scripts in ``targets``.

    Directories are walked recursively and every file in them must match
    ``include`` and not match ``exclude``. Files named explicitly are only
    checked against ``exclude``.

    Args:
        targets: Files or directories to search
        include: Regex a walked file's absolute path must match
        exclude: Regex rejecting any matching absolute path

    Returns:
        The common root and the scripts sorted by their path relative to it.

    Raises:
        ConfigurationError: If either pattern does not compile
        DiscoveryError: If a target cannot be read or walked

    """
    include_re = compile_pattern(include, "include")
    exclude_re = compile_pattern(exclude, "exclude")

    found: dict[str, Path] = {}
    for target in targets:
        target_path = Path(os.path.abspath(target))
        for candidate in _candidates(target_path, include_re, exclude_re):
            found.setdefault(str(candidate), candidate)

    paths = list(found.values())
    root = resolve_root(targets, paths)
    log.debug("Discovered %d test script(s) under %s", len(paths), root or "<none>")

    scripts = sorted(
        (
            TestScript(relative_path=relative_to_root(path, root), absolute_path=path)
            for path in paths
        ),
        key=lambda script: script.relative_path,
    )
    return DiscoveredScripts(root=root, scripts=scripts)


def compile_pattern(pattern: str, name: str) -> re.Pattern[str]:
    """Compile a user supplied filter regex."""
    try:
        return re.compile(pattern)
    except re.error as e:
        raise ConfigurationError(f"Error parsing files to {name}: {e}") from e


def _candidates(
    target: Path, include_re: re.Pattern[str], exclude_re: re.Pattern[str]
) -> list[Path]:
    try:
        info = target.stat()
    except OSError as e:
        raise DiscoveryError(target, e.strerror or str(e)) from e

    if not stat.S_ISDIR(info.st_mode):
        # Naming a file explicitly overrides the include filter.
        if exclude_re.search(str(target)):
            log.debug("Excluded explicit target %s", target)
            return []
        return [target]

    return [
        path
        for path in walk_files(target)
        if include_re.search(str(path)) and not exclude_re.search(str(path))
    ]


def walk_files(top: Path) -> list[Path]:
    """Return every regular file below ``top``."""

    def _raise(error: OSError) -> None:
        raise DiscoveryError(error.filename or top, error.strerror or str(error))

    files: list[Path] = []
    for dirpath, _dirnames, filenames in os.walk(top, onerror=_raise):
        for filename in filenames:
            path = Path(dirpath) / filename
            if path.is_file():
                files.append(path)
    return files


def resolve_root(targets: Sequence[str], found: Sequence[Path]) -> str:
    """Pick the directory that reported test names are relative to.

    A single target is its own root (or its parent when it is a file).
    Several targets share the common prefix of everything found, except when
    only one script was found: its parent is used instead of the script path
    itself.
    """
    if len(targets) == 1:
        target = Path(os.path.abspath(targets[0]))
        return str(target if target.is_dir() else target.parent)
    if len(found) == 1:
        return str(found[0].parent)
    return common_path_prefix([str(path) for path in found])


def common_path_prefix(paths: Sequence[str]) -> str:
    """Return the deepest directory containing all of ``paths``.

    Paths are compared segment by segment; the comparison stops at the first
    differing segment or at the end of the shortest path.
    """
    if not paths:
        return ""

    split_paths = [PurePath(os.path.abspath(path)).parts for path in paths]
    shortest = min(len(parts) for parts in split_paths)

    matching: list[str] = []
    for index in range(shortest):
        part = split_paths[0][index]
        if any(parts[index] != part for parts in split_paths[1:]):
            break
        matching.append(part)

    if not matching:
        return ""
    return str(PurePath(*matching))


def relative_to_root(path: Path, root: str) -> str:
    """Return ``path`` relative to ``root`` using forward slashes."""
    if not root:
        return path.as_posix()
    return PurePath(os.path.relpath(path, root)).as_posix()
