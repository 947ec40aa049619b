#!/usr/bin/env python3

from functools import lru_cache
from typing import Iterable, List, Sequence, Tuple

import pathspec

from critical_review.models import DiffFile


@lru_cache(maxsize=64)
def compile_patterns(patterns: Tuple[str, ...]) -> pathspec.PathSpec:
    """
    Build a gitignore-style matcher for the exclude patterns.

    ``*`` and ``?`` stay inside one path segment, ``**`` crosses segments and
    ``**/`` may also match no directory at all. A pattern without a slash
    matches the file name in any directory, so ``*.lock`` excludes
    ``web/yarn.lock``.

    Args:
        patterns: Glob patterns, e.g. ``src/**/*.py``

    Returns:
        Compiled path spec
    """
    return pathspec.PathSpec.from_lines("gitwildmatch", patterns)


def is_excluded(path: str, patterns: Iterable[str]) -> bool:
    """Check whether a path matches any of the exclude patterns."""
    cleaned = tuple(p.strip() for p in patterns if p and p.strip())
    if not cleaned:
        return False
    return compile_patterns(cleaned).match_file(path)


def filter_files(files: Sequence[DiffFile], patterns: Sequence[str]) -> List[DiffFile]:
    """
    Drop the files whose target path matches an exclude pattern.

    Deleted files are matched with an empty path. The order of the remaining
    files is preserved.

    Args:
        files: Parsed diff files
        patterns: Glob patterns from the ``exclude`` input

    Returns:
        The files that are not excluded
    """
    if not patterns:
        return list(files)
    return [f for f in files if not is_excluded(f.path, patterns)]
