"""
Patterns - Pure filter predicates.

Nothing here touches the filesystem, so every rule can be tested in
isolation. Evaluation order is exclude-before-include with a short
circuit on the first disqualifying match.
"""

import fnmatch
import os
import re
from pathlib import Path
from typing import Iterable, Optional

from .models import Candidate, Document, FilterSpec


_SEPARATORS = {"/", os.sep} | ({os.altsep} if os.altsep else set())


def match_pattern(pattern: str, name: str) -> bool:
    """
    Match a directory name against a single-segment pattern.

    ``*`` matches any name, a literal matches itself, anything else uses
    shell-glob semantics. Patterns that are empty, contain a path
    separator or fail to compile never match.
    """
    if not pattern:
        return False
    if pattern == "*":
        return True
    if pattern == name:
        return True
    if any(sep in pattern for sep in _SEPARATORS):
        return False
    try:
        return fnmatch.fnmatchcase(name, pattern)
    except re.error:
        return False


def matches_any(patterns: Iterable[str], name: str) -> bool:
    return any(match_pattern(p, name) for p in patterns)


def has_extension(file_name: str, extensions: Iterable[str]) -> bool:
    """Case-insensitive suffix test, so ``tar.gz`` style extensions work."""
    lowered = file_name.lower()
    return any(ext and lowered.endswith("." + ext) for ext in extensions)


def is_pruned(dir_name: str, spec: FilterSpec) -> bool:
    """Whether the walker should skip descending into ``dir_name``."""
    return matches_any(spec.exclude_dir_names, dir_name)


def accepts(candidate: Candidate, spec: FilterSpec) -> bool:
    # Directories are only traversed, never returned
    if candidate.is_dir:
        return False

    name = candidate.name
    if has_extension(name, spec.exclude_extensions):
        return False
    if matches_any(spec.exclude_dir_names, candidate.parent_name):
        return False

    ext_ok = not spec.include_extensions or has_extension(name, spec.include_extensions)
    dir_ok = not spec.include_dir_names or matches_any(spec.include_dir_names, candidate.parent_name)
    return ext_ok and dir_ok


def evaluate(candidate: Candidate, spec: FilterSpec, root: Path) -> Optional[Document]:
    """Return a Document for an accepted candidate, otherwise None."""
    if not accepts(candidate, spec):
        return None
    return Document(path=candidate.path, relative_path=candidate.path.relative_to(root))
