"""
Data Models - Type definitions for the discovery pipeline.

These dataclasses represent the values handed between the pipeline stages
(walker → filter workers → collector). Every value is owned by exactly one
task at a time and nothing outlives a single scan.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from stat import S_ISDIR
from typing import Iterable, List


def _normalize_extensions(values: Iterable[str]) -> frozenset:
    """Strip leading dots, lower-case and drop empty entries."""
    if isinstance(values, str):
        values = [values]
    return frozenset(
        v.strip().lstrip(".").lower() for v in values if v and v.strip().lstrip(".")
    )


def _normalize_patterns(values: Iterable[str]) -> frozenset:
    if isinstance(values, str):
        values = [values]
    return frozenset(v.strip() for v in values if v and v.strip())


@dataclass(frozen=True)
class FilterSpec:
    """
    Include/exclude rules for a single scan.

    Exclude rules always win over include rules. An empty include set
    means "match everything", never "match nothing".
    """
    include_extensions: frozenset = field(default_factory=frozenset)
    include_dir_names: frozenset = field(default_factory=frozenset)
    exclude_extensions: frozenset = field(default_factory=frozenset)
    exclude_dir_names: frozenset = field(default_factory=frozenset)

    def __post_init__(self):
        # Frozen: normalize through object.__setattr__
        object.__setattr__(self, "include_extensions", _normalize_extensions(self.include_extensions))
        object.__setattr__(self, "exclude_extensions", _normalize_extensions(self.exclude_extensions))
        object.__setattr__(self, "include_dir_names", _normalize_patterns(self.include_dir_names))
        object.__setattr__(self, "exclude_dir_names", _normalize_patterns(self.exclude_dir_names))

    @classmethod
    def default(cls) -> "FilterSpec":
        """Markdown documents anywhere, skipping VCS, dependency and trash folders."""
        return cls(
            include_extensions=frozenset({"md"}),
            include_dir_names=frozenset({"*"}),
            exclude_dir_names=frozenset({".git", "node_modules", ".Trash"}),
        )


@dataclass
class Candidate:
    """
    A filesystem entry produced by the walker, not yet filtered.

    Metadata comes from a single stat() call made while reading the
    parent directory; the filter never touches the filesystem again.
    """
    path: Path
    parent_name: str
    is_dir: bool
    size: int = 0
    mtime: float = 0.0
    is_symlink: bool = False

    @property
    def name(self) -> str:
        return self.path.name

    @classmethod
    def from_entry(cls, entry: os.DirEntry, stat: os.stat_result, is_symlink: bool = False) -> "Candidate":
        """Create a Candidate from a scandir entry and its (followed) stat result."""
        path = Path(entry.path)
        return cls(
            path=path,
            parent_name=path.parent.name,
            is_dir=S_ISDIR(stat.st_mode),
            size=stat.st_size,
            mtime=stat.st_mtime,
            is_symlink=is_symlink,
        )


@dataclass(frozen=True)
class Document:
    """An accepted file: absolute path plus its path relative to the scan root."""
    path: Path
    relative_path: Path

    def to_dict(self) -> dict:
        return {"path": str(self.path), "name": self.relative_path.as_posix()}


@dataclass(frozen=True)
class DirectoryItem:
    """One entry of a single-level directory listing."""
    name: str
    is_dir: bool

    def to_dict(self) -> dict:
        return {"name": self.name, "is_dir": self.is_dir}


@dataclass
class ScanResult:
    """Result of one discovery scan."""
    root: Path
    documents: List[Document]
    scanned_count: int = 0
    pruned_count: int = 0
    error_count: int = 0
    duration_seconds: float = 0.0

    def __str__(self) -> str:
        return (
            f"Found {len(self.documents)} documents under {self.root} "
            f"({self.scanned_count} entries scanned, "
            f"{self.pruned_count} pruned, "
            f"{self.error_count} errors) "
            f"in {self.duration_seconds:.2f}s"
        )
