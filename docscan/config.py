"""
Discovery Configuration - Centralized settings for the discovery engine.

Uses environment variables with sensible defaults. The filter defaults
mirror what the surrounding application asks for: markdown files,
any directory, skipping VCS, dependency and trash folders.
"""

import os
from dataclasses import dataclass, field
from typing import Set

from .models import FilterSpec


_TRUE_VALUES = {"1", "true", "yes", "on"}


def _split_env(value: str) -> Set[str]:
    return {part.strip() for part in value.split(",") if part.strip()}


@dataclass
class DiscoveryConfig:
    """
    Configuration for the discovery engine.

    Queue sizes bound memory between pipeline stages; filter_workers
    bounds how many candidates are evaluated concurrently.
    """

    # --- Concurrency Limits ---
    filter_workers: int = 8           # Fixed pool, independent of tree size
    candidate_queue_size: int = 1000  # Walker → filter workers
    match_queue_size: int = 100       # Filter workers → collector

    # --- Error / Cancellation Policy ---
    strict: bool = False              # Abort on first unreadable entry
    scan_timeout: float | None = None # Seconds; None means no deadline

    # --- Default Filters ---
    include_extensions: Set[str] = field(default_factory=lambda: {"md"})
    include_dir_names: Set[str] = field(default_factory=lambda: {"*"})
    exclude_extensions: Set[str] = field(default_factory=set)
    exclude_dir_names: Set[str] = field(default_factory=lambda: {
        # Version control
        ".git",
        # Dependencies
        "node_modules",
        # macOS
        ".Trash",
    })

    def __post_init__(self):
        self.validate()

    def validate(self) -> None:
        """Reject values that would deadlock or disable the pipeline."""
        if self.filter_workers < 1:
            raise ValueError(f"filter_workers must be >= 1, got {self.filter_workers}")
        if self.candidate_queue_size < 1:
            raise ValueError(f"candidate_queue_size must be >= 1, got {self.candidate_queue_size}")
        if self.match_queue_size < 1:
            raise ValueError(f"match_queue_size must be >= 1, got {self.match_queue_size}")
        if self.scan_timeout is not None and self.scan_timeout < 0:
            raise ValueError(f"scan_timeout must be >= 0, got {self.scan_timeout}")

    def default_filters(self) -> FilterSpec:
        """Build the FilterSpec used when a caller does not supply one."""
        return FilterSpec(
            include_extensions=frozenset(self.include_extensions),
            include_dir_names=frozenset(self.include_dir_names),
            exclude_extensions=frozenset(self.exclude_extensions),
            exclude_dir_names=frozenset(self.exclude_dir_names),
        )

    @classmethod
    def from_env(cls) -> "DiscoveryConfig":
        """
        Create config from environment variables.

        Supported env vars:
            DOCSCAN_FILTER_WORKERS: Size of the filter worker pool
            DOCSCAN_CANDIDATE_QUEUE_SIZE: Walker → worker queue bound
            DOCSCAN_MATCH_QUEUE_SIZE: Worker → collector queue bound
            DOCSCAN_STRICT: Abort on first entry error (1/true/yes/on)
            DOCSCAN_SCAN_TIMEOUT: Per-scan deadline in seconds
            DOCSCAN_INCLUDE_EXTENSIONS: Comma-separated extensions
            DOCSCAN_INCLUDE_DIRS: Comma-separated directory patterns
            DOCSCAN_EXCLUDE_EXTENSIONS: Comma-separated extensions
            DOCSCAN_EXCLUDE_DIRS: Comma-separated directory patterns

        The four filter variables replace the defaults when set, even to an
        empty string, so DOCSCAN_EXCLUDE_DIRS= turns off the default pruning.
        """
        config = cls()

        if workers := os.environ.get("DOCSCAN_FILTER_WORKERS"):
            config.filter_workers = int(workers)

        if candidate_size := os.environ.get("DOCSCAN_CANDIDATE_QUEUE_SIZE"):
            config.candidate_queue_size = int(candidate_size)

        if match_size := os.environ.get("DOCSCAN_MATCH_QUEUE_SIZE"):
            config.match_queue_size = int(match_size)

        if strict := os.environ.get("DOCSCAN_STRICT"):
            config.strict = strict.strip().lower() in _TRUE_VALUES

        if timeout := os.environ.get("DOCSCAN_SCAN_TIMEOUT"):
            config.scan_timeout = float(timeout)

        # Present-but-empty clears the list: every include matches,
        # and no extension or directory is excluded
        if (include_exts := os.environ.get("DOCSCAN_INCLUDE_EXTENSIONS")) is not None:
            config.include_extensions = _split_env(include_exts)

        if (include_dirs := os.environ.get("DOCSCAN_INCLUDE_DIRS")) is not None:
            config.include_dir_names = _split_env(include_dirs)

        if (exclude_exts := os.environ.get("DOCSCAN_EXCLUDE_EXTENSIONS")) is not None:
            config.exclude_extensions = _split_env(exclude_exts)

        if (exclude_dirs := os.environ.get("DOCSCAN_EXCLUDE_DIRS")) is not None:
            config.exclude_dir_names = _split_env(exclude_dirs)

        config.validate()
        return config


# Singleton default config
_default_config: DiscoveryConfig | None = None


def get_config() -> DiscoveryConfig:
    """Get the default configuration (singleton)."""
    global _default_config
    if _default_config is None:
        _default_config = DiscoveryConfig.from_env()
    return _default_config


def set_config(config: DiscoveryConfig | None) -> None:
    """Override the default configuration (for testing)."""
    global _default_config
    _default_config = config
