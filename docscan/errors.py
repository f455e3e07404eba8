"""
Error Handling - Exception taxonomy and per-entry error policies.

Only root-level failures and cancellation escape a scan. Errors on
individual entries go through ``handle_entry_error`` which logs them
according to ERROR_POLICIES and tells the walker whether to skip the
entry or abort the whole scan.
"""

import logging
from dataclasses import dataclass
from enum import Enum, auto
from pathlib import Path
from typing import Optional


logger = logging.getLogger(__name__)


class ErrorAction(Enum):
    """What to do when an entry cannot be read."""
    SKIP = auto()           # Skip this entry, keep walking
    ABORT = auto()          # Stop the scan (strict mode)


@dataclass
class ErrorPolicy:
    """Policy for handling a specific error type."""
    action: ErrorAction
    log_level: int
    message_template: str = "{path}: {error}"

    def describe(self, error: Exception, path: Optional[Path] = None) -> str:
        return self.message_template.format(
            path=path if path is not None else "<unknown>",
            error=error,
        )


# Keyed by exception class; lookup walks the raised type's MRO
ERROR_POLICIES: dict[type, ErrorPolicy] = {
    PermissionError: ErrorPolicy(
        action=ErrorAction.SKIP,
        log_level=logging.WARNING,
        message_template="Permission denied: {path}"
    ),
    FileNotFoundError: ErrorPolicy(
        action=ErrorAction.SKIP,
        log_level=logging.DEBUG,
        message_template="Entry vanished or broken symlink: {path}"
    ),
    NotADirectoryError: ErrorPolicy(
        action=ErrorAction.SKIP,
        log_level=logging.DEBUG,
        message_template="Expected directory, got file: {path}"
    ),
    OSError: ErrorPolicy(
        action=ErrorAction.SKIP,
        log_level=logging.WARNING,
        message_template="OS error reading entry: {path} - {error}"
    ),
}


class DiscoveryError(Exception):
    """Base exception for discovery errors."""
    pass


class InvalidRoot(DiscoveryError):
    """Scan root does not exist or is not a directory."""
    def __init__(self, root: Path, reason: str):
        self.root = root
        self.reason = reason
        super().__init__(f"Invalid scan root {root}: {reason}")


class RootAccessError(DiscoveryError):
    """The root exists but could not be stat'ed or listed."""
    def __init__(self, root: Path, cause: OSError):
        self.root = root
        self.cause = cause
        super().__init__(f"Cannot read scan root {root}: {cause}")


class EntryReadError(DiscoveryError):
    """A single entry could not be read (raised only in strict mode)."""
    def __init__(self, path: Path, cause: Exception):
        self.path = path
        self.cause = cause
        super().__init__(f"Cannot read {path}: {cause}")


class ScanCancelled(DiscoveryError):
    """The scan was cancelled or timed out before it completed."""
    pass


class InvalidDocument(DiscoveryError):
    """A document path was rejected before touching the filesystem."""
    def __init__(self, path: Path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Invalid document {path}: {reason}")


class DocumentNotFound(DiscoveryError):
    """The document to read or delete does not exist."""
    def __init__(self, path: Path):
        self.path = path
        super().__init__(f"Document does not exist: {path}")


class DocumentAccessError(DiscoveryError):
    """Reading, writing, creating or deleting a document failed."""
    def __init__(self, path: Path, cause: OSError):
        self.path = path
        self.cause = cause
        super().__init__(f"Cannot access document {path}: {cause}")


_UNEXPECTED = ErrorPolicy(
    action=ErrorAction.SKIP,
    log_level=logging.ERROR,
    message_template="Unexpected error: {path} - {error}"
)


def policy_for(error: Exception) -> ErrorPolicy:
    """Return the policy registered for the closest base class of ``error``."""
    for error_type in type(error).__mro__:
        if error_type in ERROR_POLICIES:
            return ERROR_POLICIES[error_type]
    return _UNEXPECTED


def handle_entry_error(
    error: Exception,
    path: Optional[Path] = None,
    context: str = "",
    strict: bool = False,
) -> ErrorAction:
    """
    Log a per-entry error and decide whether the walk goes on.

    Args:
        error: The exception that occurred
        path: Entry being read (if known)
        context: Walker stage, used as a log prefix
        strict: Abort on any entry error instead of skipping

    Returns:
        ABORT in strict mode, otherwise the action from the policy table
    """
    policy = policy_for(error)
    message = policy.describe(error, path)
    if context:
        message = f"[{context}] {message}"

    if strict:
        logger.error(f"{message} (strict mode, aborting scan)")
        return ErrorAction.ABORT

    logger.log(policy.log_level, message)
    return policy.action
