"""
docscan - Concurrent document discovery over local directory trees.

Modules:
    - config: Centralized configuration
    - models: FilterSpec, Candidate, Document, ScanResult
    - patterns: Pure include/exclude predicates
    - cancel: Cooperative cancellation token with deadline
    - errors: Exception taxonomy and per-entry error policies
    - scanner: Serial directory walker with subtree pruning
    - engine: Bounded walker → filter workers → collector pipeline
    - listing: Single-level directory browse
    - documents: Read, write, create and delete single documents

Pipeline Flow:
    Walk (1 task) → Filter (N workers) → Collect (1 task)

Usage:
    from docscan import Engine, FilterSpec

    engine = Engine()
    docs = await engine.discover("/home/me/notes", FilterSpec.default())
"""

from .cancel import CancelToken
from .config import DiscoveryConfig
from .documents import create_document, delete_document, read_document, write_document
from .engine import Engine, discover_documents
from .errors import (
    DiscoveryError,
    DocumentAccessError,
    DocumentNotFound,
    EntryReadError,
    InvalidDocument,
    InvalidRoot,
    RootAccessError,
    ScanCancelled,
)
from .listing import list_directory
from .models import DirectoryItem, Document, FilterSpec, ScanResult

__all__ = [
    "CancelToken",
    "DirectoryItem",
    "DiscoveryConfig",
    "DiscoveryError",
    "Document",
    "DocumentAccessError",
    "DocumentNotFound",
    "Engine",
    "EntryReadError",
    "FilterSpec",
    "InvalidDocument",
    "InvalidRoot",
    "RootAccessError",
    "ScanCancelled",
    "ScanResult",
    "create_document",
    "delete_document",
    "discover_documents",
    "list_directory",
    "read_document",
    "write_document",
]
