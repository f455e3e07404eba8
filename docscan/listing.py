"""
Listing - Single-level directory browse.

Used to let a user pick a scan root: returns the immediate children of
one directory without recursing or filtering.
"""

import asyncio
import logging
import os
from pathlib import Path
from typing import List

from .errors import RootAccessError
from .models import DirectoryItem
from .scanner import resolve_root


logger = logging.getLogger(__name__)


def _read_items(directory: Path) -> List[DirectoryItem]:
    with os.scandir(directory) as entries:
        # Symlinks are reported as non-directories, matching lstat()
        items = [
            DirectoryItem(name=entry.name, is_dir=entry.is_dir(follow_symlinks=False))
            for entry in entries
        ]
    items.sort(key=lambda item: item.name)
    return items


async def list_directory(path: str | os.PathLike) -> List[DirectoryItem]:
    """
    List the entries directly inside ``path``, sorted by name.

    Raises:
        InvalidRoot: path missing or not a directory
        RootAccessError: the directory could not be opened
    """
    directory = resolve_root(path)
    loop = asyncio.get_running_loop()
    try:
        items = await loop.run_in_executor(None, _read_items, directory)
    except OSError as e:
        raise RootAccessError(directory, e) from e

    logger.debug(f"Listed {len(items)} entries in {directory}")
    return items
