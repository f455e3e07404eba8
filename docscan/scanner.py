"""
Scanner - Serial directory traversal for the discovery pipeline.

A single walker reads one directory at a time on a dedicated executor
thread, so traversal never blocks the event loop and never fans out
across the filesystem. Excluded directories are pruned before descent.
"""

import asyncio
import logging
import os
import threading
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from stat import S_ISDIR
from typing import AsyncGenerator, List, Tuple

from .cancel import CancelToken
from .errors import EntryReadError, ErrorAction, InvalidRoot, RootAccessError, handle_entry_error
from .models import Candidate, FilterSpec
from .patterns import is_pruned


logger = logging.getLogger(__name__)


Failure = Tuple[Path, OSError]


def resolve_root(root: str | os.PathLike) -> Path:
    """
    Validate a scan root and return it as an absolute path.

    Symlinks are not resolved so document paths keep the caller's spelling.

    Raises:
        InvalidRoot: the path does not exist or is not a directory
        RootAccessError: the path could not be stat'ed for another reason
    """
    path = Path(os.path.abspath(os.path.expanduser(root)))
    try:
        stat = path.stat()
    except (FileNotFoundError, NotADirectoryError) as e:
        raise InvalidRoot(path, "does not exist") from e
    except OSError as e:
        raise RootAccessError(path, e) from e

    if not S_ISDIR(stat.st_mode):
        raise InvalidRoot(path, "not a directory")
    return path


class Walker:
    """
    Depth-first walker over one scan root.

    Yields a Candidate for every file and every non-pruned directory.
    Symlinks are reported with their target's metadata but never
    descended, so link cycles cannot trap the walk.
    """

    def __init__(
        self,
        root: Path,
        spec: FilterSpec,
        cancel: CancelToken,
        strict: bool = False,
    ):
        self.root = root
        self.spec = spec
        self.cancel = cancel
        self.strict = strict

        self.scanned_count = 0
        self.pruned_count = 0
        self.error_count = 0

        # Set on teardown; read by the walker thread between entries
        self._stop = threading.Event()

    async def walk(self) -> AsyncGenerator[Candidate, None]:
        """
        Iterate over candidates under the root.

        The walker thread is joined before the generator finishes, so once
        the scan returns or raises no directory read is still in flight.

        Raises:
            RootAccessError: the root itself could not be listed
            EntryReadError: an entry failed and strict mode is on
            ScanCancelled: the cancel token fired
        """
        loop = asyncio.get_running_loop()
        executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="docscan-walk")
        self._stop.clear()

        try:
            if is_pruned(self.root.name, self.spec):
                logger.debug(f"Root itself is excluded: {self.root}")
                self.pruned_count += 1
                return

            stack: List[Path] = [self.root]
            while stack:
                self.cancel.raise_if_cancelled()
                directory = stack.pop()

                try:
                    candidates, failures = await loop.run_in_executor(
                        executor, self._read_directory, directory
                    )
                except OSError as e:
                    if directory == self.root:
                        raise RootAccessError(self.root, e) from e
                    self._entry_failed(e, directory, "read_directory")
                    continue

                # A read cut short by the token returns a partial listing
                self.cancel.raise_if_cancelled()

                for path, error in failures:
                    self._entry_failed(error, path, "stat")

                for candidate in candidates:
                    self.cancel.raise_if_cancelled()

                    if candidate.is_dir:
                        if is_pruned(candidate.name, self.spec):
                            logger.debug(f"Pruned: {candidate.path}")
                            self.pruned_count += 1
                            continue
                        if not candidate.is_symlink:
                            stack.append(candidate.path)

                    self.scanned_count += 1
                    yield candidate
        finally:
            self._stop.set()
            executor.shutdown(wait=False, cancel_futures=True)
            # Join off the loop; the read in flight stops at its next entry
            await loop.run_in_executor(None, executor.shutdown)

    def _entry_failed(self, error: OSError, path: Path, context: str) -> None:
        self.error_count += 1
        action = handle_entry_error(error, path, context, strict=self.strict)
        if action == ErrorAction.ABORT:
            raise EntryReadError(path, error) from error

    def _stopping(self) -> bool:
        return self._stop.is_set() or self.cancel.cancelled

    def _read_directory(self, directory: Path) -> Tuple[List[Candidate], List[Failure]]:
        """
        List one directory and stat each entry.

        Runs on the walker thread. Errors opening the directory propagate;
        errors on individual entries are collected and returned. The token
        and the walker's stop flag are checked before every entry, so a
        large directory is abandoned part way through.
        """
        candidates: List[Candidate] = []
        failures: List[Failure] = []

        with os.scandir(directory) as entries:
            for entry in entries:
                if self._stopping():
                    break
                try:
                    is_symlink = entry.is_symlink()
                    stat = entry.stat(follow_symlinks=True)
                    candidates.append(Candidate.from_entry(entry, stat, is_symlink=is_symlink))
                except OSError as e:
                    failures.append((Path(entry.path), e))

        return candidates, failures
