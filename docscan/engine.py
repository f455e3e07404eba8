"""
Engine - Main entry point for document discovery.

Runs a three-stage bounded pipeline per scan:
- Producer: one Walker task, serial directory reads, subtree pruning
- Filter workers: fixed pool evaluating the FilterSpec per candidate
- Collector: single task accumulating accepted Documents

Stages are joined by bounded queues, so a slow stage applies
backpressure upstream instead of buffering the whole tree. Every task
is torn down explicitly when the scan finishes, fails or is cancelled.
"""

import asyncio
import json
import logging
import os
import sys
import time
from contextlib import aclosing
from pathlib import Path
from typing import List, Optional

from .cancel import CancelToken
from .config import DiscoveryConfig, get_config
from .errors import DiscoveryError, InvalidRoot, ScanCancelled
from .models import Document, FilterSpec, ScanResult
from .patterns import evaluate
from .scanner import Walker, resolve_root


logger = logging.getLogger(__name__)

# End-of-stream marker on both queues
_END = object()


class Engine:
    """
    Concurrent document discovery over a local directory tree.

    The engine holds only configuration; each call builds its own queues,
    tasks and walker thread, so concurrent calls never share state.
    """

    def __init__(self, config: Optional[DiscoveryConfig] = None):
        self.config = config or get_config()

    async def discover(
        self,
        root: str | os.PathLike,
        filters: Optional[FilterSpec] = None,
        cancel: Optional[CancelToken] = None,
    ) -> List[Document]:
        """
        Find documents under ``root`` that pass ``filters``.

        Returns:
            Documents sorted by relative path (empty when nothing matches)

        Raises:
            InvalidRoot: root missing or not a directory
            RootAccessError: root could not be read
            ScanCancelled: cancel token fired before the scan completed
            EntryReadError: an entry could not be read in strict mode
        """
        result = await self.scan(root, filters, cancel)
        return result.documents

    async def scan(
        self,
        root: str | os.PathLike,
        filters: Optional[FilterSpec] = None,
        cancel: Optional[CancelToken] = None,
    ) -> ScanResult:
        """Same contract as ``discover`` but returns the documents with scan statistics."""
        root_path = resolve_root(root)
        spec = filters if filters is not None else self.config.default_filters()
        token = cancel if cancel is not None else CancelToken.with_timeout(self.config.scan_timeout)
        token.raise_if_cancelled()

        start_time = time.monotonic()
        worker_count = self.config.filter_workers
        logger.info(f"Scanning {root_path} with {worker_count} filter workers")

        walker = Walker(root_path, spec, token, strict=self.config.strict)
        candidates: asyncio.Queue = asyncio.Queue(maxsize=self.config.candidate_queue_size)
        matches: asyncio.Queue = asyncio.Queue(maxsize=self.config.match_queue_size)
        documents: List[Document] = []

        producer = asyncio.create_task(
            self._produce(walker, candidates, worker_count), name="docscan-producer"
        )
        workers = [
            asyncio.create_task(
                self._filter_worker(i, candidates, matches, spec, root_path, token),
                name=f"docscan-filter-{i}",
            )
            for i in range(worker_count)
        ]
        closer = asyncio.create_task(self._close_matches(workers, matches), name="docscan-closer")
        collector = asyncio.create_task(
            self._collect(matches, documents, token), name="docscan-collector"
        )
        watcher = asyncio.create_task(self._watch(token), name="docscan-cancel")
        tasks = [producer, *workers, closer, collector, watcher]

        try:
            pending = set(tasks)
            while not collector.done():
                done, pending = await asyncio.wait(pending, return_when=asyncio.FIRST_COMPLETED)
                for task in done:
                    if not task.cancelled() and task.exception() is not None:
                        raise task.exception()

            # A cancelled scan never returns data
            token.raise_if_cancelled()
        except ScanCancelled:
            logger.info(f"Scan of {root_path} cancelled, discarding {len(documents)} documents")
            raise
        finally:
            await self._teardown(tasks)

        documents.sort(key=lambda d: d.relative_path)
        result = ScanResult(
            root=root_path,
            documents=documents,
            scanned_count=walker.scanned_count,
            pruned_count=walker.pruned_count,
            error_count=walker.error_count,
            duration_seconds=time.monotonic() - start_time,
        )
        logger.info(str(result))
        return result

    async def _produce(self, walker: Walker, candidates: asyncio.Queue, worker_count: int) -> None:
        """Feed candidates to the workers, then one end marker per worker."""
        async with aclosing(walker.walk()) as stream:
            async for candidate in stream:
                await candidates.put(candidate)

        for _ in range(worker_count):
            await candidates.put(_END)

    async def _filter_worker(
        self,
        worker_id: int,
        candidates: asyncio.Queue,
        matches: asyncio.Queue,
        spec: FilterSpec,
        root: Path,
        token: CancelToken,
    ) -> None:
        evaluated = 0
        while True:
            token.raise_if_cancelled()
            candidate = await candidates.get()
            if candidate is _END:
                break

            evaluated += 1
            document = evaluate(candidate, spec, root)
            if document is not None:
                token.raise_if_cancelled()
                await matches.put(document)

        logger.debug(f"Filter worker {worker_id} done after {evaluated} candidates")

    async def _close_matches(self, workers: List[asyncio.Task], matches: asyncio.Queue) -> None:
        """Close the match stream once every worker has finished."""
        await asyncio.wait(workers)
        await matches.put(_END)

    async def _collect(self, matches: asyncio.Queue, documents: List[Document], token: CancelToken) -> None:
        while True:
            token.raise_if_cancelled()
            document = await matches.get()
            if document is _END:
                return
            documents.append(document)

    async def _watch(self, token: CancelToken) -> None:
        await token.wait()
        raise ScanCancelled("Scan cancelled")

    async def _teardown(self, tasks: List[asyncio.Task]) -> None:
        """Cancel whatever is still running and wait until it has exited."""
        for task in tasks:
            if not task.done():
                task.cancel()

        results = await asyncio.gather(*tasks, return_exceptions=True)
        for task, outcome in zip(tasks, results):
            if isinstance(outcome, Exception) and not isinstance(outcome, DiscoveryError):
                logger.debug(f"Task {task.get_name()} exited with {outcome!r}")


async def discover_documents(
    root: str | os.PathLike,
    filters: Optional[FilterSpec] = None,
    cancel: Optional[CancelToken] = None,
    config: Optional[DiscoveryConfig] = None,
) -> List[Document]:
    """
    Convenience function to run a single discovery.

    Usage:
        docs = await discover_documents("/home/me/notes")
        for doc in docs:
            print(doc.relative_path)
    """
    return await Engine(config).discover(root, filters, cancel)


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point."""
    import argparse

    parser = argparse.ArgumentParser(description="Find documents under a directory")
    parser.add_argument("root", help="Directory to scan")
    parser.add_argument("--include-ext", nargs="*", help="Extensions to include (default: md)")
    parser.add_argument("--include-dir", nargs="*", help="Parent directory patterns to include")
    parser.add_argument("--exclude-ext", nargs="*", help="Extensions to exclude")
    parser.add_argument("--exclude-dir", nargs="*", help="Directory patterns to prune")
    parser.add_argument("--timeout", type=float, help="Abort the scan after this many seconds")
    parser.add_argument("--workers", type=int, help="Number of filter workers")
    parser.add_argument("--strict", action="store_true", help="Abort on the first unreadable entry")
    parser.add_argument("--json", action="store_true", help="Print a JSON document list")
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose output")

    args = parser.parse_args(argv)

    # Configure logging
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="[%(levelname)s] %(name)s: %(message)s"
    )

    config = DiscoveryConfig.from_env()
    if args.include_ext is not None:
        config.include_extensions = set(args.include_ext)
    if args.include_dir is not None:
        config.include_dir_names = set(args.include_dir)
    if args.exclude_ext is not None:
        config.exclude_extensions = set(args.exclude_ext)
    if args.exclude_dir is not None:
        config.exclude_dir_names = set(args.exclude_dir)
    if args.timeout is not None:
        config.scan_timeout = args.timeout
    if args.workers is not None:
        config.filter_workers = args.workers
    if args.strict:
        config.strict = True

    try:
        config.validate()
    except ValueError as e:
        parser.error(str(e))

    try:
        result = asyncio.run(Engine(config).scan(args.root))
    except InvalidRoot as e:
        print(f"error: {e}", file=sys.stderr)
        return 2
    except ScanCancelled as e:
        print(f"error: {e}", file=sys.stderr)
        return 3
    except DiscoveryError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps({"documents": [d.to_dict() for d in result.documents]}, indent=2))
    else:
        for document in result.documents:
            print(document.relative_path.as_posix())
        print(f"\n{result}", file=sys.stderr)

    return 0


if __name__ == "__main__":
    sys.exit(main())
