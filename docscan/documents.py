"""
Documents - Read, write, create and delete single markdown documents.

The companions to discovery: once a scan has found a document, these
operate on it by absolute path. Filesystem calls run in the default
executor so the event loop never blocks on disk I/O.
"""

import asyncio
import logging
import os
from pathlib import Path

from .errors import DocumentAccessError, DocumentNotFound, InvalidDocument


logger = logging.getLogger(__name__)

# Only markdown documents may be created; the suffix check is case-sensitive
DOCUMENT_SUFFIX = ".md"


def _document_path(path: str | os.PathLike) -> Path:
    return Path(os.path.abspath(os.path.expanduser(path)))


async def _run(func, *args):
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, func, *args)


def _create(path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    # "x" refuses to clobber a file created since the existence check
    with open(path, "x", encoding="utf-8"):
        pass


async def read_document(path: str | os.PathLike) -> str:
    """
    Return the text of a document.

    Bytes that are not valid UTF-8 are replaced rather than rejected.

    Raises:
        DocumentNotFound: nothing exists at ``path``
        DocumentAccessError: the file could not be read
    """
    document = _document_path(path)
    try:
        return await _run(lambda: document.read_text(encoding="utf-8", errors="replace"))
    except FileNotFoundError as e:
        raise DocumentNotFound(document) from e
    except OSError as e:
        raise DocumentAccessError(document, e) from e


async def write_document(path: str | os.PathLike, content: str) -> None:
    """
    Replace the contents of a document, creating the file if needed.

    The parent directory must already exist.

    Raises:
        DocumentAccessError: the file could not be written
    """
    document = _document_path(path)
    try:
        await _run(lambda: document.write_text(content, encoding="utf-8"))
    except OSError as e:
        raise DocumentAccessError(document, e) from e

    logger.debug(f"Wrote {len(content)} characters to {document}")


async def create_document(path: str | os.PathLike) -> Path:
    """
    Create an empty markdown document, making parent directories as needed.

    Returns:
        The absolute path of the new document

    Raises:
        InvalidDocument: the name does not end in .md, or the file exists
        DocumentAccessError: the directory or file could not be created
    """
    document = _document_path(path)
    if not document.name.endswith(DOCUMENT_SUFFIX):
        raise InvalidDocument(document, f"must have {DOCUMENT_SUFFIX} extension")
    if document.exists():
        raise InvalidDocument(document, "already exists")

    try:
        await _run(_create, document)
    except FileExistsError as e:
        raise InvalidDocument(document, "already exists") from e
    except OSError as e:
        raise DocumentAccessError(document, e) from e

    logger.info(f"Created document {document}")
    return document


async def delete_document(path: str | os.PathLike) -> None:
    """
    Delete a document.

    Directories are refused; only files are removed.

    Raises:
        DocumentNotFound: nothing exists at ``path``
        DocumentAccessError: the entry could not be removed
    """
    document = _document_path(path)
    if not document.exists():
        raise DocumentNotFound(document)

    try:
        await _run(document.unlink)
    except FileNotFoundError as e:
        raise DocumentNotFound(document) from e
    except OSError as e:
        raise DocumentAccessError(document, e) from e

    logger.info(f"Deleted document {document}")
