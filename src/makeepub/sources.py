"""Uniform access to book sources: a folder on disk or a zip archive.

A source is one of two plain variants, :class:`DirectorySource` or
:class:`ArchiveSource`. Callers never look at which one they hold; they go
through :func:`open_entry`, :func:`read_entry` and :func:`traverse`, which
dispatch on the variant.

Example:
    >>> with open_source(Path("mybook.zip")) as source:
    ...     config = read_entry(source, "book.ini")
"""

from __future__ import annotations

import logging
import os
import zipfile
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import IO, Union

from makeepub.exceptions import (
    ArchiveError,
    EntryNotFoundError,
    SourceNotFoundError,
    SourceReadError,
)

logger = logging.getLogger(__name__)

# Called once per entry; raising aborts the traversal
Visitor = Callable[[str], None]


@dataclass(frozen=True)
class DirectorySource:
    """Book files laid out in a folder. Entry names are case-sensitive."""

    root: Path


@dataclass(frozen=True)
class ArchiveSource:
    """Book files packed in a zip archive. Entry names match case-insensitively."""

    path: Path
    archive: zipfile.ZipFile


Source = Union[DirectorySource, ArchiveSource]


@contextmanager
def open_source(path: Path) -> Iterator[Source]:
    """Open a folder or zip archive as a book source.

    The archive handle stays open until the ``with`` block exits, on every
    exit path.

    Args:
        path: Folder or zip file.

    Yields:
        The source variant for ``path``.

    Raises:
        SourceNotFoundError: If ``path`` does not exist.
        ArchiveError: If ``path`` is a file but not a readable zip archive.
    """
    path = Path(path)
    if not path.exists():
        raise SourceNotFoundError(
            "Failed to get source folder/file information",
            details=str(path),
        )

    if path.is_dir():
        logger.debug("Using folder source %s", path)
        yield DirectorySource(root=path)
        return

    try:
        archive = zipfile.ZipFile(path)
    except (zipfile.BadZipFile, OSError) as e:
        raise ArchiveError("Failed to open source zip file", details=f"{path}: {e}") from e

    logger.debug("Using archive source %s (%d entries)", path, len(archive.infolist()))
    try:
        yield ArchiveSource(path=path, archive=archive)
    finally:
        archive.close()


def _resolve_in_directory(source: DirectorySource, entry: str) -> Path:
    """Map an entry to a file under the root, refusing paths that escape it."""
    relative = PurePosixPath(entry.replace("\\", "/"))
    if relative.is_absolute() or ".." in relative.parts:
        raise EntryNotFoundError(entry, details="Entry path leaves the source folder")
    return source.root.joinpath(*relative.parts)


def _find_archive_member(source: ArchiveSource, entry: str) -> zipfile.ZipInfo:
    wanted = entry.lower()
    for info in source.archive.infolist():
        if info.filename.lower() == wanted:
            return info
    raise EntryNotFoundError(entry, details=f"No such entry in {source.path.name}")


@contextmanager
def open_entry(source: Source, entry: str) -> Iterator[IO[bytes]]:
    """Open one entry of a source as a binary stream.

    Args:
        source: Source to read from.
        entry: Relative entry path.

    Yields:
        Readable binary stream, closed when the block exits.

    Raises:
        EntryNotFoundError: If the entry does not exist.
        SourceReadError: If the entry exists but cannot be opened.
    """
    if isinstance(source, DirectorySource):
        path = _resolve_in_directory(source, entry)
        if not path.is_file():
            raise EntryNotFoundError(entry, details=f"No such file under {source.root}")
        try:
            stream = open(path, "rb")
        except OSError as e:
            raise SourceReadError(f"Failed to open '{entry}'", details=str(e)) from e
    elif isinstance(source, ArchiveSource):
        info = _find_archive_member(source, entry)
        try:
            stream = source.archive.open(info)
        except (zipfile.BadZipFile, OSError, RuntimeError) as e:
            raise SourceReadError(f"Failed to open '{entry}'", details=str(e)) from e
    else:
        raise TypeError(f"Unsupported source: {source!r}")

    with stream:
        yield stream


def read_entry(source: Source, entry: str) -> bytes:
    """Read the full content of one entry.

    Raises:
        EntryNotFoundError: If the entry does not exist.
        SourceReadError: If reading fails part way.
    """
    with open_entry(source, entry) as stream:
        try:
            return stream.read()
        except (OSError, zipfile.BadZipFile, EOFError) as e:
            raise SourceReadError(f"Failed to read '{entry}'", details=str(e)) from e


def _directory_entries(root: Path) -> Iterator[str]:
    def on_error(error: OSError) -> None:
        raise SourceReadError("Failed to list source folder", details=str(error)) from error

    for dirpath, dirnames, filenames in os.walk(root, onerror=on_error):
        # Lexical order, subfolders visited in place
        dirnames.sort()
        base = Path(dirpath).relative_to(root)
        for name in sorted(filenames):
            yield (base / name).as_posix()


def entries(source: Source) -> Iterator[str]:
    """Yield every file entry of a source in backend order."""
    if isinstance(source, DirectorySource):
        yield from _directory_entries(source.root)
    elif isinstance(source, ArchiveSource):
        for info in source.archive.infolist():
            if info.is_dir():
                continue
            yield info.filename
    else:
        raise TypeError(f"Unsupported source: {source!r}")


def traverse(source: Source, visit: Visitor) -> None:
    """Call ``visit`` once per file entry.

    Folder entries are visited in lexical order as POSIX paths relative to the
    root; archive entries in central-directory order with their names as
    stored. An exception raised by ``visit`` stops the traversal and
    propagates to the caller.
    """
    for entry in entries(source):
        visit(entry)
