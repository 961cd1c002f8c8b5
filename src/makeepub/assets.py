"""Collect supporting files (images, stylesheets...) from a source."""

from __future__ import annotations

import logging

from makeepub.container import EpubBook
from makeepub.sources import Source, read_entry, traverse

logger = logging.getLogger(__name__)

CONFIG_ENTRY = "book.ini"
CONTENT_ENTRY = "book.html"
COVER_ENTRY = "cover.html"

RESERVED_ENTRIES = frozenset({CONFIG_ENTRY, CONTENT_ENTRY, COVER_ENTRY})


def is_reserved(entry: str, reserved: frozenset[str] = RESERVED_ENTRIES) -> bool:
    """Check whether an entry is one of the reserved book files (any letter case)."""
    return entry.lower() in reserved


def collect_assets(
    source: Source,
    book: EpubBook,
    reserved: frozenset[str] = RESERVED_ENTRIES,
) -> list[str]:
    """Add every non-reserved entry of ``source`` to ``book``.

    Each entry is read in full and registered under its original relative
    path before the next one is opened.

    Args:
        source: Source to traverse.
        book: Book receiving the files.
        reserved: Lower-case entry names to leave out.

    Returns:
        Registered entry paths in traversal order.

    Raises:
        SourceReadError: If an entry cannot be read.
        NameCollisionError: If two entries map to the same name in the book.
    """
    added: list[str] = []

    def visit(entry: str) -> None:
        if is_reserved(entry, reserved):
            logger.debug("Skipping reserved entry %s", entry)
            return
        book.add_file(entry, read_entry(source, entry))
        added.append(entry)

    traverse(source, visit)
    logger.debug("Added %d supporting files", len(added))
    return added
