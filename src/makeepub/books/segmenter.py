"""Split one HTML document into self-contained chapter documents.

The document is scanned line by line. Everything up to and including the
``<body>`` line is the *envelope*; it is copied to the front of every chapter
so that each chapter is a well-formed page on its own. Heading lines at or
above the split depth start a new chapter.

The scan is an explicit two-state machine: :class:`Prologue` while the
envelope is being read and :class:`Accumulating` afterwards. :func:`transition`
consumes one line and returns the next state plus the chapter it completed,
if any.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from typing import Union

from makeepub.books.headings import detect_heading
from makeepub.exceptions import MalformedDocumentError
from makeepub.sources import Source, read_entry

logger = logging.getLogger(__name__)

BODY_OPEN_PATTERN = re.compile(rb"^[ \t]*<body(?:\s[^>]*)?>[ \t]*$", re.IGNORECASE)

# Closes mid-stream chapters; the last chapter keeps the document's own closing tags
CHAPTER_FOOTER = b"\t</body>\n</html>"


@dataclass
class Chapter:
    """One chapter cut from the main document."""

    title: str
    depth: int
    content: bytes

    def __repr__(self) -> str:
        return f"Chapter({self.title!r}, depth={self.depth}, {len(self.content)} bytes)"


@dataclass
class Prologue:
    """Reading the envelope, before the body tag has been seen."""

    envelope: list[bytes] = field(default_factory=list)


@dataclass
class Accumulating:
    """Collecting lines for the current chapter."""

    envelope: bytes
    depth: int = 1
    title: str = ""
    lines: list[bytes] = field(default_factory=list)

    @property
    def has_content(self) -> bool:
        """True once anything beyond the envelope has been collected."""
        return bool(self.lines)

    def to_chapter(self, footer: bytes = b"") -> Chapter:
        return Chapter(
            title=self.title,
            depth=self.depth,
            content=self.envelope + b"".join(self.lines) + footer,
        )


ScanState = Union[Prologue, Accumulating]


def transition(
    state: ScanState,
    line: bytes,
    max_depth: int,
    footer: bytes = CHAPTER_FOOTER,
) -> tuple[ScanState, Chapter | None]:
    """Consume one line.

    Args:
        state: Current scan state.
        line: Line without its terminator.
        max_depth: Deepest heading level that still starts a chapter.
        footer: Appended to a chapter closed by a following heading.

    Returns:
        Tuple of (next state, completed chapter or None).
    """
    stored = line + b"\n"

    if isinstance(state, Prologue):
        state.envelope.append(stored)
        if BODY_OPEN_PATTERN.match(line):
            return Accumulating(envelope=b"".join(state.envelope)), None
        return state, None

    emitted = None
    marker = detect_heading(line)
    if marker is not None and marker.depth <= max_depth:
        if state.has_content:
            emitted = state.to_chapter(footer)
        state = Accumulating(envelope=state.envelope, depth=marker.depth, title=marker.title)

    state.lines.append(stored)
    return state, emitted


def finish(state: ScanState) -> Chapter | None:
    """Handle end of input.

    Returns:
        The trailing chapter, without footer, or None if nothing followed the
        last boundary.

    Raises:
        MalformedDocumentError: If the body tag was never found.
    """
    if isinstance(state, Prologue):
        raise MalformedDocumentError(
            "No <body> tag found in document",
            details=f"Read {len(state.envelope)} lines without finding the body",
        )
    if state.has_content:
        return state.to_chapter()
    return None


def split_lines(data: bytes) -> Iterator[bytes]:
    """Split raw bytes into lines, dropping ``\\n`` and a trailing ``\\r``."""
    if not data:
        return
    lines = data.split(b"\n")
    if lines[-1] == b"":
        lines.pop()
    for line in lines:
        yield line[:-1] if line.endswith(b"\r") else line


class ChapterSegmenter:
    """Cut a document into chapters at heading lines.

    Example:
        >>> segmenter = ChapterSegmenter(max_depth=2)
        >>> chapters = segmenter.segment(html_bytes)
    """

    def __init__(self, max_depth: int = 1, footer: bytes = CHAPTER_FOOTER):
        """Initialize the segmenter.

        Args:
            max_depth: Headings of this level or higher (h1..hN) start chapters.
            footer: Closing markup added to chapters that end at a heading.
        """
        if max_depth < 1:
            raise ValueError(f"max_depth must be at least 1, got {max_depth}")
        self.max_depth = max_depth
        self.footer = footer

    def segment_lines(self, lines: Iterable[bytes]) -> list[Chapter]:
        """Segment a sequence of lines (without terminators).

        Raises:
            MalformedDocumentError: If no body tag is found.
        """
        state: ScanState = Prologue()
        chapters: list[Chapter] = []
        for line in lines:
            state, chapter = transition(state, line, self.max_depth, self.footer)
            if chapter is not None:
                chapters.append(chapter)
        last = finish(state)
        if last is not None:
            chapters.append(last)
        logger.debug("Segmented %d chapters at depth %d", len(chapters), self.max_depth)
        return chapters

    def segment(self, data: bytes) -> list[Chapter]:
        """Segment a whole document held in memory."""
        return self.segment_lines(split_lines(data))

    def segment_entry(self, source: Source, entry: str) -> list[Chapter]:
        """Segment one entry of a source.

        Raises:
            EntryNotFoundError: If the entry does not exist.
            SourceReadError: If reading the entry fails.
            MalformedDocumentError: If no body tag is found.
        """
        return self.segment(read_entry(source, entry))
