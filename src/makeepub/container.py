"""EPUB container built on ebooklib.

:class:`EpubBook` collects metadata, the cover page, supporting files and
chapters, then writes them out as one .epub file. Chapters are placed in the
table of contents according to their depth.
"""

from __future__ import annotations

import html
import logging
import mimetypes
from dataclasses import dataclass, field
from pathlib import Path

from ebooklib import epub

from makeepub.exceptions import (
    BookIOError,
    ContainerError,
    DepthExceededError,
    NameCollisionError,
)

logger = logging.getLogger(__name__)

MAX_DEPTH = 3

# Written by ebooklib itself
_GENERATED_NAMES = frozenset({"content.opf", "toc.ncx", "nav.xhtml"})


class PageItem(epub.EpubHtml):
    """XHTML page written exactly as given.

    ebooklib rebuilds EpubHtml pages from its own template and keeps only the
    body, dropping stylesheet links and styles from the page head.
    """

    def get_content(self, default=None):
        return self.content or (default or b"")


@dataclass
class _TocNode:
    item: PageItem
    depth: int
    children: list[_TocNode] = field(default_factory=list)


def _toc_entries(nodes: list[_TocNode]) -> list:
    entries: list = []
    for node in nodes:
        if node.children:
            section = epub.Section(node.item.title, href=node.item.file_name)
            entries.append((section, _toc_entries(node.children)))
        else:
            entries.append(node.item)
    return entries


class EpubBook:
    """An e-book being assembled.

    Example:
        >>> book = EpubBook.create("urn:uuid:1234")
        >>> book.set_name("My Book")
        >>> book.add_chapter("One", b"<html><body><p>Hi</p></body></html>", 1)
        >>> book.save(Path("my-book.epub"))
    """

    def __init__(self, identifier: str):
        self.identifier = identifier
        self.name = ""
        self.author = ""
        self._book = epub.EpubBook()
        self._book.set_identifier(identifier)
        self._cover: PageItem | None = None
        self._chapters: list[PageItem] = []
        self._toc: list[_TocNode] = []
        self._open_nodes: list[_TocNode] = []
        self._names: set[str] = set(_GENERATED_NAMES)
        self.files: list[str] = []

    @classmethod
    def create(cls, identifier: str) -> EpubBook:
        """Create an empty book.

        Raises:
            ContainerError: If the identifier is empty.
        """
        identifier = identifier.strip()
        if not identifier:
            raise ContainerError(
                "Failed to create epub book",
                details="The book identifier is empty",
                hint="Set 'id' in the [book] section of book.ini",
            )
        return cls(identifier)

    @staticmethod
    def max_depth() -> int:
        """Deepest chapter level the table of contents supports."""
        return MAX_DEPTH

    @property
    def chapter_count(self) -> int:
        return len(self._chapters)

    def set_name(self, name: str) -> None:
        self.name = name
        self._book.set_title(name)

    def set_author(self, author: str) -> None:
        self.author = author
        if author:
            self._book.add_author(author)

    def _claim(self, name: str) -> None:
        key = name.lower()
        if key in self._names:
            raise NameCollisionError(
                f"'{name}' is already part of the book",
                hint="Rename the file so it does not clash with another entry",
            )
        self._names.add(key)

    def set_cover_page(self, name: str, data: bytes) -> None:
        """Use an HTML page as the first page of the book."""
        self._claim(name)
        self._cover = PageItem(uid="cover-page", title="Cover", file_name=name, content=data)
        self._book.add_item(self._cover)

    def add_file(self, path: str, data: bytes) -> None:
        """Add a supporting file (image, stylesheet, font...) under ``path``.

        Raises:
            NameCollisionError: If ``path`` is already taken (case-insensitive).
        """
        self._claim(path)
        media_type = mimetypes.guess_type(path)[0] or "application/octet-stream"
        item = epub.EpubItem(
            uid=f"file-{len(self.files) + 1}",
            file_name=path,
            media_type=media_type,
            content=data,
        )
        self._book.add_item(item)
        self.files.append(path)

    def add_chapter(self, title: str, content: bytes, depth: int) -> None:
        """Append a chapter to the reading order and the table of contents.

        Raises:
            DepthExceededError: If ``depth`` is not within 1..max_depth().
        """
        if not 1 <= depth <= MAX_DEPTH:
            raise DepthExceededError(
                f"Chapter '{title}' has depth {depth}",
                details=f"Supported depths are 1 to {MAX_DEPTH}",
            )

        number = len(self._chapters) + 1
        file_name = f"chapter_{number:04d}.xhtml"
        self._claim(file_name)
        label = html.unescape(title) if title else f"Chapter {number}"
        item = PageItem(uid=f"chapter-{number}", title=label, file_name=file_name, content=content)
        self._book.add_item(item)
        self._chapters.append(item)

        # Nest under the closest preceding chapter that is shallower
        node = _TocNode(item=item, depth=depth)
        while self._open_nodes and self._open_nodes[-1].depth >= depth:
            self._open_nodes.pop()
        if self._open_nodes:
            self._open_nodes[-1].children.append(node)
        else:
            self._toc.append(node)
        self._open_nodes.append(node)

    def toc_outline(self) -> list[tuple[int, str]]:
        """Flattened table of contents as (nesting level, title) pairs."""
        outline: list[tuple[int, str]] = []

        def walk(nodes: list[_TocNode], level: int) -> None:
            for node in nodes:
                outline.append((level, node.item.title))
                walk(node.children, level + 1)

        walk(self._toc, 1)
        return outline

    def save(self, path: Path) -> None:
        """Write the book as an .epub file.

        Raises:
            BookIOError: If the file cannot be written.
        """
        self._book.toc = _toc_entries(self._toc)
        self._book.add_item(epub.EpubNcx())
        self._book.add_item(epub.EpubNav())

        spine: list = []
        if self._cover is not None:
            spine.append(self._cover)
        spine.append("nav")
        spine.extend(self._chapters)
        self._book.spine = spine

        try:
            written = epub.write_epub(str(path), self._book, {"raise_exceptions": True})
        except OSError as e:
            raise BookIOError("Failed to create output file", details=f"{path}: {e}") from e
        if written is False:
            raise BookIOError("Failed to create output file", details=str(path))
        logger.info("Saved %s (%d chapters, %d files)", path, len(self._chapters), len(self.files))
