"""makeepub: Build EPUB books from folders or zip files of HTML pages.

A book source holds three reserved files plus any supporting files
(images, stylesheets, fonts):

- ``book.ini``: metadata (``[book]`` id, name, author, depth; ``[output]`` path)
- ``book.html``: the whole text, split into chapters at heading lines
- ``cover.html``: the first page

Example:
    >>> from pathlib import Path
    >>> from makeepub import open_source, assemble_book
    >>>
    >>> with open_source(Path("mybook.zip")) as source:
    ...     report = assemble_book(source, output_override=Path("mybook.epub"))
    >>> [c.title for c in report.chapters]
"""

__version__ = "1.0.0"

from makeepub.assembler import BookAssembler, BuildReport, Diagnostic, Stage, assemble_book
from makeepub.books import Chapter, ChapterSegmenter, HeadingMarker, detect_heading
from makeepub.config import BookConfig, Settings, get_settings
from makeepub.container import EpubBook
from makeepub.exceptions import (
    ArchiveError,
    BookConfigError,
    BookIOError,
    ContainerError,
    DepthExceededError,
    EntryNotFoundError,
    MakeEpubError,
    MalformedDocumentError,
    MalformedError,
    NameCollisionError,
    SourceNotFoundError,
    SourceReadError,
)
from makeepub.sources import ArchiveSource, DirectorySource, open_source, read_entry, traverse

__all__ = [
    "__version__",
    # Sources
    "open_source",
    "read_entry",
    "traverse",
    "DirectorySource",
    "ArchiveSource",
    # Segmentation
    "detect_heading",
    "HeadingMarker",
    "Chapter",
    "ChapterSegmenter",
    # Building
    "assemble_book",
    "BookAssembler",
    "BuildReport",
    "Diagnostic",
    "Stage",
    "EpubBook",
    # Configuration
    "BookConfig",
    "Settings",
    "get_settings",
    # Exceptions
    "MakeEpubError",
    "SourceNotFoundError",
    "EntryNotFoundError",
    "MalformedError",
    "BookConfigError",
    "ArchiveError",
    "MalformedDocumentError",
    "SourceReadError",
    "BookIOError",
    "ContainerError",
    "NameCollisionError",
    "DepthExceededError",
]
