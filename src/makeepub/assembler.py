"""Build an e-book from a source, stage by stage.

Stages run in a fixed order and the first fatal error stops the build. The
error carries the stage it came from. Problems that do not stop the build
(missing metadata, a bad depth value, no output path) are collected as
:class:`Diagnostic` entries on the returned :class:`BuildReport`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from makeepub.assets import (
    CONFIG_ENTRY,
    CONTENT_ENTRY,
    COVER_ENTRY,
    collect_assets,
)
from makeepub.books.segmenter import Chapter, ChapterSegmenter
from makeepub.config.book import BookConfig
from makeepub.config.settings import Settings, get_settings
from makeepub.container import EpubBook
from makeepub.exceptions import MakeEpubError
from makeepub.sources import Source, open_entry, read_entry

logger = logging.getLogger(__name__)


class Stage(str, Enum):
    """Build stages, in execution order."""

    CONFIG = "config"
    CREATE = "create"
    METADATA = "metadata"
    COVER = "cover"
    ASSETS = "assets"
    DEPTH = "depth"
    CHAPTERS = "chapters"
    SAVE = "save"


# Message shown when a stage fails
STAGE_FAILURES = {
    Stage.CONFIG: f"Failed to open '{CONFIG_ENTRY}'",
    Stage.CREATE: "Failed to create epub book",
    Stage.METADATA: "Failed to set book metadata",
    Stage.COVER: "Failed to set cover page",
    Stage.ASSETS: "Failed to add files to book",
    Stage.DEPTH: "Failed to resolve chapter depth",
    Stage.CHAPTERS: "Failed to add chapters to book",
    Stage.SAVE: "Failed to create output file",
}


@dataclass
class Diagnostic:
    """A non-fatal problem found during the build."""

    stage: Stage
    message: str

    def __str__(self) -> str:
        return self.message


@dataclass
class BuildReport:
    """Outcome of a successful build."""

    book: EpubBook
    depth: int = 1
    chapters: list[Chapter] = field(default_factory=list)
    files: list[str] = field(default_factory=list)
    output_path: Path | None = None
    diagnostics: list[Diagnostic] = field(default_factory=list)

    @property
    def saved(self) -> bool:
        return self.output_path is not None


class BookAssembler:
    """Turn a source into an e-book.

    Example:
        >>> with open_source(Path("mybook")) as source:
        ...     report = BookAssembler(source).assemble()
    """

    def __init__(
        self,
        source: Source,
        output_override: Path | None = None,
        settings: Settings | None = None,
        dry_run: bool = False,
    ):
        """Initialize the assembler.

        Args:
            source: Where the book files come from.
            output_override: Output path that takes precedence over book.ini.
            settings: Tool settings; defaults to get_settings().
            dry_run: Run every stage except writing the output file.
        """
        self.source = source
        self.output_override = output_override
        self.settings = settings or get_settings()
        self.dry_run = dry_run
        self.diagnostics: list[Diagnostic] = []

    def _warn(self, stage: Stage, message: str) -> None:
        logger.debug("Warning in %s stage: %s", stage.value, message)
        self.diagnostics.append(Diagnostic(stage=stage, message=message))

    def _run(self, stage: Stage, step, *args):
        """Run one stage, tagging any error with the stage."""
        logger.debug("Stage %s", stage.value)
        try:
            return step(*args)
        except MakeEpubError as e:
            if e.stage is None:
                e.stage = stage
            raise

    def load_config(self) -> BookConfig:
        with open_entry(self.source, CONFIG_ENTRY) as stream:
            return BookConfig.parse(stream)

    def set_metadata(self, book: EpubBook, config: BookConfig) -> None:
        name = config.get_string("/book/name", "")
        if not name:
            self._warn(Stage.METADATA, "Book name is empty.")
        book.set_name(name)

        author = config.get_string("/book/author", "")
        if not author:
            self._warn(Stage.METADATA, "Author name is empty.")
        book.set_author(author)

    def set_cover_page(self, book: EpubBook) -> None:
        book.set_cover_page(COVER_ENTRY, read_entry(self.source, COVER_ENTRY))

    def resolve_depth(self, book: EpubBook, config: BookConfig) -> int:
        """Read the split depth, falling back to 1 when invalid or out of range."""
        if not config.is_int("/book/depth"):
            raw = config.get_string("/book/depth")
            self._warn(Stage.DEPTH, f"Invalid 'depth' value '{raw}', reset to '1'.")
            return 1
        depth = config.get_int("/book/depth", 1)
        if depth < 1 or depth > book.max_depth():
            self._warn(Stage.DEPTH, f"Invalid 'depth' value {depth}, reset to '1'.")
            depth = 1
        return depth

    def add_chapters(self, book: EpubBook, depth: int) -> list[Chapter]:
        footer = self.settings.segmentation.chapter_footer.encode("utf-8")
        segmenter = ChapterSegmenter(max_depth=depth, footer=footer)
        chapters = segmenter.segment_entry(self.source, CONTENT_ENTRY)
        for chapter in chapters:
            book.add_chapter(chapter.title, chapter.content, chapter.depth)
        return chapters

    def resolve_output_path(self, config: BookConfig) -> Path | None:
        """Pick the output path: override first, then /output/path from book.ini."""
        if self.output_override is not None and str(self.output_override):
            path = Path(self.output_override)
        else:
            configured = config.get_string("/output/path", "")
            if not configured:
                return None
            path = Path(configured)

        base = self.settings.output.directory
        if base is not None and not path.is_absolute():
            path = Path(base) / path
        return path

    def assemble(self) -> BuildReport:
        """Run every stage.

        Returns:
            Report with the book, chapters, registered files, output path
            (None when nothing was written) and warnings.

        Raises:
            MakeEpubError: From the first stage that fails; ``stage`` is set.
        """
        self.diagnostics = []

        config = self._run(Stage.CONFIG, self.load_config)
        book = self._run(Stage.CREATE, EpubBook.create, config.get_string("/book/id", ""))
        self._run(Stage.METADATA, self.set_metadata, book, config)
        self._run(Stage.COVER, self.set_cover_page, book)
        files = self._run(Stage.ASSETS, collect_assets, self.source, book)
        depth = self._run(Stage.DEPTH, self.resolve_depth, book, config)
        chapters = self._run(Stage.CHAPTERS, self.add_chapters, book, depth)

        report = BuildReport(
            book=book,
            depth=depth,
            chapters=chapters,
            files=files,
            diagnostics=self.diagnostics,
        )

        output_path = self.resolve_output_path(config)
        if output_path is None:
            self._warn(Stage.SAVE, "Output path has not been set.")
        elif self.dry_run:
            logger.info("Dry run, not writing %s", output_path)
        else:
            self._run(Stage.SAVE, book.save, output_path)
            report.output_path = output_path
        return report


def assemble_book(
    source: Source,
    output_override: Path | None = None,
    settings: Settings | None = None,
    dry_run: bool = False,
) -> BuildReport:
    """Build an e-book from ``source``. See :class:`BookAssembler`."""
    return BookAssembler(
        source,
        output_override=output_override,
        settings=settings,
        dry_run=dry_run,
    ).assemble()
