"""Book processing: heading detection and chapter segmentation."""

from makeepub.books.headings import HeadingMarker, detect_heading
from makeepub.books.segmenter import Chapter, ChapterSegmenter

__all__ = ["HeadingMarker", "detect_heading", "Chapter", "ChapterSegmenter"]
