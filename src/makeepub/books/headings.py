"""Heading line detection."""

from __future__ import annotations

import re
from dataclasses import dataclass

MAX_HEADING_LEVEL = 6

# <hN ...>text</hN> alone on a line; the open and close levels are compared after matching
HEADING_PATTERN = re.compile(
    rb"^[ \t]*<[hH]([1-6])(?:\s[^>]*)?>([^<]*)</[hH]([1-6])>[ \t]*$"
)


@dataclass(frozen=True)
class HeadingMarker:
    """A line that opens a new section."""

    depth: int  # 1-6, from the tag level
    title: str


def detect_heading(line: bytes) -> HeadingMarker | None:
    """Classify a single line as a heading or not.

    The line must hold exactly one ``<hN>`` element, with the same level on
    the opening and closing tag and no other markup inside. Spaces and tabs
    around the element are ignored.

    Args:
        line: One line without its line terminator.

    Returns:
        The marker, or None if the line is ordinary content.
    """
    match = HEADING_PATTERN.match(line)
    if match is None or match.group(1) != match.group(3):
        return None
    return HeadingMarker(
        depth=int(match.group(1)),
        title=match.group(2).decode("utf-8", errors="replace"),
    )
