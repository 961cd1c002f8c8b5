"""Custom exceptions for makeepub."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from makeepub.assembler import Stage


class MakeEpubError(Exception):
    """Base exception for all makeepub errors."""

    exit_code: int = 1
    default_hint: str | None = None

    def __init__(
        self,
        message: str,
        details: str | None = None,
        hint: str | None = None,
    ):
        self.message = message
        self.details = details
        self.hint = hint or self.default_hint
        # Set by the assembler when the error crosses a stage boundary
        self.stage: Stage | None = None
        super().__init__(message)


# Not found
class SourceNotFoundError(MakeEpubError):
    """The source folder or archive does not exist."""

    default_hint = "Pass a book folder or a .zip file containing book.ini"


class EntryNotFoundError(MakeEpubError):
    """A required entry is missing from the source."""

    def __init__(self, entry: str, details: str | None = None, hint: str | None = None):
        self.entry = entry
        super().__init__(f"'{entry}' not found in source", details=details, hint=hint)


# Malformed input
class MalformedError(MakeEpubError):
    """Input could not be parsed."""


class BookConfigError(MalformedError):
    """book.ini could not be parsed."""

    default_hint = "book.ini must be an INI file, e.g. '[book]' followed by 'id = ...'"


class ArchiveError(MalformedError):
    """The source archive is corrupt or not a zip file."""

    default_hint = "Ensure the source is a valid .zip archive"


class MalformedDocumentError(MalformedError):
    """The main document has no usable structure."""

    default_hint = "book.html needs a line holding only the <body> tag"


# I/O failures
class SourceReadError(MakeEpubError):
    """Reading an entry from the source failed."""


class BookIOError(MakeEpubError):
    """Writing the output book failed."""

    default_hint = "Check that the output directory exists and is writable"


# Container errors
class ContainerError(MakeEpubError):
    """The book container rejected an operation."""


class NameCollisionError(ContainerError):
    """A file with the same name is already part of the book."""


class DepthExceededError(ContainerError):
    """A chapter is nested deeper than the book supports."""
