"""book.ini: per-book metadata read from the source.

Values are addressed by key path: ``/book/name`` is key ``name`` in section
``[book]``; ``/name`` is a key written before the first section. Paths are
case-insensitive.
"""

from __future__ import annotations

import configparser
import logging
from typing import IO

from makeepub.exceptions import BookConfigError

logger = logging.getLogger(__name__)

# Keys that appear before any [section] header are parsed under this name
_ROOT_SECTION = "__root__"


class BookConfig:
    """Parsed book.ini with key-path lookup."""

    def __init__(self, values: dict[str, str] | None = None):
        self._values = {k.lower(): v for k, v in (values or {}).items()}

    @classmethod
    def parse(cls, stream: IO[bytes]) -> BookConfig:
        """Parse an INI document.

        Args:
            stream: Binary stream holding UTF-8 text (a BOM is allowed).

        Returns:
            Parsed configuration.

        Raises:
            BookConfigError: If the bytes are not UTF-8 or not valid INI.
        """
        try:
            text = stream.read().decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise BookConfigError("Failed to parse 'book.ini'", details=f"Not UTF-8: {e}") from e

        parser = configparser.ConfigParser(
            interpolation=None,
            strict=False,
            delimiters=("=",),
            comment_prefixes=("#", ";"),
            default_section="\x00defaults",
        )
        try:
            parser.read_string(f"[{_ROOT_SECTION}]\n{text}", source="book.ini")
        except configparser.Error as e:
            raise BookConfigError("Failed to parse 'book.ini'", details=str(e)) from e

        values: dict[str, str] = {}
        for section in parser.sections():
            prefix = "" if section == _ROOT_SECTION else f"/{section.strip()}"
            for key, value in parser.items(section):
                values[f"{prefix}/{key}"] = value.strip()
        logger.debug("Loaded %d values from book.ini", len(values))
        return cls(values)

    def __contains__(self, path: str) -> bool:
        return path.lower() in self._values

    def get_string(self, path: str, default: str = "") -> str:
        """Get a string value, or ``default`` if the key is absent."""
        return self._values.get(path.lower(), default)

    def is_int(self, path: str) -> bool:
        """Whether the value at ``path`` is absent, empty or an integer."""
        raw = self._values.get(path.lower())
        if not raw:
            return True
        try:
            int(raw)
        except ValueError:
            return False
        return True

    def get_int(self, path: str, default: int = 0) -> int:
        """Get an integer value.

        Absent keys return ``default``; values that are not integers are
        logged and also return ``default``.
        """
        raw = self._values.get(path.lower())
        if raw is None or raw == "":
            return default
        try:
            return int(raw)
        except ValueError:
            logger.warning("'%s' is not an integer (%r), using %d", path, raw, default)
            return default
