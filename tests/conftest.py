"""Pytest fixtures for makeepub tests."""

import os
import zipfile
from pathlib import Path

import pytest
from typer.testing import CliRunner

BOOK_INI = b"""[book]
id = urn:uuid:0d7c1f3a-5b5e-4c51-9a43-6e0c3f0f2b11
name = Sample Book
author = Jane Doe
depth = 2

[output]
path = sample.epub
"""

BOOK_HTML = b"""<html>
<head>
<title>Sample</title>
</head>
<body>
<h1>A</h1>
<p>p1</p>
<h2>A.1</h2>
<p>p2</p>
<h1>B</h1>
<p>p3</p>
</body>
</html>
"""

COVER_HTML = b"""<html>
<head><title>Cover</title></head>
<body><img src="images/cover.png" alt="cover"/></body>
</html>
"""

STYLE_CSS = b"body { margin: 0; }\n"
COVER_PNG = b"\x89PNG\r\n\x1a\n\x00\x00\x00\x00"


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    return CliRunner()


@pytest.fixture
def book_files() -> dict[str, bytes]:
    """Entries of a complete sample book."""
    return {
        "book.ini": BOOK_INI,
        "book.html": BOOK_HTML,
        "cover.html": COVER_HTML,
        "style.css": STYLE_CSS,
        "images/cover.png": COVER_PNG,
    }


def write_book_dir(root: Path, files: dict[str, bytes]) -> Path:
    """Lay out ``files`` under ``root``."""
    root.mkdir(parents=True, exist_ok=True)
    for name, data in files.items():
        path = root / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
    return root


def write_book_zip(path: Path, files: dict[str, bytes]) -> Path:
    """Pack ``files`` into a zip archive, in the given order."""
    with zipfile.ZipFile(path, "w") as archive:
        for name, data in files.items():
            archive.writestr(name, data)
    return path


@pytest.fixture
def book_dir(tmp_path, book_files) -> Path:
    """Sample book laid out as a folder."""
    return write_book_dir(tmp_path / "book", book_files)


@pytest.fixture
def book_zip(tmp_path, book_files) -> Path:
    """Sample book packed as a zip archive."""
    return write_book_zip(tmp_path / "book.zip", book_files)


@pytest.fixture
def make_book_dir(tmp_path):
    """Factory laying out arbitrary entries as a folder under tmp_path."""

    def make(files: dict[str, bytes], name: str = "custom") -> Path:
        return write_book_dir(tmp_path / name, files)

    return make


@pytest.fixture
def make_book_zip(tmp_path):
    """Factory packing arbitrary entries into a zip under tmp_path."""

    def make(files: dict[str, bytes], name: str = "custom.zip") -> Path:
        return write_book_zip(tmp_path / name, files)

    return make


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Keep the user's ~/.makeepub and MAKEEPUB_* variables out of tests."""
    from makeepub.config.settings import get_settings

    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    for name in list(os.environ):
        if name.startswith("MAKEEPUB_"):
            monkeypatch.delenv(name)
    get_settings.cache_clear()
    yield home
    get_settings.cache_clear()
