"""Tests for the command-line interface."""

import pytest

from makeepub import __version__
from makeepub.cli import utils
from makeepub.cli.app import app


@pytest.fixture(autouse=True)
def reset_context():
    """Flags are stored globally; start every test from the defaults."""
    utils.set_context(verbose=False, quiet=0)
    yield
    utils.set_context(verbose=False, quiet=0)


class TestExitCodes:
    """Tests for exit codes."""

    def test_success(self, cli_runner, book_dir, tmp_path):
        """A complete build exits 0 and writes the book."""
        output = tmp_path / "cli.epub"
        result = cli_runner.invoke(app, [str(book_dir), str(output)])

        assert result.exit_code == 0, result.output
        assert output.exists()
        assert "Done, time used" in result.output

    def test_zip_source(self, cli_runner, book_zip, tmp_path):
        """Zip sources work the same way."""
        output = tmp_path / "zip.epub"
        result = cli_runner.invoke(app, [str(book_zip), str(output)])

        assert result.exit_code == 0, result.output
        assert output.exists()

    def test_missing_source_argument(self, cli_runner):
        """No arguments is a usage error with exit code 1."""
        result = cli_runner.invoke(app, [])

        assert result.exit_code == 1
        assert "Usage:" in result.output

    def test_nonexistent_source(self, cli_runner, tmp_path):
        """A source that does not exist fails with exit code 1."""
        result = cli_runner.invoke(app, [str(tmp_path / "nope")])

        assert result.exit_code == 1
        assert "Failed to get source folder/file information" in result.output

    def test_fatal_stage_error(self, cli_runner, make_book_dir, book_files, tmp_path):
        """Stage failures name the stage and exit 1."""
        files = {k: v for k, v in book_files.items() if k != "cover.html"}
        root = make_book_dir(files)
        output = tmp_path / "never.epub"
        result = cli_runner.invoke(app, [str(root), str(output)])

        assert result.exit_code == 1
        assert "Failed to set cover page" in result.output
        assert not output.exists()

    def test_corrupt_archive(self, cli_runner, tmp_path):
        """A file that is not a zip fails with exit code 1."""
        bogus = tmp_path / "bogus.zip"
        bogus.write_bytes(b"nope")
        result = cli_runner.invoke(app, [str(bogus)])

        assert result.exit_code == 1
        assert "Failed to open source zip file" in result.output


class TestOutput:
    """Tests for what the CLI prints."""

    def test_warnings_are_printed(self, cli_runner, make_book_dir, book_files):
        """Non-fatal problems are shown as warnings and exit 0."""
        root = make_book_dir({**book_files, "book.ini": b"[book]\nid = x\n"})
        result = cli_runner.invoke(app, [str(root)])

        assert result.exit_code == 0, result.output
        assert "Book name is empty." in result.output
        assert "Output path has not been set." in result.output

    def test_dry_run_lists_chapters(self, cli_runner, book_dir, tmp_path):
        """--dry-run prints the outline and writes nothing."""
        output = tmp_path / "dry.epub"
        result = cli_runner.invoke(app, ["--dry-run", str(book_dir), str(output)])

        assert result.exit_code == 0, result.output
        assert not output.exists()
        assert "A.1" in result.output
        assert "Chapters" in result.output

    def test_silent(self, cli_runner, make_book_dir, book_files):
        """--silent prints nothing, even on failure."""
        files = {k: v for k, v in book_files.items() if k != "book.ini"}
        result = cli_runner.invoke(app, ["--silent", str(make_book_dir(files))])

        assert result.exit_code == 1
        assert result.output.strip() == ""

    def test_version(self, cli_runner):
        """--version prints the version."""
        result = cli_runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.output
