"""Tests for heading line detection."""

import pytest

from makeepub.books.headings import HeadingMarker, detect_heading


class TestDetectHeading:
    """Tests for detect_heading."""

    @pytest.mark.parametrize("level", [1, 2, 3, 4, 5, 6])
    def test_each_level_is_detected(self, level):
        """Every level from h1 to h6 yields its own depth."""
        line = f"<h{level}>Title</h{level}>".encode()
        assert detect_heading(line) == HeadingMarker(depth=level, title="Title")

    def test_surrounding_whitespace_is_ignored(self):
        """Spaces and tabs around the element do not matter."""
        marker = detect_heading(b" \t <h2>Intro</h2>\t ")
        assert marker == HeadingMarker(depth=2, title="Intro")

    def test_tag_name_is_case_insensitive(self):
        """<H1> and </h1> mix freely."""
        assert detect_heading(b"<H1>Upper</h1>") == HeadingMarker(depth=1, title="Upper")
        assert detect_heading(b"<h3>Lower</H3>") == HeadingMarker(depth=3, title="Lower")

    def test_attributes_on_opening_tag(self):
        """Attributes on the opening tag are allowed."""
        marker = detect_heading(b'<h1 class="part" id="p1">Part One</h1>')
        assert marker == HeadingMarker(depth=1, title="Part One")

    def test_title_is_not_trimmed(self):
        """Whitespace inside the element is kept as-is."""
        marker = detect_heading(b"<h1>  Spaced  </h1>")
        assert marker.title == "  Spaced  "

    def test_empty_title(self):
        """An empty heading still marks a boundary."""
        assert detect_heading(b"<h1></h1>") == HeadingMarker(depth=1, title="")

    def test_utf8_title(self):
        """Titles are decoded as UTF-8."""
        marker = detect_heading("<h1>第一章 始まり</h1>".encode("utf-8"))
        assert marker.title == "第一章 始まり"

    def test_mismatched_levels_do_not_match(self):
        """Opening and closing levels must agree."""
        assert detect_heading(b"<h1>Broken</h2>") is None
        assert detect_heading(b"<h3>Broken</h1>") is None

    def test_nested_markup_does_not_match(self):
        """Markup inside the heading disqualifies the line."""
        assert detect_heading(b"<h1><em>Styled</em></h1>") is None
        assert detect_heading(b"<h1>A <br/> B</h1>") is None

    def test_extra_content_on_line_does_not_match(self):
        """Anything else on the line disqualifies it."""
        assert detect_heading(b"<p>x</p><h1>Title</h1>") is None
        assert detect_heading(b"<h1>Title</h1><p>x</p>") is None
        assert detect_heading(b"<h1>Title</h1> tail") is None

    def test_out_of_range_levels_do_not_match(self):
        """h0, h7 and multi-digit levels are not headings."""
        assert detect_heading(b"<h0>No</h0>") is None
        assert detect_heading(b"<h7>No</h7>") is None
        assert detect_heading(b"<h12>No</h12>") is None

    def test_split_heading_does_not_match(self):
        """A heading spread over lines is ordinary content."""
        assert detect_heading(b"<h1>Start of") is None
        assert detect_heading(b"title</h1>") is None

    def test_plain_content(self):
        """Ordinary lines return None."""
        assert detect_heading(b"<p>Just text</p>") is None
        assert detect_heading(b"") is None
