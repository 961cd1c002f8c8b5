"""Command-line interface for makeepub."""
