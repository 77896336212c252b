"""Markdown rendering of parsed files."""
