"""Line predicates for recognising documentation comment runs."""

from __future__ import annotations

DEFAULT_PREFIX = "///"


def is_doc_line(line: str, prefix: str) -> bool:
    """Return True when the trimmed line starts with the doc-comment prefix."""
    return line.strip().startswith(prefix)


def is_indented_doc_line(line: str, prefix: str) -> bool:
    """Return True when the prefix sits after leading whitespace instead of column 0.

    Only consulted while looking for where a run starts; lines inside a run
    that has already started are collected regardless of indentation.
    """
    position = line.find(prefix)
    return position > 0 and not line[:position].strip()


def is_boundary_doc_line(line: str, prefix: str, ignore_indented: bool) -> bool:
    """Apply the doc-line test plus the optional indentation exclusion."""
    if not is_doc_line(line, prefix):
        return False
    if ignore_indented and is_indented_doc_line(line, prefix):
        return False
    return True


def strip_doc_prefix(line: str, prefix: str) -> str:
    """Return the comment text with the prefix and one following space removed."""
    content = line.strip()[len(prefix):]
    if content.startswith(" "):
        content = content[1:]
    return content


def is_blank(line: str) -> bool:
    return not line.strip()


__all__ = [
    "DEFAULT_PREFIX",
    "is_blank",
    "is_boundary_doc_line",
    "is_doc_line",
    "is_indented_doc_line",
    "strip_doc_prefix",
]
