"""Comment and element extraction engine."""

from __future__ import annotations

from .backlinks import anchor_for, build_index, resolve_backlinks, resolve_file_backlinks
from .comments import DEFAULT_PREFIX, is_doc_line, is_indented_doc_line, strip_doc_prefix
from .extract import (
    clean_signature,
    extract_elements,
    extract_module_description,
    parse_file,
    parse_text,
)
from .identifiers import DEFAULT_RULES, derive_identifier, unnamed_identifier

__all__ = [
    "DEFAULT_PREFIX",
    "DEFAULT_RULES",
    "anchor_for",
    "build_index",
    "clean_signature",
    "derive_identifier",
    "extract_elements",
    "extract_module_description",
    "is_doc_line",
    "is_indented_doc_line",
    "parse_file",
    "parse_text",
    "resolve_backlinks",
    "resolve_file_backlinks",
    "strip_doc_prefix",
    "unnamed_identifier",
]
