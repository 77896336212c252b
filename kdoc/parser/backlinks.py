"""Identifier index construction and backlink rewriting."""

from __future__ import annotations

import re
from typing import Dict, Iterable, Mapping, Tuple

from ..models import ElementIndex, SourceFile

_BACKLINK_PATTERN = re.compile(r"\[([^\]]+)\]")


def anchor_for(identifier: str) -> str:
    """Heading anchor used for an element identifier."""
    return identifier.replace(" ", "-").lower()


def build_index(entries: Iterable[Tuple[SourceFile, str]]) -> ElementIndex:
    """Build the identifier index from ``(file, output_basename)`` pairs.

    Must only be called once every file has been parsed. Duplicate
    identifiers are not deduplicated; the last file seen wins.
    """
    locations: Dict[str, str] = {}
    for source_file, output_name in entries:
        for element in source_file.elements:
            locations[element.identifier] = f"{output_name}#{anchor_for(element.identifier)}"
    return ElementIndex(locations)


def resolve_backlinks(text: str, index: Mapping[str, str], prefix: str = "") -> str:
    """Rewrite ``[name]`` tokens that name an indexed identifier into markdown links.

    Unknown tokens are left untouched. Running this twice over the same text
    links the inner ``[name]`` of an earlier rewrite again, so callers resolve
    each description exactly once. ``prefix`` is accepted so every pass shares
    the same call shape; it does not affect matching.
    """

    def _replace(match: re.Match[str]) -> str:
        target = match.group(1)
        location = index.get(target)
        if location is None:
            return match.group(0)
        return f"[{target}]({location})"

    return _BACKLINK_PATTERN.sub(_replace, text)


def resolve_file_backlinks(source_file: SourceFile, index: Mapping[str, str], prefix: str = "") -> SourceFile:
    """Rewrite the module and element descriptions of ``source_file`` in place."""
    source_file.module_description = resolve_backlinks(source_file.module_description, index, prefix)
    for element in source_file.elements:
        element.description = resolve_backlinks(element.description, index, prefix)
    return source_file


__all__ = ["anchor_for", "build_index", "resolve_backlinks", "resolve_file_backlinks"]
