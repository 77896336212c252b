"""Line-oriented extraction of module descriptions and documented elements."""

from __future__ import annotations

import re
from pathlib import Path
from typing import List, Sequence, Tuple

from ..models import Element, SourceFile
from .comments import (
    DEFAULT_PREFIX,
    is_blank,
    is_boundary_doc_line,
    is_doc_line,
    is_indented_doc_line,
    strip_doc_prefix,
)
from .identifiers import derive_identifier, unnamed_identifier

_TRAILING_BRACE = re.compile(r"\s*\{$")


def split_lines(text: str) -> List[str]:
    """Split raw file text on newlines, keeping a trailing empty line if present."""
    return text.split("\n")


def clean_signature(line: str) -> str:
    """Trim a signature line and drop a trailing opening brace."""
    return _TRAILING_BRACE.sub("", line.strip())


def extract_module_description(
    lines: Sequence[str],
    prefix: str = DEFAULT_PREFIX,
    ignore_indented: bool = False,
) -> Tuple[str, List[str]]:
    """Consume the leading comment run of a file.

    Returns the joined description and the remaining lines, starting at the
    first line that is not a doc comment. Indented doc lines are skipped
    without ending the run when ``ignore_indented`` is set.
    """
    description: List[str] = []
    index = 0
    while index < len(lines):
        line = lines[index]
        if not is_doc_line(line, prefix):
            break
        index += 1
        if ignore_indented and is_indented_doc_line(line, prefix):
            continue
        description.append(strip_doc_prefix(line, prefix))
    return "\n".join(description), list(lines[index:])


def extract_elements(
    lines: Sequence[str],
    prefix: str = DEFAULT_PREFIX,
    ignore_indented: bool = False,
) -> List[Element]:
    """Pair every comment run in ``lines`` with the signature line that follows it."""
    elements: List[Element] = []
    index = 0
    total = len(lines)

    while index < total:
        # seek: indentation exclusion only applies here, not while collecting
        if not is_boundary_doc_line(lines[index], prefix, ignore_indented):
            index += 1
            continue

        description: List[str] = []
        while index < total and is_doc_line(lines[index], prefix):
            description.append(strip_doc_prefix(lines[index], prefix))
            index += 1

        if not description:
            continue

        while index < total and (is_blank(lines[index]) or is_doc_line(lines[index], prefix)):
            index += 1

        signature = ""
        if index < total and not is_blank(lines[index]):
            signature = clean_signature(lines[index])
            index += 1

        identifier = derive_identifier(signature) or unnamed_identifier(len(elements))
        elements.append(
            Element(
                identifier=identifier,
                description="\n".join(description),
                signature=signature,
            )
        )

    return elements


def parse_text(
    text: str,
    *,
    path: str,
    language: str,
    prefix: str = DEFAULT_PREFIX,
    ignore_indented: bool = False,
) -> SourceFile:
    """Build a :class:`SourceFile` record from raw file text."""
    module_description, remainder = extract_module_description(
        split_lines(text), prefix, ignore_indented
    )
    return SourceFile(
        language=language,
        path=path,
        module_description=module_description,
        elements=extract_elements(remainder, prefix, ignore_indented),
    )


def parse_file(
    path: Path,
    *,
    language: str,
    prefix: str = DEFAULT_PREFIX,
    ignore_indented: bool = False,
) -> SourceFile:
    """Read ``path`` and parse it. Read errors propagate to the caller.

    Undecodable bytes are replaced rather than rejected, and only ``\\n`` ends
    a line, so a lone ``\\r`` stays inside the line it appears in.
    """
    with path.open(encoding="utf-8", errors="replace", newline="") as handle:
        text = handle.read()

    return parse_text(
        text,
        path=str(path),
        language=language,
        prefix=prefix,
        ignore_indented=ignore_indented,
    )


__all__ = [
    "clean_signature",
    "extract_elements",
    "extract_module_description",
    "parse_file",
    "parse_text",
    "split_lines",
]
