"""Core data models shared across kdoc components."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Dict, Iterator, List, Mapping, Optional

if TYPE_CHECKING:
    from .git.info import FileInfo


@dataclass
class Element:
    """A documented element: a comment run paired with its signature line."""

    identifier: str
    description: str
    signature: str


@dataclass
class SourceFile:
    """Documentation extracted from a single source file."""

    language: str
    path: str
    module_description: str = ""
    elements: List[Element] = field(default_factory=list)
    git_info: Optional["FileInfo"] = None


class ElementIndex(Mapping[str, str]):
    """Read-only snapshot mapping identifiers to rendered locations."""

    def __init__(self, entries: Mapping[str, str] | None = None) -> None:
        self._entries: Mapping[str, str] = MappingProxyType(dict(entries or {}))

    def __getitem__(self, identifier: str) -> str:
        return self._entries[identifier]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"ElementIndex({dict(self._entries)!r})"

    def as_dict(self) -> Dict[str, str]:
        return dict(self._entries)
