"""Heuristic identifier derivation from signature lines.

Identifiers are derived without parsing the target language. Rules are tried
in order and the first one that yields a name wins:

1. ``class Foo`` / ``struct Foo`` at the start of the signature.
2. The first word directly followed by ``(``, which covers most call and
   definition syntax in C-family languages. Parenthesised keywords such as
   ``if (`` are picked up too; that is a known limitation of the heuristic.
3. The first whitespace-delimited token.

When no rule matches the caller synthesises ``unnamed_<k>``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional, Pattern, Sequence


@dataclass(frozen=True)
class IdentifierRule:
    """Named regex rule returning the first capture group on a match."""

    name: str
    pattern: Pattern[str]
    anchored: bool = False

    def apply(self, signature: str) -> Optional[str]:
        match = self.pattern.match(signature) if self.anchored else self.pattern.search(signature)
        if match is None:
            return None
        return match.group(1) or None


@dataclass(frozen=True)
class FirstTokenRule:
    """Falls back to the first whitespace-delimited token."""

    name: str = "first-token"

    def apply(self, signature: str) -> Optional[str]:
        tokens = signature.split()
        return tokens[0] if tokens else None


CLASS_RULE = IdentifierRule(
    name="class",
    pattern=re.compile(r"(?:class|struct)\s+(\w+)", re.ASCII),
    anchored=True,
)
CALL_RULE = IdentifierRule(name="call", pattern=re.compile(r"(\w+)\s*\(", re.ASCII))
FIRST_TOKEN_RULE = FirstTokenRule()

DEFAULT_RULES: Sequence[IdentifierRule | FirstTokenRule] = (
    CLASS_RULE,
    CALL_RULE,
    FIRST_TOKEN_RULE,
)

_UNNAMED_FMT = "unnamed_{index}"


def derive_identifier(
    signature: str,
    rules: Sequence[IdentifierRule | FirstTokenRule] = DEFAULT_RULES,
) -> str:
    """Return the identifier produced by the first matching rule, or an empty string."""
    for rule in rules:
        identifier = rule.apply(signature)
        if identifier:
            return identifier
    return ""


def unnamed_identifier(index: int) -> str:
    """Synthesised identifier for the element at ``index`` in its file."""
    return _UNNAMED_FMT.format(index=index)


__all__ = [
    "CALL_RULE",
    "CLASS_RULE",
    "DEFAULT_RULES",
    "FIRST_TOKEN_RULE",
    "FirstTokenRule",
    "IdentifierRule",
    "derive_identifier",
    "unnamed_identifier",
]
