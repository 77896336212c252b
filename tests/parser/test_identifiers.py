"""Tests for kdoc.parser.identifiers."""

from __future__ import annotations

import re

import pytest

from kdoc.parser.identifiers import (
    CALL_RULE,
    CLASS_RULE,
    FIRST_TOKEN_RULE,
    IdentifierRule,
    derive_identifier,
    unnamed_identifier,
)


@pytest.mark.parametrize(
    ("signature", "expected"),
    [
        ("class Widget", "Widget"),
        ("struct Point : public Base", "Point"),
        ("int add(int a, int b)", "add"),
        ("static void reset (void)", "reset"),
        ("classify(value)", "classify"),
        ("template <typename T> class Vec", "template"),
        ("#define MAX_SIZE 64", "#define"),
        ("if (ready)", "if"),
        ("", ""),
    ],
)
def test_derive_identifier(signature: str, expected: str) -> None:
    assert derive_identifier(signature) == expected


def test_class_rule_is_anchored() -> None:
    assert CLASS_RULE.apply("class Widget") == "Widget"
    assert CLASS_RULE.apply("enum class Mode") is None


def test_each_rule_is_independent() -> None:
    signature = "Widget make_widget(int id)"

    assert CLASS_RULE.apply(signature) is None
    assert CALL_RULE.apply(signature) == "make_widget"
    assert FIRST_TOKEN_RULE.apply(signature) == "Widget"
    assert FIRST_TOKEN_RULE.apply("   ") is None


def test_rules_can_be_swapped() -> None:
    go_func = IdentifierRule(name="go-func", pattern=re.compile(r"func\s+(?:\([^)]*\)\s*)?(\w+)"), anchored=True)

    assert derive_identifier("func (p *Parser) Parse(x int)", rules=(go_func, CALL_RULE)) == "Parse"
    assert derive_identifier("Widget make_widget(int id)", rules=(FIRST_TOKEN_RULE,)) == "Widget"


def test_unnamed_identifier() -> None:
    assert unnamed_identifier(0) == "unnamed_0"
    assert unnamed_identifier(3) == "unnamed_3"
