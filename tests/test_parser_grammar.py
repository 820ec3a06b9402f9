from __future__ import annotations

import pytest

from tests.support.harness import CulebraSyntaxError, parse_source
from culebra_ref.ast_transforms import split_interpolation
from culebra_ref.tree import tree_children, tree_label

PARSE_OK_CASES = [
    pytest.param("1 + 2", "additive", id="additive"),
    pytest.param("1 * 2 % 3", "multiplicative", id="multiplicative"),
    pytest.param("1 < 2", "condition", id="condition"),
    pytest.param("a or b", "logical_or", id="or-word"),
    pytest.param("a || b", "logical_or", id="or-symbol"),
    pytest.param("a and b", "logical_and", id="and-word"),
    pytest.param("a && b", "logical_and", id="and-symbol"),
    pytest.param("-a", "unary_minus", id="unary-minus"),
    pytest.param("+a", "unary_plus", id="unary-plus"),
    pytest.param("!a", "unary_not", id="unary-not"),
    pytest.param("f(1, 2)", "call", id="call"),
    pytest.param("a[0]", "call", id="index"),
    pytest.param("a.b", "call", id="dot"),
    pytest.param("x = 1", "assignment", id="assignment"),
    pytest.param("mut x = 1", "assignment", id="assignment-mut"),
    pytest.param("a.b = 1", "property_assignment", id="property-assignment"),
    pytest.param("a.b.c = 1", "property_assignment", id="property-assignment-chain"),
    pytest.param("a[0].b = 1", "property_assignment", id="property-assignment-after-index"),
    pytest.param("fn(a, mut b) { a }", "function", id="function"),
    pytest.param("while x { }", "while_loop", id="while"),
    pytest.param("if x { 1 } else if y { 2 } else { 3 }", "if_chain", id="if-chain"),
    pytest.param("{a: 1, b: 2}", "object", id="object"),
    pytest.param("[1, 2]", "array", id="array"),
    pytest.param('"a${b}c"', "interpolated_string", id="interpolated-string"),
]


@pytest.mark.parametrize("source, label", PARSE_OK_CASES)
def test_statement_shape(source: str, label: str) -> None:
    tree = parse_source(source)

    assert tree_label(tree) == "statements"
    (stmt,) = tree_children(tree)
    assert tree_label(stmt) == label


PARSE_ERROR_CASES = [
    pytest.param("1 +", id="dangling-operator"),
    pytest.param("(1", id="unclosed-paren"),
    pytest.param("[1, 2", id="unclosed-array"),
    pytest.param("2 * -3", id="unary-after-mul"),
    pytest.param("1 @ 2", id="bad-character"),
    pytest.param("f() = 1", id="assign-to-call"),
    pytest.param("a[0] = 1", id="assign-to-index"),
    pytest.param("1 = 2", id="assign-to-literal"),
    pytest.param("mut a.b = 1", id="mut-property"),
    pytest.param("fn x { }", id="function-without-params"),
    pytest.param("while = 1", id="keyword-as-name"),
    pytest.param("{a 1}", id="object-missing-colon"),
]


@pytest.mark.parametrize("source", PARSE_ERROR_CASES)
def test_syntax_errors(source: str) -> None:
    with pytest.raises(CulebraSyntaxError) as exc_info:
        parse_source(source)

    err = exc_info.value
    assert err.message.startswith(("syntax error", "invalid assignment target", "'mut'", "unterminated"))
    assert err.line >= 1


def test_number_and_identifier_stay_tokens() -> None:
    tree = parse_source("1; x; true")
    kinds = [child.type for child in tree_children(tree)]

    assert kinds == ["NUMBER", "IDENTIFIER", "BOOLEAN"]


def test_keyword_prefixed_identifiers() -> None:
    tree = parse_source("iffy; trueish; fnord; mutable")
    kinds = [child.type for child in tree_children(tree)]

    assert kinds == ["IDENTIFIER"] * 4


def test_single_quoted_string_loses_quotes() -> None:
    (tok,) = tree_children(parse_source("'abc'"))

    assert tok.type == "STRING"
    assert tok.value == "abc"


def test_assignment_children() -> None:
    (stmt,) = tree_children(parse_source("mut x = 1"))
    mut_tok, name_tok, value = stmt.children

    assert mut_tok.type == "MUTABLE"
    assert name_tok.value == "x"
    assert value.type == "NUMBER"


def test_assignment_without_mut_has_placeholder() -> None:
    (stmt,) = tree_children(parse_source("x = 1"))

    assert stmt.children[0] is None


def test_property_assignment_children() -> None:
    (stmt,) = tree_children(parse_source("a.b.c = 1"))
    receiver, name_tok, value = stmt.children

    assert tree_label(receiver) == "call"
    assert name_tok.value == "c"
    assert value.type == "NUMBER"


def test_invalid_assignment_target_message() -> None:
    with pytest.raises(CulebraSyntaxError) as exc_info:
        parse_source("x\nf() = 1")

    err = exc_info.value
    assert err.message == "invalid assignment target"
    assert (err.line, err.column) == (2, 1)


def test_unexpected_character_position() -> None:
    with pytest.raises(CulebraSyntaxError) as exc_info:
        parse_source("1 @ 2")

    err = exc_info.value
    assert err.message == "syntax error, unexpected character '@'"
    assert (err.line, err.column) == (1, 3)
    assert str(err) == "1:3: syntax error, unexpected character '@'"


def test_unexpected_token_message() -> None:
    with pytest.raises(CulebraSyntaxError) as exc_info:
        parse_source("1 + )")

    assert exc_info.value.message == "syntax error, unexpected ')'"


def test_comments_are_ignored() -> None:
    tree = parse_source("1 // one\n// two\n2")

    assert len(tree_children(tree)) == 2


def test_split_interpolation_parts() -> None:
    assert split_interpolation("a${x}b") == [
        ("text", "a", 0),
        ("expr", "x", 3),
        ("text", "b", 5),
    ]


def test_split_interpolation_nested_braces() -> None:
    assert split_interpolation("${ {a: 1}.a }") == [("expr", " {a: 1}.a ", 2)]


def test_split_interpolation_escapes() -> None:
    assert split_interpolation(r"\${x} \n") == [("text", "${x} \n", 0)]


def test_split_interpolation_unknown_escape_kept() -> None:
    assert split_interpolation(r"\q") == [("text", "\\q", 0)]


STATEMENT_SPLIT_CASES = [
    pytest.param("a\n[1, 2]", ["IDENTIFIER", "array"], id="list-after-name"),
    pytest.param("a\n[]", ["IDENTIFIER", "array"], id="empty-list-after-name"),
    pytest.param("a[]", ["IDENTIFIER", "array"], id="empty-brackets-same-line"),
    pytest.param("f()\n[[1], 2]", ["call", "array"], id="nested-list-after-call"),
    pytest.param("if x { 1 }\n[1, 2]", ["if_chain", "array"], id="list-after-block"),
    pytest.param("a\n[0]", ["call"], id="index-after-newline"),
    pytest.param("a[b[0]]", ["call"], id="nested-index"),
    pytest.param("a[[1, 2].size()]", ["call"], id="index-with-list-inside"),
    pytest.param("x = [1, 2]", ["assignment"], id="list-after-equals"),
]


@pytest.mark.parametrize("source, kinds", STATEMENT_SPLIT_CASES)
def test_list_literal_starts_new_statement(source: str, kinds: list[str]) -> None:
    tree = parse_source(source)
    actual = [tree_label(child) or child.type for child in tree_children(tree)]

    assert actual == kinds
