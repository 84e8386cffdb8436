# tests/parser_tests/test_parser_basic.py
# This file is part of Vigil - An LTL Runtime Verification
#
# Test suite for textual LTL formulas and their precedence

import pytest

from ltl import (
    Always,
    And,
    Eventually,
    Implies,
    Literal,
    Next,
    Not,
    Or,
    Predicate,
    evaluate,
)
from parser import parse_formula
from parser.lexer import LTLLexer


def names(source):
    """Parse with a resolver that turns identifiers into labelled literals."""
    return parse_formula(source, lambda name: Literal(True, name))


class TestLexer:
    """Token classification for keywords, numbers and strings."""

    def test_keywords_and_identifiers(self):
        tokens = [t.type for t in LTLLexer().tokenize("always(req) -> eventually_x")]
        assert tokens == ["ALWAYS", "LPAREN", "ID", "RPAREN", "IMPLIES", "ID"]

    def test_numbers_and_strings(self):
        tokens = list(LTLLexer().tokenize("within(2.5, 'seconds')"))
        assert [t.type for t in tokens] == ["WITHIN", "LPAREN", "NUMBER", "COMMA", "STRING", "RPAREN"]
        assert tokens[2].value == 2.5
        assert tokens[4].value == "seconds"

    def test_integer_values(self):
        token = next(iter(LTLLexer().tokenize("250")))
        assert token.value == 250 and isinstance(token.value, int)


class TestStructure:
    """Formulas parse into the expected node shapes."""

    def test_identifier_is_resolved(self):
        assert names("p") == Literal(True, "p")

    def test_constants(self):
        assert names("true") == Literal(True, "true")
        assert names("false") == Literal(False, "false")

    def test_temporal_operators(self):
        assert isinstance(names("always(p)"), Always)
        assert isinstance(names("eventually(p)"), Eventually)
        assert isinstance(names("next(p)"), Next)

    def test_bounds(self):
        assert names("always(p).within(5, seconds)").bound_millis == 5000.0
        assert names('eventually(p).within(250, "milliseconds")').bound_millis == 250.0
        assert names("eventually(p).within(1.5, 'seconds')").bound_millis == 1500.0

    def test_not_binds_tighter_than_and(self):
        f = names("!p & q")
        assert isinstance(f, And) and isinstance(f.left, Not)

    def test_and_binds_tighter_than_or(self):
        f = names("p | q & r")
        assert isinstance(f, Or) and isinstance(f.right, And)

    def test_implies_is_lowest_and_right_associative(self):
        f = names("p | q -> r -> s")
        assert isinstance(f, Implies)
        assert isinstance(f.left, Or)
        assert isinstance(f.right, Implies)

    def test_parentheses_override_precedence(self):
        f = names("(p -> q) & r")
        assert isinstance(f, And) and isinstance(f.left, Implies)

    def test_negated_bounded_temporal(self):
        f = names("!always(p).within(1, seconds)")
        assert isinstance(f, Not)
        assert f.subformula.bound_millis == 1000.0

    @pytest.mark.parametrize("source", [
        "always(req -> eventually(ack))",
        "!(p & q) | next(r)",
        "always(p).within(2000, milliseconds)",
    ])
    def test_string_form_reparses_to_same_formula(self, source):
        first = names(source)
        assert names(str(first)) == first


class TestResolvedPropositions:
    """Parsed formulas over Snapshot propositions."""

    def test_propositions_read_snapshot(self, registry, resolve, snapshots):
        f = parse_formula("req & !ack", resolve)
        assert isinstance(f.left, Predicate)

        s0, s1 = snapshots("req", "req,ack")
        assert evaluate(f, registry.register(s0)).is_true
        assert evaluate(f, registry.register(s1)).is_false
