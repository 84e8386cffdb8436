# parser/grammar.py
# This file is part of Vigil - An LTL Runtime Verification
#
# LALR(1) grammar and parser for LTL formulas using SLY

"""LTL grammar implementation using SLY parser generator.

The parser builds ltl.Formula trees directly from the token stream. Every
identifier is handed to a resolver callback that turns a proposition name
into a formula, typically a predicate over an extraction cell.

Grammar Features:
- Boolean operators (NOT, AND, OR, IMPLIES) with standard precedence
- Temporal operators always, eventually and next in functional notation
- Optional `.within(n, unit)` bound on always and eventually
- Parenthetical grouping for precedence override

Operator Precedence (lowest to highest):
- IMPLIES ('->'): right-associative
- OR ('|'): left-associative
- AND ('&'): left-associative
- NOT ('!'): right-associative
"""

from typing import Callable

from sly import Parser

from ltl.exceptions import FormulaConstructionError
from ltl.formula import And, Formula, Implies, Next, Not, Or, always, eventually, pure
from .lexer import LTLLexer
from .exceptions import ParseError
from utils.logger import get_logger


class _LTLParser(Parser):
    """SLY-based LALR(1) parser for LTL formulas.

    Attributes:
        tokens: Token types from LTLLexer
        precedence: Operator precedence and associativity rules
        resolve: Callback mapping a proposition name to a Formula
    """

    tokens = LTLLexer.tokens

    precedence = (
        ("right", "IMPLIES"),
        ("left", "OR"),
        ("left", "AND"),
        ("right", "NOT"),
    )

    def __init__(self, resolve: Callable[[str], Formula]):
        self.resolve = resolve

    @_("expr")
    def start(self, p) -> Formula:
        return p.expr

    @_("NOT expr")
    def expr(self, p) -> Formula:
        return Not(p.expr)

    @_("expr AND expr")
    def expr(self, p) -> Formula:
        return And(p.expr0, p.expr1)

    @_("expr OR expr")
    def expr(self, p) -> Formula:
        return Or(p.expr0, p.expr1)

    @_("expr IMPLIES expr")
    def expr(self, p) -> Formula:
        return Implies(p.expr0, p.expr1)

    @_("NEXT LPAREN expr RPAREN")
    def expr(self, p) -> Formula:
        return Next(p.expr)

    @_("LPAREN expr RPAREN")
    def expr(self, p) -> Formula:
        return p.expr

    @_("temporal")
    def expr(self, p) -> Formula:
        return p.temporal

    @_("literal")
    def expr(self, p) -> Formula:
        return p.literal

    # Temporal operators and their bounds
    @_("ALWAYS LPAREN expr RPAREN")
    def temporal(self, p) -> Formula:
        return always(p.expr)

    @_("EVENTUALLY LPAREN expr RPAREN")
    def temporal(self, p) -> Formula:
        return eventually(p.expr)

    @_("temporal DOT WITHIN LPAREN NUMBER COMMA unit RPAREN")
    def temporal(self, p) -> Formula:
        try:
            return p.temporal.within(p.NUMBER, p.unit)
        except FormulaConstructionError as exc:
            raise ParseError(f"Invalid bound: {exc}") from exc

    @_("ID")
    def unit(self, p) -> str:
        return p.ID

    @_("STRING")
    def unit(self, p) -> str:
        return p.STRING

    # Literal grammar rules
    @_("ID")
    def literal(self, p) -> Formula:
        """Identifier resolved to a proposition formula."""
        return self.resolve(p.ID)

    @_("TRUE")
    def literal(self, p) -> Formula:
        return pure(True)

    @_("FALSE")
    def literal(self, p) -> Formula:
        return pure(False)

    def parse(self, text: str) -> Formula:
        """Parse LTL formula text into a Formula.

        Args:
            text: LTL formula string to parse

        Returns:
            Root node of the constructed formula

        Raises:
            ParseError: If the formula is empty or contains syntax errors
        """
        logger = get_logger()
        logger.debug(f"Parsing formula: {text}")

        try:
            result = super().parse(LTLLexer().tokenize(text))

            if result is None and text.strip() == "":
                raise ParseError("Input formula is empty.")

            if result is None:
                raise ParseError("Failed to parse formula (syntax error).")

            logger.debug(f"Successfully parsed formula into {type(result).__name__}")
            return result

        except ParseError:
            logger.debug("Parse error encountered")
            raise
        except Exception as e:
            logger.debug(f"Unexpected parsing error: {e}")
            raise ParseError(f"Parse failed: {e}") from e

    def error(self, token):
        """Handle syntax errors during parsing.

        Args:
            token: Problematic token or None for EOF errors

        Raises:
            ParseError: Always raises with detailed error information
        """
        if token:
            error_msg = (
                f"Syntax error near '{token.value}' "
                f"(type: {token.type}) at line {token.lineno}, position {token.index}"
            )
        else:
            error_msg = "Syntax error: Unexpected end of formula"

        raise ParseError(error_msg)
