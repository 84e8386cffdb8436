# parser/lexer.py
# This file is part of Vigil - An LTL Runtime Verification
#
# Lexical analyzer for LTL formula tokenization using SLY

"""Lexical analyzer for LTL formula strings.

This module breaks textual LTL properties into tokens for the parser. It
distinguishes the temporal keywords from proposition identifiers and
recognizes the numeric bounds and unit names of `.within(n, unit)`.

Supported Tokens:
- Operators: !, &, |, ->, (, ), ., ,
- Keywords: always, eventually, next, within, true, false
- Numbers: integer or decimal time bounds
- Strings: quoted unit names
- Identifiers: propositional variables and bare unit names
- Whitespace: ignored during tokenization
"""

from sly import Lexer
from utils.logger import get_logger


class LTLLexer(Lexer):
    """SLY-based lexer for LTL formula tokenization.

    Attributes:
        tokens: Set of valid token types
        ignore: Characters to skip during tokenization
        ID: Identifier pattern with keyword mapping
    """

    tokens = {
        "ALWAYS",
        "EVENTUALLY",
        "NEXT",
        "WITHIN",
        "TRUE",
        "FALSE",
        "ID",
        "NUMBER",
        "STRING",
        "NOT",
        "AND",
        "OR",
        "IMPLIES",
        "LPAREN",
        "RPAREN",
        "DOT",
        "COMMA",
    }

    ignore = " \t\r\n"

    # Operator and punctuation tokens
    IMPLIES = r"->"
    NOT = r"!"
    AND = r"&"
    OR = r"\|"
    LPAREN = r"\("
    RPAREN = r"\)"
    DOT = r"\."
    COMMA = r","

    @_(r"\d+(?:\.\d+)?")
    def NUMBER(self, t):
        t.value = float(t.value) if "." in t.value else int(t.value)
        return t

    @_(r"\"[^\"]*\"", r"'[^']*'")
    def STRING(self, t):
        t.value = t.value[1:-1]
        return t

    ID = r"[a-zA-Z_][a-zA-Z0-9_]*"

    # Reserved words
    ID["always"] = "ALWAYS"
    ID["eventually"] = "EVENTUALLY"
    ID["next"] = "NEXT"
    ID["within"] = "WITHIN"
    ID["true"] = "TRUE"
    ID["false"] = "FALSE"

    def error(self, t):
        """Handle illegal characters during tokenization.

        Args:
            t: SLY token object containing error context

        Raises:
            ValueError: Always raised with character and position information
        """
        logger = get_logger()

        illegal_char = t.value[0]
        error_pos = self.index

        logger.debug(f"Illegal character '{illegal_char}' at position {error_pos}")
        self.index += 1

        raise ValueError(
            f"Illegal character '{illegal_char}' encountered at position {error_pos}"
        )
