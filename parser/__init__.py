# parser/__init__.py
# This file is part of Vigil - An LTL Runtime Verification
#
# Formula and property-file parsing for textual LTL properties

"""Textual LTL formulas and property files.

The parsing pipeline turns formula text straight into ltl.Formula trees.
Proposition names are not interpreted by the parser: a resolver callback
maps each identifier to a formula, so the same text can be checked over any
state type.

Core Functions:
    parse_formula: Converts one formula string into a Formula
    parse_specification: Reads a `name: formula` property file

Supported Syntax:
    - Boolean connectives: !, &, |, -> and parentheses
    - Temporal operators: always(f), eventually(f), next(f)
    - Bounds: always(f).within(5, seconds), eventually(f).within(250, "milliseconds")
    - Constants true and false, and proposition identifiers

Example:
    >>> from model import proposition_resolver
    >>> from runtime import Registry
    >>> resolve = proposition_resolver(Registry())
    >>> str(parse_formula("always(req -> eventually(ack))", resolve))
    'always((req -> eventually(ack)))'
"""

from typing import Callable, Dict

from ltl.formula import Formula
from .exceptions import ParseError
from .grammar import _LTLParser
from utils.logger import get_logger


def parse_formula(source: str, resolve: Callable[[str], Formula]) -> Formula:
    """Parse an LTL formula string into a Formula.

    Uses a fresh parser instance for each invocation.

    Args:
        source: Formula text to parse
        resolve: Maps every proposition identifier to a Formula

    Returns:
        Root node of the parsed formula

    Raises:
        ParseError: Formula syntax is malformed or a bound is invalid
    """
    logger = get_logger()
    logger.debug(f"Parsing formula: {source}")

    parser = _LTLParser(resolve)

    try:
        result = parser.parse(source)
        logger.debug(f"Formula parsed successfully: {result}")
        return result

    except ParseError:
        logger.debug("ParseError encountered during formula parsing")
        raise

    except Exception as exc:
        logger.debug(f"Unexpected parsing error: {type(exc).__name__}: {exc}")
        raise ParseError(str(exc)) from exc


def parse_specification(text: str, resolve: Callable[[str], Formula]) -> Dict[str, Formula]:
    """Parse a property file into named formulas.

    Each non-blank line not starting with '#' has the form `name: formula`.
    Properties keep their file order.

    Args:
        text: Contents of the property file
        resolve: Maps every proposition identifier to a Formula

    Returns:
        Mapping from property name to formula

    Raises:
        ParseError: A line has no name, a name repeats, or a formula fails to parse
    """
    logger = get_logger()
    properties: Dict[str, Formula] = {}

    for lineno, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        if not line or line.startswith("#"):
            continue

        name, sep, source = line.partition(":")
        name = name.strip()
        if not sep or not name:
            raise ParseError(f"Line {lineno}: expected 'name: formula', got '{line}'")
        if not name.isidentifier():
            raise ParseError(f"Line {lineno}: invalid property name '{name}'")
        if name in properties:
            raise ParseError(f"Line {lineno}: duplicate property name '{name}'")

        try:
            properties[name] = parse_formula(source, resolve)
        except ParseError as exc:
            raise ParseError(f"Line {lineno} ({name}): {exc}") from exc

    if not properties:
        raise ParseError("Property file contains no properties")

    logger.debug(f"Parsed {len(properties)} properties: {', '.join(properties)}")
    return properties


__all__ = ["parse_formula", "parse_specification", "ParseError"]

__version__ = "1.0.0"
__description__ = "LTL formula and property-file parsing"
