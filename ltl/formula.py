# ltl/formula.py
# This file is part of Vigil - An LTL Runtime Verification
#
# Formula algebra: immutable LTL combinator trees

"""Formula classes for LTL properties evaluated over observed states.

This module defines the closed set of immutable, hashable node classes that
make up an LTL formula, and the construction functions users build them with.
Leaves are fixed truth values (Literal) or zero-argument thunks (Predicate)
that read extraction cells and are re-evaluated at every time step. Composite
nodes are the Boolean connectives and the temporal operators next, always and
eventually, the latter two optionally bounded in time with `within`.

Node Types:
    Literal: Fixed truth value with a description
    Predicate: Thunk returning a bool or a Formula, re-run at every step
    Not, And, Or, Implies: Boolean connectives evaluated at the same time
    Next: Holds iff its operand holds at the following state
    Always, Eventually: Temporal operators with an optional millisecond bound

No simplification happens at construction time; all reduction is done by the
evaluator. All nodes support the visitor design pattern for evaluation.
"""

from __future__ import annotations
import ast
import linecache
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import Callable, Optional, Protocol, Tuple, Union

from runtime.registry import format_millis
from .exceptions import FormulaConstructionError


class FormulaVisitor(Protocol):
    """Interface for visitors over the closed set of formula variants.

    Implementations must provide one visit method per variant; a type checker
    reports any implementation that misses one.
    """

    def visit_literal(self, n: Literal, time): ...

    def visit_predicate(self, n: Predicate, time): ...

    def visit_not(self, n: Not, time): ...

    def visit_and(self, n: And, time): ...

    def visit_or(self, n: Or, time): ...

    def visit_implies(self, n: Implies, time): ...

    def visit_next(self, n: Next, time): ...

    def visit_always(self, n: Always, time): ...

    def visit_eventually(self, n: Eventually, time): ...


class TimeUnit(Enum):
    """Units accepted by `within`; bounds are normalized to milliseconds."""

    MILLISECONDS = "milliseconds"
    SECONDS = "seconds"

    @property
    def millis(self) -> int:
        return 1000 if self is TimeUnit.SECONDS else 1


@dataclass(frozen=True, slots=True)
class Formula:
    """Base class for all formula nodes.

    Provides the fluent Boolean combinators. Operands of `and_`, `or_` and
    `implies` may be formulas, booleans or zero-argument functions; functions
    are lifted into Predicate nodes.
    """

    def accept(self, v: FormulaVisitor, time):
        """Dispatch to the visit method for this node type.

        Args:
            v: Visitor instance to process this node
            time: Time the node is evaluated at

        Raises:
            NotImplementedError: Must be implemented by subclasses
        """
        raise NotImplementedError

    def not_(self) -> Formula:
        return Not(self)

    def and_(self, that: IntoFormula, description: Optional[str] = None) -> Formula:
        return And(self, now(that, description))

    def or_(self, that: IntoFormula, description: Optional[str] = None) -> Formula:
        return Or(self, now(that, description))

    def implies(self, that: IntoFormula, description: Optional[str] = None) -> Formula:
        return Implies(self, now(that, description))

    def __and__(self, that: IntoFormula) -> Formula:
        return self.and_(that)

    def __or__(self, that: IntoFormula) -> Formula:
        return self.or_(that)

    def __invert__(self) -> Formula:
        return Not(self)


@dataclass(frozen=True, slots=True)
class Literal(Formula):
    """Fixed truth value.

    Attributes:
        value: The truth value
        description: Human-readable label reported in violations
    """

    value: bool
    description: str

    def accept(self, v: FormulaVisitor, time):
        return v.visit_literal(self, time)

    def __str__(self) -> str:
        return self.description


@dataclass(frozen=True, slots=True)
class Predicate(Formula):
    """Zero-argument thunk re-evaluated once per time step.

    The thunk reads extraction cells and returns either a bool (lifted to a
    Literal carrying this node's description) or a Formula, which is evaluated
    in its place at the same time.

    Attributes:
        thunk: The function to call at every step
        description: Label used in diagnostics only
    """

    thunk: Callable[[], Union[bool, Formula]]
    description: str

    def accept(self, v: FormulaVisitor, time):
        return v.visit_predicate(self, time)

    def __str__(self) -> str:
        return self.description


@dataclass(frozen=True, slots=True)
class Not(Formula):
    subformula: Formula

    def accept(self, v: FormulaVisitor, time):
        return v.visit_not(self, time)

    def __str__(self) -> str:
        return f"!{self.subformula}"


@dataclass(frozen=True, slots=True)
class And(Formula):
    left: Formula
    right: Formula

    def accept(self, v: FormulaVisitor, time):
        return v.visit_and(self, time)

    def __str__(self) -> str:
        return f"({self.left} & {self.right})"


@dataclass(frozen=True, slots=True)
class Or(Formula):
    left: Formula
    right: Formula

    def accept(self, v: FormulaVisitor, time):
        return v.visit_or(self, time)

    def __str__(self) -> str:
        return f"({self.left} | {self.right})"


@dataclass(frozen=True, slots=True)
class Implies(Formula):
    left: Formula
    right: Formula

    def accept(self, v: FormulaVisitor, time):
        return v.visit_implies(self, time)

    def __str__(self) -> str:
        return f"({self.left} -> {self.right})"


@dataclass(frozen=True, slots=True)
class Next(Formula):
    """Holds iff the subformula holds at the following state."""

    subformula: Formula

    def accept(self, v: FormulaVisitor, time):
        return v.visit_next(self, time)

    def __str__(self) -> str:
        return f"next({self.subformula})"


@dataclass(frozen=True, slots=True)
class Always(Formula):
    """The subformula must hold at every state, optionally only for a bounded window.

    Attributes:
        subformula: Formula checked at every state
        bound_millis: Window length in milliseconds, or None for unbounded
    """

    subformula: Formula
    bound_millis: Optional[float] = None

    def accept(self, v: FormulaVisitor, time):
        return v.visit_always(self, time)

    def within(self, n: float, unit: Union[TimeUnit, str]) -> Always:
        """Return a copy bounded to `n` units.

        Raises:
            FormulaConstructionError: If a bound is already set or the bound is invalid
        """
        if self.bound_millis is not None:
            raise FormulaConstructionError("time bound is already set for `always`")
        return Always(self.subformula, _normalize_bound(n, unit))

    def __str__(self) -> str:
        if self.bound_millis is None:
            return f"always({self.subformula})"
        return f"always({self.subformula}).within({format_millis(self.bound_millis)}, milliseconds)"


@dataclass(frozen=True, slots=True)
class Eventually(Formula):
    """The subformula must hold at some state, optionally before a deadline.

    Attributes:
        subformula: Formula looked for at every state
        bound_millis: Deadline in milliseconds after the first check, or None
    """

    subformula: Formula
    bound_millis: Optional[float] = None

    def accept(self, v: FormulaVisitor, time):
        return v.visit_eventually(self, time)

    def within(self, n: float, unit: Union[TimeUnit, str]) -> Eventually:
        """Return a copy bounded to `n` units.

        Raises:
            FormulaConstructionError: If a bound is already set or the bound is invalid
        """
        if self.bound_millis is not None:
            raise FormulaConstructionError("time bound is already set for `eventually`")
        return Eventually(self.subformula, _normalize_bound(n, unit))

    def __str__(self) -> str:
        if self.bound_millis is None:
            return f"eventually({self.subformula})"
        return f"eventually({self.subformula}).within({format_millis(self.bound_millis)}, milliseconds)"


IntoFormula = Union[Formula, bool, Callable[[], Union[bool, Formula]]]


def _normalize_bound(n: float, unit: Union[TimeUnit, str]) -> float:
    if isinstance(n, bool) or not isinstance(n, (int, float)):
        raise FormulaConstructionError(f"time bound must be a number, got {n!r}")
    if n < 0:
        raise FormulaConstructionError(f"time bound must be non-negative, got {n}")
    try:
        unit = TimeUnit(unit)
    except ValueError:
        raise FormulaConstructionError(
            f"unknown time unit {unit!r}, expected one of "
            f"{[u.value for u in TimeUnit]}"
        ) from None
    return float(n * unit.millis)


@lru_cache(maxsize=None)
def _lambdas_in(filename: str) -> Tuple[Tuple[ast.Lambda, ...], str]:
    source = "".join(linecache.getlines(filename))
    try:
        tree = ast.parse(source)
    except (SyntaxError, ValueError):
        return (), source
    return tuple(n for n in ast.walk(tree) if isinstance(n, ast.Lambda)), source


def _encloses(node: ast.AST, position) -> bool:
    line, end_line, col, end_col = position
    return ((node.lineno, node.col_offset) <= (line, col)
            and (end_line, end_col) <= (node.end_lineno, node.end_col_offset))


def _find_lambda(code) -> Optional[Tuple[ast.Lambda, str]]:
    lambdas, source = _lambdas_in(code.co_filename)
    candidates = [n for n in lambdas if n.lineno == code.co_firstlineno]
    if len(candidates) > 1 and hasattr(code, "co_positions"):
        positions = [p for p in code.co_positions() if None not in p]
        scored = [(sum(_encloses(n, p) for p in positions), n) for n in candidates]
        best = max(score for score, _ in scored)
        # An enclosing lambda covers the same positions; the tightest span owns the code
        candidates = sorted(
            (n for score, n in scored if score == best and score > 0),
            key=lambda n: (n.end_lineno - n.lineno, n.end_col_offset - n.col_offset),
        )[:1]
    if len(candidates) != 1:
        return None
    return candidates[0], source


def describe(function: Callable) -> str:
    """Best-effort label for a predicate function, for diagnostics only.

    For a lambda this is the source text of its body; for a named function
    its qualified name. Falls back to repr() when the lambda cannot be told
    apart from others on its line or no source is available.
    """
    name = getattr(function, "__name__", None)
    if name is not None and name != "<lambda>":
        return getattr(function, "__qualname__", name)

    code = getattr(function, "__code__", None)
    found = _find_lambda(code) if code is not None else None
    if found is None:
        return repr(function)

    node, source = found
    body = ast.get_source_segment(source, node.body)
    if body is None:
        return repr(function)
    return " ".join(body.split())


def pure(value: bool, description: Optional[str] = None) -> Literal:
    """Fixed truth value; the description defaults to 'true' or 'false'."""
    return Literal(bool(value), description or str(bool(value)).lower())


def now(x: IntoFormula, description: Optional[str] = None) -> Formula:
    """Lift a formula-convertible value into a Formula.

    Args:
        x: A Formula (returned unchanged), a bool (lifted to a Literal) or a
            zero-argument function (lifted to a Predicate)
        description: Label for a lifted function; derived from its source
            text when omitted

    Raises:
        FormulaConstructionError: If `x` cannot be converted
    """
    if isinstance(x, Formula):
        return x
    if isinstance(x, bool):
        return pure(x, description)
    if callable(x):
        return Predicate(x, description or describe(x))
    raise FormulaConstructionError(
        f"cannot convert {type(x).__name__} into a formula: {x!r}"
    )


def not_(x: IntoFormula) -> Formula:
    return Not(now(x))


def next_(x: IntoFormula) -> Formula:
    return Next(now(x))


def always(x: IntoFormula, description: Optional[str] = None) -> Always:
    """Unbounded `always`; bound it with `.within(n, unit)`."""
    return Always(now(x, description))


def eventually(x: IntoFormula, description: Optional[str] = None) -> Eventually:
    """Unbounded `eventually`; bound it with `.within(n, unit)`."""
    return Eventually(now(x, description))
